"""
Authentication module exceptions.

These exceptions are raised by the auth module and can be caught
by API error handlers to return appropriate HTTP responses.
"""

from shared.exceptions import AuthenticationError, ExternalServiceError, ValidationError


class MissingSessionError(AuthenticationError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="MISSING_SESSION")


class InvalidCredentialsError(AuthenticationError):
    """Raised when email/password sign-in is rejected."""

    def __init__(self, message: str = "Invalid login credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class CredentialRejectedError(AuthenticationError):
    """
    Raised when the provider refuses a credential outright.

    Covers revoked or reused refresh tokens and spent callback codes.
    Terminal: retrying with the same credential cannot succeed.
    """

    def __init__(self, message: str = "Credential rejected by auth provider"):
        super().__init__(message, code="CREDENTIAL_REJECTED")


class AuthRequestRejectedError(ValidationError):
    """Raised when the provider rejects sign-up or password input."""

    def __init__(self, message: str):
        super().__init__(message, code="AUTH_REQUEST_REJECTED")


class CredentialStoreUnavailableError(ExternalServiceError):
    """
    Raised when the auth provider cannot be reached or times out.

    Transient: the credential may still be good.
    """

    def __init__(self, operation: str, reason: str = "unavailable"):
        super().__init__(
            f"Auth provider {reason} during {operation}",
            service="supabase_auth",
            details={"operation": operation},
        )
