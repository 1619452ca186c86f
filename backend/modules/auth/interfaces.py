"""
Authentication module interface.

Other modules should depend on ICredentialStore, not the concrete
implementation. This enables testing with fakes and swapping the
auth provider without touching the request gate.
"""

from typing import Protocol, Optional, runtime_checkable

from shared.models import AuthenticatedUser

from .models import AuthResult, Session, TokenCheck


@runtime_checkable
class ICredentialStore(Protocol):
    """
    Interface for the external credential store.

    Every method is a remote call. Implementations raise
    CredentialStoreUnavailableError for network failures and timeouts
    and an AuthenticationError subclass when a credential is refused.
    """

    async def validate(self, access_token: str) -> TokenCheck:
        """
        Classify an access token as valid, expired or invalid.

        Args:
            access_token: JWT access token from Supabase Auth

        Returns:
            TokenCheck with the status and, when valid, the user
        """
        ...

    async def rotate(self, refresh_token: str) -> Session:
        """
        Exchange a refresh token for a new access/refresh pair.

        Raises:
            CredentialRejectedError: If the refresh token is invalid,
                expired, revoked or already used
        """
        ...

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """
        Sign in with email and password.

        Raises:
            InvalidCredentialsError: If the credentials are wrong
        """
        ...

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
    ) -> AuthResult:
        """
        Register a new user.

        The profile row is created by a database trigger, not here.
        The result carries no session when email confirmation is required.
        """
        ...

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        ...

    async def reset_password(self, email: str) -> Optional[str]:
        """
        Send a password recovery email.

        Returns:
            The PKCE code verifier to keep until the callback, if any
        """
        ...

    async def update_password(self, session: Session, new_password: str) -> AuthenticatedUser:
        """Set a new password for the user owning the session."""
        ...

    async def exchange_code(self, code: str, code_verifier: Optional[str] = None) -> Session:
        """
        Exchange a one-time callback code for a session.

        Raises:
            CredentialRejectedError: If the code is invalid or spent
        """
        ...
