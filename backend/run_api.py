#!/usr/bin/env python
"""
Run the Outlay API server.

Usage:
    python run_api.py                      # Production: no reload
    python run_api.py --reload             # Development mode
    python run_api.py --port 8080 --log-level debug
"""

import argparse

import uvicorn

from shared.config import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description=f"Run the {settings.app_name} server")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--host", type=str, default=settings.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to bind to")
    parser.add_argument(
        "--log-level",
        type=str.lower,
        default=settings.log_level.lower(),
        choices=["critical", "error", "warning", "info", "debug"],
    )
    args = parser.parse_args()

    uvicorn.run(
        "api:app",
        host=args.host,
        port=args.port,
        reload=args.reload or settings.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
