"""
Server Entry Point
==================
Run the auth service with uvicorn.

Usage:
    PORT=3000 python -m smsly_auth
"""

import os

import uvicorn

DEFAULT_PORT = 3000


def main() -> None:
    uvicorn.run(
        "smsly_auth.api.app:create_app_from_env",
        factory=True,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", DEFAULT_PORT)),
    )


if __name__ == "__main__":
    main()
