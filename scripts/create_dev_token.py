#!/usr/bin/env python
"""Mint a bearer token for local development.

Production tokens come from the identity provider; this signs one with
the configured JWT_SECRET so the API can be exercised locally.
"""

import argparse
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jose import jwt

from workforce_api.config import get_settings


def create_dev_token(subject: str, is_admin: bool, can_terminate: bool, hours: int) -> str:
    """Create a signed token carrying the principal claims."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "is_admin": is_admin,
        "can_terminate": can_terminate,
        "iat": now,
        "exp": now + timedelta(hours=hours),
    }
    if settings.jwt_issuer:
        payload["iss"] = settings.jwt_issuer
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def main() -> int:
    parser = argparse.ArgumentParser(description="Mint a development bearer token")
    parser.add_argument("--subject", default=str(uuid4()), help="Principal UUID")
    parser.add_argument("--no-admin", action="store_true", help="Omit the admin capability")
    parser.add_argument("--can-terminate", action="store_true", help="Grant the terminate capability")
    parser.add_argument("--hours", type=int, default=8, help="Token lifetime in hours")
    args = parser.parse_args()

    settings = get_settings()
    if settings.environment == "production":
        print("Refusing to mint tokens in production")
        return 1

    print(create_dev_token(args.subject, not args.no_admin, args.can_terminate, args.hours))
    return 0


if __name__ == "__main__":
    sys.exit(main())
