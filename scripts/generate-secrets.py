#!/usr/bin/env python3
"""
Generates secrets for a production MedGrid deployment.
"""

import secrets
import string


def generate_jwt_secret(length=64):
    """URL-safe secret for signing access tokens."""
    return secrets.token_urlsafe(length)


def generate_password(length=32):
    """Random password with special characters."""
    alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
    return ''.join(secrets.choice(alphabet) for _ in range(length))


def build_env(jwt_secret, postgres_password):
    return f"""# ============================================
# MEDGRID PRODUCTION SETTINGS - GENERATED
# ============================================
# Do not commit this file

APP_ENV=production
DEBUG=False

# JWT
JWT_SECRET_KEY={jwt_secret}
JWT_ALGORITHM=HS256
JWT_ACCESS_TOKEN_EXPIRE_MINUTES=30

# Database - fill in host and database name
DATABASE_URL=postgresql://medgrid:{postgres_password}@[HOST]:5432/medgrid
CREATE_TABLES_ON_STARTUP=False
SEED_DEMO_DATA=False

# CORS - JSON list with your dashboard origin
CORS_ORIGINS=["https://[YOUR-DASHBOARD-DOMAIN]"]

# WebSocket
WS_REQUIRE_AUTH=True
WS_MAX_PENDING_EVENTS=256

LOG_LEVEL=INFO
"""


def main():
    print("=" * 60)
    print("MEDGRID SECRET GENERATOR")
    print("=" * 60)
    print()

    jwt_secret = generate_jwt_secret()
    print("JWT_SECRET_KEY:")
    print(f"   {jwt_secret}")
    print()

    postgres_password = generate_password()
    print("POSTGRES_PASSWORD:")
    print(f"   {postgres_password}")
    print()

    print("=" * 60)
    print("IMPORTANT:")
    print("   1. Store these values somewhere safe")
    print("   2. NEVER commit them to git")
    print("   3. Use them in your .env.production file")
    print("=" * 60)
    print()

    answer = input("Write a .env.production file with these values? (y/n): ")

    if answer.lower() in ['y', 'yes']:
        with open('.env.production', 'w') as f:
            f.write(build_env(jwt_secret, postgres_password))

        print(".env.production written")
        print("   Fill in the database host and the CORS origin")
    else:
        print("Copy the values into your .env.production manually")


if __name__ == "__main__":
    main()
