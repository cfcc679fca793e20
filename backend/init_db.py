#!/usr/bin/env python3
"""
Initializes the database with demo data.
Run with: python init_db.py
"""
import sys

from medgrid.core.database import create_db_and_tables, get_session_direct
from medgrid.utils.init_data import initialize_data, DEMO_USERS
from medgrid.utils.logger import configure_logging


def main():
    """Creates the tables and the demo data."""
    configure_logging()

    print("=" * 60)
    print("INITIALIZING DATABASE")
    print("=" * 60)

    create_db_and_tables()

    session = get_session_direct()
    try:
        created = initialize_data(session)
        if not created:
            print("\nDatabase already initialized, nothing to do.")
            return

        print("\nDatabase initialized.")
        print("\n" + "=" * 60)
        print("LOGIN CREDENTIALS")
        print("=" * 60)
        for username, password, _, role in DEMO_USERS:
            print(f"\n{role.value.capitalize()}:")
            print(f"  Username: {username}")
            print(f"  Password: {password}")
        print("\n" + "=" * 60)
    except Exception as e:
        session.rollback()
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        session.close()


if __name__ == "__main__":
    main()
