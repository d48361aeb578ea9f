#!/usr/bin/env python3
"""
Prepare a single-user database for multi-user authentication. Run once.

  1. Leads with no owner become global, owned by 'system'
  2. Saved leads of the legacy placeholder user move to the given user
  3. Referrals of the legacy placeholder user (or with none) move to the given user

Usage:
    python scripts/migrate_to_multiuser.py <supabase-user-id>
    python scripts/migrate_to_multiuser.py <supabase-user-id> --legacy-user-id user123

The user id is the "User UID" shown under Authentication > Users in Supabase.
Requires DATABASE_URL (defaults to sqlite:///gigfrog.db).
"""
import sys
import os
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gigfrog import create_app
from gigfrog.database import get_session
from gigfrog.services.maintenance import LEGACY_USER_ID, migrate_to_multiuser


def main():
    parser = argparse.ArgumentParser(description='Move single-user data onto per-user ownership')
    parser.add_argument('user_id', help='Supabase user id that takes over the legacy data')
    parser.add_argument('--legacy-user-id', default=LEGACY_USER_ID,
                        help=f'Placeholder user id used before auth existed (default: {LEGACY_USER_ID})')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        session = get_session()
        try:
            counts = migrate_to_multiuser(session, args.user_id, legacy_user_id=args.legacy_user_id)
        finally:
            session.close()

    print(f"Leads marked global:     {counts['leads']}")
    print(f"Saved leads reassigned:  {counts['saved_leads']}")
    print(f"Referrals reassigned:    {counts['referrals']}")


if __name__ == '__main__':
    main()
