#!/usr/bin/env python3
"""
Make every lead in a user's pipeline private again (isGlobal = false).

Usage:
    python scripts/make_saved_leads_private.py <supabase-user-id>

Requires DATABASE_URL (defaults to sqlite:///gigfrog.db).
"""
import sys
import os
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from gigfrog import create_app
from gigfrog.database import get_session
from gigfrog.services.maintenance import make_saved_leads_private


def main():
    parser = argparse.ArgumentParser(description="Take a user's saved leads out of the global pool")
    parser.add_argument('user_id', help='Supabase user id whose saved leads become private')
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        session = get_session()
        try:
            count = make_saved_leads_private(session, args.user_id)
        finally:
            session.close()

    print(f"Updated {count} lead(s) to private")


if __name__ == '__main__':
    main()
