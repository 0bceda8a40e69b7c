"""Create an administrator account.

Usage:
  python scripts/create_admin.py --email admin@example.com --password '...' --name 'Store Admin'

Deactivate an existing account:
  python scripts/create_admin.py --email admin@example.com --deactivate
"""

import argparse
import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from storeadmin import create_app
from storeadmin.errors import PersistenceError, ValidationError
from storeadmin.models import AdminUser
from storeadmin.services import create_admin, set_admin_status
from storeadmin.services.auth import normalize_email


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument('--email', required=True)
    ap.add_argument('--password')
    ap.add_argument('--name', default=None)
    ap.add_argument('--deactivate', action='store_true')
    args = ap.parse_args(argv)

    app = create_app()
    with app.app_context():
        try:
            if args.deactivate:
                admin = AdminUser.query.filter_by(email=normalize_email(args.email)).first()
                if admin is None or not set_admin_status(admin.id, False):
                    print(f'No administrator with email {args.email}')
                    return 1
                print(f'Deactivated administrator {admin.email}')
                return 0

            if not args.password:
                ap.error('--password is required when creating an administrator')
            record = create_admin(args.email, args.password, full_name=args.name,
                                  min_password_length=app.config['MIN_PASSWORD_LENGTH'])
        except (ValidationError, PersistenceError) as e:
            print(f'Error: {e}')
            return 1

    print('Created administrator:')
    print(record.to_dict())
    return 0


if __name__ == '__main__':
    sys.exit(main())
