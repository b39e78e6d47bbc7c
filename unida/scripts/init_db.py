"""
Initialize database schema.

Run ONCE when:
- first local setup
- new environment deployment

Also promotes an existing account to admin:
    python -m unida.scripts.init_db --admin someone@example.com
"""

import argparse

from unida.database.db.models import Base
from unida.database.db.session import engine
from unida.database.user_repository import UserRepository


def main(argv=None):
    parser = argparse.ArgumentParser(description="Initialize the UNIDA database")
    parser.add_argument("--admin", metavar="EMAIL", help="Grant admin rights to this user")
    args = parser.parse_args(argv)

    print("🔧 Initializing database schema...")
    Base.metadata.create_all(bind=engine)
    print("✅ Database schema initialized.")

    if args.admin:
        user = UserRepository().set_admin(args.admin)
        print(f"👑 {user.email} is now an admin.")


if __name__ == "__main__":
    main()
