import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import getpass
import logging

from sqlalchemy import update

from khael_apartments.db.engine import engine
from khael_apartments.db.readers.admins import get_admin_by_username
from khael_apartments.db.writers.admins import insert_admin
from khael_apartments.logging_config import setup_logging
from khael_apartments.models.admins import AdminUser
from khael_apartments.models.base import Base
from khael_apartments.services.auth import hash_password

setup_logging()
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create an admin or reset an admin's password.")
    parser.add_argument("username", help="Admin username")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Replace the password of an existing admin instead of failing",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    """
    Create an admin account, prompting for the password on the terminal.
    """
    args = parse_args(argv)
    password = getpass.getpass(f"Password for {args.username}: ")
    if len(password) < 8:
        logger.error("Password must be at least 8 characters")
        sys.exit(1)

    Base.metadata.create_all(engine)

    with engine.begin() as conn:
        existing = get_admin_by_username(conn, args.username)
        if existing and not args.reset:
            logger.error("Admin %s already exists (use --reset to change the password)", args.username)
            sys.exit(1)

        if existing:
            conn.execute(
                update(AdminUser)
                .where(AdminUser.id == existing["id"])
                .values(password=hash_password(password))
            )
            logger.info("Password reset for admin %s", args.username)
        else:
            admin_id = insert_admin(conn, args.username, hash_password(password))
            logger.info("Created admin %s (id=%s)", args.username, admin_id)


if __name__ == "__main__":
    main()
