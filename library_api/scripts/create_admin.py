"""
Create the first admin account. Run from project root:
  python -m library_api.scripts.create_admin [--email EMAIL] [--password PASSWORD] [--name NAME]
Defaults come from ADMIN_EMAIL, ADMIN_PASSWORD and ADMIN_NAME. Does nothing if the email is taken.
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

from library_api.core.config import get_settings
from library_api.core.database import SessionLocal
from library_api.core.errors import DuplicateKeyError, ValidationError
from library_api.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from library_api.models.user import ROLE_ADMIN, User
from library_api.services.users import register_user

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    settings = get_settings()
    default_password = (
        settings.ADMIN_PASSWORD.get_secret_value() if settings.ADMIN_PASSWORD else None
    )

    parser = argparse.ArgumentParser(description="Create the library admin account.")
    parser.add_argument("--email", default=settings.ADMIN_EMAIL)
    parser.add_argument("--password", default=default_password)
    parser.add_argument("--name", default=settings.ADMIN_NAME)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if not args.password:
        print("A password is required (--password or ADMIN_PASSWORD).", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == args.email.strip().lower()).first()
        if existing:
            print(
                f"User '{existing.email}' already exists (id={existing.id}, role={existing.role})."
            )
            return 0
        user = register_user(db, args.name, args.email, args.password, role=ROLE_ADMIN)
        print(f"Created admin '{user.email}' (id={user.id}). Change the password after first login.")
        return 0
    except (DuplicateKeyError, ValidationError) as e:
        print(e.message, file=sys.stderr)
        return 1
    except Exception:
        logger.exception("Admin creation failed")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
