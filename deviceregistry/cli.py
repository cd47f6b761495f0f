"""CLI commands for the device registry."""

import argparse
import getpass
import logging
import sys

from alembic import command
from alembic.config import Config
from sqlalchemy.orm import Session

from deviceregistry import __version__
from deviceregistry.config import settings
from deviceregistry.database import SessionLocal
from deviceregistry.models.user import User
from deviceregistry.services.auth.local_provider import MAX_SECRET_BYTES, hash_password

logger = logging.getLogger(__name__)


def serve(host: str, port: int, reload: bool = False) -> None:
    """Run the API server."""
    import uvicorn

    logger.info("Starting server on %s:%d", host, port)
    uvicorn.run("deviceregistry.main:app", host=host, port=port, reload=reload)


def alembic_config() -> Config:
    cfg = Config(settings.alembic_config)
    cfg.set_main_option("sqlalchemy.url", settings.database_url)
    return cfg


def migrate(action: str) -> None:
    """Apply, roll back or inspect database migrations."""
    cfg = alembic_config()

    if action == "up":
        command.upgrade(cfg, "head")
        print("Migrations completed successfully")
    elif action == "up-by-one":
        command.upgrade(cfg, "+1")
        print("Migration completed successfully")
    elif action == "down":
        command.downgrade(cfg, "-1")
        print("Rollback completed successfully")
    elif action == "status":
        command.history(cfg, indicate_current=True)
    else:
        raise ValueError(f"Unknown migrate action: {action}")


def create_user(email: str, password: str | None = None) -> None:
    """Create a user account."""
    db: Session = SessionLocal()

    try:
        # Check if email already exists
        existing = db.query(User).filter(User.email == email.lower()).first()
        if existing:
            print(f"Error: User with email '{email}' already exists.")
            sys.exit(1)

        # Get password if not provided
        if not password:
            password = getpass.getpass("Password: ")
            password_confirm = getpass.getpass("Confirm password: ")
            if password != password_confirm:
                print("Error: Passwords do not match.")
                sys.exit(1)

        if len(password) < 8:
            print("Error: Password must be at least 8 characters.")
            sys.exit(1)

        if len(password.encode("utf-8")) > MAX_SECRET_BYTES:
            print(f"Error: Password must be at most {MAX_SECRET_BYTES} bytes.")
            sys.exit(1)

        user = User(email=email.lower(), password_hash=hash_password(password))
        db.add(user)
        db.commit()

        print(f"User created successfully: {email}")

    finally:
        db.close()


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(description="Device Registry CLI")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default=settings.host, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=settings.port, help="Bind port")
    serve_parser.add_argument(
        "--reload", action="store_true", help="Reload on code changes (development)"
    )

    # migrate command
    migrate_parser = subparsers.add_parser("migrate", help="Database migration commands")
    migrate_parser.add_argument(
        "action", choices=["up", "up-by-one", "down", "status"], help="Migration action"
    )

    # create-user command
    create_user_parser = subparsers.add_parser("create-user", help="Create a user")
    create_user_parser.add_argument("--email", required=True, help="User email address")
    create_user_parser.add_argument(
        "--password", help="User password (will prompt if not provided)"
    )

    subparsers.add_parser("version", help="Print the version")

    args = parser.parse_args(argv)

    if args.command == "serve":
        serve(args.host, args.port, args.reload)
    elif args.command == "migrate":
        migrate(args.action)
    elif args.command == "create-user":
        create_user(args.email, args.password)
    elif args.command == "version":
        print(f"DeviceRegistry v{__version__}")
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
