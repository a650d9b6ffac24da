import argparse
import asyncio
import getpass
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from credkeeper.application.services.credential_service import CredentialService
from credkeeper.core.config import Settings
from credkeeper.core.logging import configure_logging
from credkeeper.domain.errors import CredentialError
from credkeeper.infrastructure.persistence.sqlite import SQLiteUserDirectory
from credkeeper.infrastructure.security.password_hasher import BcryptPasswordHasher


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a user in the credential directory")
    parser.add_argument("name", help="Display name for the user")
    parser.add_argument("email", help="Unique email address")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to DATABASE_PATH or data/users.db)",
    )
    return parser.parse_args(argv)


async def create(args: argparse.Namespace, password: str, confirm_password: str) -> int:
    settings = Settings()
    db_path = Path(args.db_path).resolve() if args.db_path else settings.database_path
    directory = SQLiteUserDirectory(db_path)
    service = CredentialService(directory, BcryptPasswordHasher(rounds=settings.bcrypt_rounds))
    try:
        created = await service.create_user(args.name.strip(), args.email, password, confirm_password)
    except CredentialError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    finally:
        directory.close()

    print(f"Created user {created.name} <{created.email}>")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    configure_logging()
    args = parse_args(argv)
    password = getpass.getpass("Password: ")
    confirm_password = getpass.getpass("Confirm password: ")
    return asyncio.run(create(args, password, confirm_password))


if __name__ == "__main__":
    raise SystemExit(main())
