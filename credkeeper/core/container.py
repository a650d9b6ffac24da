from dataclasses import dataclass

from ..application.services.credential_service import CredentialService
from ..domain.ports.persistence import UserDirectory
from ..domain.ports.security import PasswordHasher
from .config import Settings


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    directory: UserDirectory
    hasher: PasswordHasher
    credential_service: CredentialService
