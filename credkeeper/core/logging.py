import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Configure logging for the credential service.

    ``level`` falls back to ``LOG_LEVEL``. passlib is held at ERROR so its
    bcrypt backend probing does not flood the service log.
    """
    resolved = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("credkeeper").setLevel(resolved)
    logging.getLogger("passlib").setLevel(logging.ERROR)
