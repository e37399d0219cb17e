"""Application initialization and setup.

Loads environment variables from a ``.env`` file and configures logging
before the application object is created.
"""

from dotenv import load_dotenv

from tasktracker.core.config.settings import settings
from tasktracker.core.logging import configure_logging


def initialize_application() -> None:
    """Initialize the application with all necessary setup tasks.

    Values already present in the process environment win over the file.
    """
    load_dotenv(override=False)

    configure_logging(log_level=settings.LOG_LEVEL, json_logs=settings.LOG_JSON)
