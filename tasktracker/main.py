"""Main application entry point.

Run with ``uvicorn tasktracker.main:app``.
"""

from tasktracker.core.application import create_application
from tasktracker.core.initialization import initialize_application

initialize_application()

app = create_application()
