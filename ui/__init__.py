"""UI module - web API for the journal dashboard."""

from ui.web_server import app as web_app, set_journal_store, run_server

__all__ = [
    "web_app",            # FastAPI web app
    "set_journal_store",  # Point the API at a journal file
    "run_server",         # Run web server (blocking)
]
