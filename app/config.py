"""
Runtime configuration and logging.

Values come from the environment (a local .env file is loaded first):

    TEAMMATE_API_URL          backend base path   (default http://localhost:5000/api)
    TEAMMATE_REQUEST_TIMEOUT  seconds per request (default 30)
    TEAMMATE_RECONCILE        "trust" or "refetch" (default trust)
    TEAMMATE_SESSION_FILE     persist the session to this file (single-user use only;
                              unset keeps it in memory per browser session)
    TEAMMATE_LOG_LEVEL        logging level       (default INFO)

Logs go to stdout and logs/app.log (rotating, 5 MB max, 3 backups).
"""

import logging
import logging.handlers
import os
import sys
from enum import Enum
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

ROOT_DIR = Path(__file__).parent.parent
DATA_DIR = ROOT_DIR / "data"
LOG_DIR  = ROOT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.log"


class Reconcile(str, Enum):
    """What the board does with its local list after a successful mutation."""

    TRUST_RESPONSE = "trust"     # apply the server's response body only
    REFETCH        = "refetch"   # apply it, then reload the whole list


API_URL         = os.getenv("TEAMMATE_API_URL", "http://localhost:5000/api").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("TEAMMATE_REQUEST_TIMEOUT", "30"))
RECONCILE       = Reconcile(os.getenv("TEAMMATE_RECONCILE", Reconcile.TRUST_RESPONSE.value).lower())
_session_file   = os.getenv("TEAMMATE_SESSION_FILE")
SESSION_FILE    = Path(_session_file) if _session_file else None
LOG_LEVEL       = os.getenv("TEAMMATE_LOG_LEVEL", "INFO").upper()

_logging_ready = False


def setup_logging() -> None:
    """Attach stdout + rotating-file handlers to the root logger (once per process)."""
    global _logging_ready
    if _logging_ready:
        return

    LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.addHandler(stream)
    root.addHandler(rotating)
    _logging_ready = True
