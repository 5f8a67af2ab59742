"""
Streamlit entry point for the team-mate finder.

    streamlit run frontend/streamlit_app.py

Shows the login / registration forms until a session is stored, then the
request board. The backend is expected at TEAMMATE_API_URL
(default http://localhost:5000/api).
"""

import sys
from pathlib import Path

# Ensure project root is on sys.path when launched via `streamlit run`
ROOT = str(Path(__file__).parent.parent)
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.config import setup_logging
from frontend.ui import main

setup_logging()
main()
