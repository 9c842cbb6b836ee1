"""
Development server launcher.

Loads the .env file, creates any missing tables (handy with a SQLite
``DATABASE_URL_OVERRIDE``) and runs FastAPI with uvicorn in reload mode.

Usage:
    python scripts/run_dev.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

import uvicorn

from app.core.config import settings
from app.core.logging import configure_logging
from app.db.init_db import init_db

if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    init_db()

    print("=" * 60)
    print(f"{settings.PROJECT_NAME} development server ({settings.WEIGHT_UNIT})")
    print("=" * 60)
    print("API: http://localhost:8000/api/v1")
    print("Docs: http://localhost:8000/docs")
    print("Press Ctrl+C to stop")
    print("=" * 60)

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level=settings.LOG_LEVEL.lower())
