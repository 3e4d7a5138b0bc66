#!/usr/bin/env python3
# backend/run.py
"""
Development server runner for the scheduling API.

Reads the same settings as the app; point DATABASE_URL at a scratch
database for local work.
"""
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn  # noqa: E402

from tutorhub.core.config import settings  # noqa: E402

if __name__ == "__main__":
    print(f"Starting tutorhub ({settings.environment}) on http://localhost:8000")
    print("API docs: http://localhost:8000/docs")

    uvicorn.run(
        "tutorhub.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
