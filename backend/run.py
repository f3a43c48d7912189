#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Uses the in-memory certificate store unless STORAGE_BACKEND is set.
"""
import os
import sys
from pathlib import Path

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

os.environ.setdefault("STORAGE_BACKEND", "memory")

import uvicorn

if __name__ == "__main__":
    print("Starting TutorHub API at http://localhost:8000 (docs at /docs)")
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
