# Ensure '<repo>/backend' is on sys.path so 'import app.*' works
# even when pytest is started from the repository root.
import os
from pathlib import Path
import sys

_BACKEND_DIR = Path(__file__).resolve().parent
if str(_BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(_BACKEND_DIR))

# Settings are read at import time; pin the test environment before any app import
os.environ.setdefault("CI", "1")
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "memory"
