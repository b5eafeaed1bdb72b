"""
Test session setup: build a throwaway reference database before any backend
module is imported, since reference tables are loaded at import time.
"""

import os
import shutil
import sys
import tempfile
from pathlib import Path

_DB_DIR = tempfile.mkdtemp(prefix="salary_compass_")
os.environ["SALARY_ENGINE_DB"] = str(Path(_DB_DIR) / "test.db")

# Ensure backend directory is on path
sys.path.insert(0, str(Path(__file__).parent.parent))

from import_reference_data import import_all  # noqa: E402

import_all()


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_DB_DIR, ignore_errors=True)
