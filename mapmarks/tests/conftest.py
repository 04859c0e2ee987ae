from __future__ import annotations

import os
import tempfile

# config is read once at import time, so the environment is pinned before any mapmarks import
_TMP_DIR = tempfile.mkdtemp(prefix="mapmarks-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["JWT_SECRET"] = "test-secret-with-more-than-thirty-two-characters"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "mapmarks.log")
os.environ["APP_ENV"] = "test"
os.environ["SESSION_BACKEND"] = "database"
os.environ["DB_CONNECT_RETRIES"] = "0"
