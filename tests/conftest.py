"""
Main conftest file that imports and re-exports all fixtures from modular files.
This approach improves maintainability by organizing fixtures into logical modules.
"""

import os

from dotenv import load_dotenv

# Explicitly load the test environment variables before importing any app modules
dotenv_path = os.path.join(os.path.dirname(__file__), "..", ".env.test")
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path=dotenv_path, override=True)
else:
    print(f"Warning: .env.test file not found at {dotenv_path}")

# Now reload the config to ensure it picks up test settings
from importlib import reload

from listings_service import config

reload(config)

# Import and re-export fixtures from modular files
from tests.fixtures.client import client, test_settings
from tests.fixtures.db import db_engine, db_session
from tests.fixtures.helpers import (
    admin_headers,
    admin_user,
    editor_headers,
    storage,
)

__all__ = [
    "admin_headers",
    "admin_user",
    "client",
    "db_engine",
    "db_session",
    "editor_headers",
    "storage",
    "test_settings",
]
