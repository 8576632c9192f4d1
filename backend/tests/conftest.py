# ruff: noqa: INP001
"""Pytest configuration shared across backend tests."""

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time; pin deterministic values regardless of shell env.
os.environ["RECORD_STORE_URL"] = "https://records.test/"
os.environ["RECORD_STORE_ANON_KEY"] = "anon-key-for-tests"
os.environ["RECORD_STORE_SERVICE_KEY"] = "service-key-for-tests"
os.environ["WRITE_SETTLE_DELAY_SECONDS"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"
