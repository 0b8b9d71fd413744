import os

import pytest

# Set required environment variables BEFORE handler imports
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture(autouse=True)
def clean_lambda6_env(monkeypatch):
    """Keep LAMBDA6_* settings from the outer environment out of tests."""
    for key in ("LAMBDA6_OPERATION_KEY", "LAMBDA6_PAYLOAD_KEY", "LAMBDA6_DEEP_COPY"):
        monkeypatch.delenv(key, raising=False)
