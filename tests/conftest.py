"""
pytest configuration for kvauth tests.

Adds src directory to Python path for imports and keeps the test run isolated
from identity settings of the host environment.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

_HOST_IDENTITY_VARS = (
    "AZURE_CLOUD",
    "AZURE_TENANT_ID",
    "AZURE_CLIENT_ID",
    "AZURE_CLIENT_SECRET",
    "AZURE_CERTIFICATE_PATH",
    "AZURE_CERTIFICATE_PASSWORD",
    "AZURE_USE_POD_IDENTITY",
    "AZURE_SUBSCRIPTION_ID",
    "AZURE_ENVIRONMENT_FILEPATH",
    "KVAUTH_CLOUD_CONFIG",
    "POD_NAME",
    "POD_NAMESPACE",
)


@pytest.fixture(autouse=True)
def _isolate_identity_env(monkeypatch):
    for name in _HOST_IDENTITY_VARS:
        monkeypatch.delenv(name, raising=False)
