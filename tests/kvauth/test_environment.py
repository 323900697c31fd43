"""Tests for cloud environment resolution and endpoint normalization."""

import json

import pytest

from kvauth.environment import (
    CHINA_CLOUD,
    PUBLIC_CLOUD,
    US_GOVERNMENT_CLOUD,
    load_environment_file,
    normalize_endpoint,
    resolve_environment,
)
from kvauth.errors import UnknownEnvironmentError
from kvauth.types import ErrorCategory


# ---------------------------------------------------------------------------
# resolve_environment
# ---------------------------------------------------------------------------


class TestResolveEnvironment:

    def test_empty_name_is_public_cloud(self):
        assert resolve_environment("") is PUBLIC_CLOUD

    def test_known_name(self):
        assert resolve_environment("AzureChinaCloud") is CHINA_CLOUD

    def test_lookup_is_case_insensitive(self):
        assert resolve_environment("azureusgovernmentcloud") is US_GOVERNMENT_CLOUD

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownEnvironmentError) as exc_info:
            resolve_environment("unknown-xyz")
        assert exc_info.value.name == "unknown-xyz"
        assert exc_info.value.category == ErrorCategory.PERMANENT
        assert "unknown-xyz" in str(exc_info.value)

    def test_public_cloud_endpoints(self):
        env = resolve_environment("AzurePublicCloud")
        assert env.resource_manager_endpoint == "https://management.azure.com/"
        assert env.key_vault_endpoint == "https://vault.azure.net/"
        assert env.authority_host == "https://login.microsoftonline.com"

    def test_vault_url(self):
        assert PUBLIC_CLOUD.vault_url("myvault") == "https://myvault.vault.azure.net"

    def test_environment_is_immutable(self):
        with pytest.raises(AttributeError):
            PUBLIC_CLOUD.key_vault_endpoint = "https://evil.example.com/"


# ---------------------------------------------------------------------------
# AzureStackCloud from AZURE_ENVIRONMENT_FILEPATH
# ---------------------------------------------------------------------------


class TestAzureStackCloud:

    @pytest.fixture
    def env_file(self, tmp_path):
        path = tmp_path / "azurestack.json"
        path.write_text(
            json.dumps(
                {
                    "name": "AzureStackCloud",
                    "activeDirectoryEndpoint": "https://login.stack.local/",
                    "resourceManagerEndpoint": "https://management.stack.local/",
                    "keyVaultEndpoint": "https://vault.stack.local/",
                    "keyVaultDNSSuffix": "vault.stack.local",
                }
            )
        )
        return path

    def test_loads_from_env_file(self, env_file, monkeypatch):
        monkeypatch.setenv("AZURE_ENVIRONMENT_FILEPATH", str(env_file))
        env = resolve_environment("AzureStackCloud")
        assert env.name == "AzureStackCloud"
        assert env.key_vault_endpoint == "https://vault.stack.local/"
        assert env.authority_host == "https://login.stack.local"

    def test_missing_env_var_raises(self):
        with pytest.raises(UnknownEnvironmentError):
            resolve_environment("AzureStackCloud")

    def test_missing_file_raises(self, tmp_path, monkeypatch):
        monkeypatch.setenv("AZURE_ENVIRONMENT_FILEPATH", str(tmp_path / "nope.json"))
        with pytest.raises(UnknownEnvironmentError):
            resolve_environment("AzureStackCloud")

    def test_incomplete_file_raises(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"name": "AzureStackCloud"}))
        with pytest.raises(UnknownEnvironmentError):
            load_environment_file(path)

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(UnknownEnvironmentError):
            load_environment_file(path)


# ---------------------------------------------------------------------------
# normalize_endpoint
# ---------------------------------------------------------------------------


class TestNormalizeEndpoint:

    def test_strips_single_trailing_slash(self):
        assert normalize_endpoint("https://vault.example.com/") == "https://vault.example.com"

    def test_second_application_is_noop(self):
        once = normalize_endpoint("https://vault.example.com/")
        assert normalize_endpoint(once) == once

    def test_strips_exactly_one_slash(self):
        assert normalize_endpoint("https://vault.example.com//") == "https://vault.example.com/"

    def test_no_trailing_slash_unchanged(self):
        assert normalize_endpoint("https://vault.example.com") == "https://vault.example.com"

    def test_empty_string(self):
        assert normalize_endpoint("") == ""
