"""Tests for identity configuration and broker response models."""

import time

import pytest
from pydantic import ValidationError

from kvauth.auth.models import (
    MAX_TIMESTAMP,
    AuthConfig,
    BrokerToken,
    DelegatedTokenResponse,
    IdentityContext,
)


class TestAuthConfig:

    def test_parses_cloud_config_keys(self):
        config = AuthConfig.model_validate(
            {
                "cloud": "AzurePublicCloud",
                "tenantId": "tenant-1",
                "aadClientId": "client-1",
                "aadClientSecret": "hunter2",
                "subscriptionId": "sub-1",
                "resourceGroup": "rg",
                "providerVaultName": "vault",
                "location": "westeurope",
            }
        )
        assert config.tenant_id == "tenant-1"
        assert config.aad_client_id == "client-1"
        assert config.aad_client_secret.get_secret_value() == "hunter2"
        assert config.provider_vault_name == "vault"

    def test_populate_by_field_name(self):
        config = AuthConfig(tenant_id="t", aad_client_id="c")
        assert config.tenant_id == "t"

    def test_none_values_become_empty(self):
        config = AuthConfig.model_validate({"tenantId": None, "cloud": None})
        assert config.tenant_id == ""
        assert config.cloud == ""

    def test_secret_masked_in_repr(self):
        config = AuthConfig(aadClientSecret="hunter2")
        assert "hunter2" not in repr(config)
        assert "hunter2" not in str(config)

    def test_frozen(self):
        config = AuthConfig()
        with pytest.raises(ValidationError):
            config.tenant_id = "other"

    @pytest.mark.parametrize(
        "data,mode",
        [
            ({"useIntegratedIdentity": True, "aadClientSecret": "s"}, "delegated"),
            ({"aadClientSecret": "s", "aadClientCertPath": "/c.pem"}, "client_secret"),
            ({"aadClientSecret": "", "aadClientCertPath": "/c.pem"}, "client_certificate"),
            ({"aadClientId": "client-1"}, "none"),
        ],
    )
    def test_credential_mode(self, data, mode):
        assert AuthConfig.model_validate(data).credential_mode == mode


class TestIdentityContext:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("POD_NAME", "app-0")
        monkeypatch.setenv("POD_NAMESPACE", "default")

        identity = IdentityContext.from_env()

        assert identity == IdentityContext(pod_name="app-0", pod_namespace="default")
        assert identity.is_complete is True

    def test_from_env_unset(self):
        assert IdentityContext.from_env().is_complete is False


class TestBrokerToken:

    def test_string_numbers(self):
        token = BrokerToken.model_validate(
            {"access_token": "a", "expires_in": "3599", "expires_on": "4102444800", "not_before": ""}
        )
        assert token.expires_in == 3599
        assert token.expires_on == 4102444800
        assert token.not_before == 0

    def test_expires_at_from_expires_on(self):
        token = BrokerToken(access_token="a", expires_on=4102444800)
        assert token.expires_at().year == 2100

    def test_expires_in_fixed_at_parse_time(self):
        before = int(time.time())
        token = BrokerToken(access_token="a", expires_in="60")
        after = int(time.time())

        assert before + 60 <= token.expires_on <= after + 60
        assert token.expires_at().timestamp() == token.expires_on

    def test_expires_on_wins_over_expires_in(self):
        token = BrokerToken(access_token="a", expires_in=60, expires_on=4102444800)
        assert token.expires_on == 4102444800

    @pytest.mark.parametrize(
        "fields",
        [
            {"expires_on": "99999999999999999999"},
            {"expires_in": "99999999999999999999"},
            {"expires_in": str(MAX_TIMESTAMP)},
            {"expires_on": "-1"},
        ],
    )
    def test_out_of_range_expiry(self, fields):
        with pytest.raises(ValidationError):
            BrokerToken.model_validate({"access_token": "a", **fields})

    def test_access_token_masked(self):
        token = BrokerToken(access_token="eyJabc.def.ghi")
        assert "eyJabc" not in repr(token)
        assert token.has_access_token is True


class TestDelegatedTokenResponse:

    def test_complete(self):
        response = DelegatedTokenResponse.model_validate(
            {"token": {"access_token": "a"}, "clientid": "abc"}
        )
        assert response.client_id == "abc"
        assert response.is_complete is True

    @pytest.mark.parametrize(
        "body",
        [
            {"token": {"access_token": "a"}, "clientid": ""},
            {"token": {"access_token": ""}, "clientid": "abc"},
            {"clientid": "abc"},
            {},
        ],
    )
    def test_incomplete(self, body):
        assert DelegatedTokenResponse.model_validate(body).is_complete is False
