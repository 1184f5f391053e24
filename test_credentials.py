from unittest.mock import patch, MagicMock

import pytest
from azure.core.exceptions import ClientAuthenticationError

from azure_helpers.credentials import get_bearer_token, resolve_credential, service_principal_credential
from azure_helpers.errors import AuthenticationFailure, MissingEnvironment
from azure_helpers.settings import AZURE_MGMT_SCOPE, AzureSettings

SP_SETTINGS = AzureSettings(client_id="client", client_secret="secret", tenant_id="tenant")


@patch("azure_helpers.credentials.ClientSecretCredential")
@patch("azure_helpers.credentials.AzureCliCredential")
def test_resolve_credential_prefers_cli(mock_cli_credential, mock_sp_credential):
    """Test that a working CLI session is used without touching the environment"""
    result = resolve_credential(SP_SETTINGS)

    assert result is mock_cli_credential.return_value
    mock_cli_credential.return_value.get_token.assert_called_once_with(AZURE_MGMT_SCOPE)
    mock_sp_credential.assert_not_called()


@patch("azure_helpers.credentials.ClientSecretCredential")
@patch("azure_helpers.credentials.AzureCliCredential")
def test_resolve_credential_falls_back_to_environment(mock_cli_credential, mock_sp_credential):
    """Test fallback to the service principal when the CLI session fails"""
    mock_cli_credential.return_value.get_token.side_effect = ClientAuthenticationError("az login required")

    result = resolve_credential(SP_SETTINGS)

    assert result is mock_sp_credential.return_value
    mock_sp_credential.assert_called_once_with(
        tenant_id="tenant", client_id="client", client_secret="secret"
    )
    mock_sp_credential.return_value.get_token.assert_called_once_with(AZURE_MGMT_SCOPE)


@patch("azure_helpers.credentials.AzureCliCredential")
def test_resolve_credential_reports_both_failures(mock_cli_credential):
    """Test that the error names both the CLI and environment failures"""
    mock_cli_credential.return_value.get_token.side_effect = ClientAuthenticationError("az login required")

    with pytest.raises(AuthenticationFailure) as exc_info:
        resolve_credential(AzureSettings())

    error = exc_info.value
    assert isinstance(error.cli_error, ClientAuthenticationError)
    assert isinstance(error.env_error, MissingEnvironment)
    assert "az login required" in str(error)
    assert "AZURE_CLIENT_ID" in str(error)


@patch("azure_helpers.credentials.ClientSecretCredential")
@patch("azure_helpers.credentials.AzureCliCredential")
def test_resolve_credential_service_principal_rejected(mock_cli_credential, mock_sp_credential):
    """Test that a rejected service principal still ends in AuthenticationFailure"""
    mock_cli_credential.return_value.get_token.side_effect = ClientAuthenticationError("no cli")
    mock_sp_credential.return_value.get_token.side_effect = ClientAuthenticationError("bad secret")

    with pytest.raises(AuthenticationFailure) as exc_info:
        resolve_credential(SP_SETTINGS)

    assert "no cli" in str(exc_info.value)
    assert "bad secret" in str(exc_info.value)


@patch("azure_helpers.credentials.AzureCliCredential")
def test_resolve_credential_passes_timeout_to_cli(mock_cli_credential):
    """Test the timeout bounds the az process"""
    resolve_credential(SP_SETTINGS, timeout=7)

    mock_cli_credential.assert_called_once_with(process_timeout=7)


@patch("azure_helpers.credentials.ClientSecretCredential")
@patch("azure_helpers.credentials.AzureCliCredential")
def test_resolve_credential_passes_timeout_to_service_principal(mock_cli_credential, mock_sp_credential):
    """Test the timeout bounds the service principal token request"""
    mock_cli_credential.return_value.get_token.side_effect = ClientAuthenticationError("no cli")

    resolve_credential(SP_SETTINGS, timeout=5)

    mock_sp_credential.assert_called_once_with(
        tenant_id="tenant",
        client_id="client",
        client_secret="secret",
        timeout=5,
        connection_timeout=5,
        read_timeout=5,
    )


def test_service_principal_credential_names_missing_variables():
    """Test that missing variables are listed along with all recognized ones"""
    settings = AzureSettings(client_id="client")

    with pytest.raises(MissingEnvironment) as exc_info:
        service_principal_credential(settings)

    assert exc_info.value.missing == ["AZURE_CLIENT_SECRET", "AZURE_TENANT_ID"]
    for name in ("AZURE_CLIENT_ID", "AZURE_CLIENT_SECRET", "AZURE_TENANT_ID", "AZURE_SUBSCRIPTION_ID"):
        assert name in str(exc_info.value)


def test_settings_from_env():
    """Test reading settings from a mapping, empty values count as unset"""
    settings = AzureSettings.from_env(
        {"AZURE_CLIENT_ID": "client", "AZURE_TENANT_ID": "", "AZURE_SUBSCRIPTION_ID": "sub"}
    )

    assert settings.client_id == "client"
    assert settings.subscription_id == "sub"
    assert settings.missing() == ["AZURE_CLIENT_SECRET", "AZURE_TENANT_ID"]


def test_get_bearer_token():
    """Test the bearer token is requested for the management scope"""
    credential = MagicMock()
    credential.get_token.return_value.token = "fake-token"

    assert get_bearer_token(credential) == "fake-token"
    credential.get_token.assert_called_once_with(AZURE_MGMT_SCOPE)
