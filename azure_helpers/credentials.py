"""
Credential resolution for the Azure helpers.

The Azure CLI session is tried first. If it cannot produce a token, a service
principal is built from AZURE_CLIENT_ID, AZURE_CLIENT_SECRET and
AZURE_TENANT_ID. Nothing is cached between calls.
"""

from azure.identity import AzureCliCredential, ClientSecretCredential

from .errors import AuthenticationFailure, MissingEnvironment
from .logging_utils import logger
from .settings import (
    AZURE_MGMT_SCOPE,
    ENVIRONMENT_VARIABLES,
    SERVICE_PRINCIPAL_VARIABLES,
    AzureSettings,
)

DEFAULT_CLI_TIMEOUT = 10


def cli_credential(timeout=None):
    """Build a credential backed by the local ``az login`` session."""
    return AzureCliCredential(process_timeout=timeout or DEFAULT_CLI_TIMEOUT)


def service_principal_credential(settings=None, timeout=None):
    """
    Build a service principal credential from the environment.

    ``timeout`` bounds the token request: the overall retry deadline and the
    connect and read timeouts of the transport.

    Raises:
        MissingEnvironment: If any of the client ID, secret or tenant ID is unset.
    """
    settings = settings or AzureSettings.from_env()
    missing = settings.missing(*SERVICE_PRINCIPAL_VARIABLES)
    if missing:
        raise MissingEnvironment(missing, ENVIRONMENT_VARIABLES)
    return ClientSecretCredential(
        tenant_id=settings.tenant_id,
        client_id=settings.client_id,
        client_secret=settings.client_secret,
        **_timeout_kwargs(timeout),
    )


def _timeout_kwargs(timeout):
    if not timeout:
        return {}
    return {"timeout": timeout, "connection_timeout": timeout, "read_timeout": timeout}


def get_bearer_token(credential) -> str:
    """Return an access token for the Azure Resource Manager scope."""
    return credential.get_token(AZURE_MGMT_SCOPE).token


def resolve_credential(settings=None, timeout=None):
    """
    Resolve a credential usable against Azure Resource Manager.

    Args:
        settings: Environment settings, read from os.environ when omitted
        timeout: Seconds allowed for each token request

    Returns:
        A TokenCredential that has already produced a token once.

    Raises:
        AuthenticationFailure: If both the CLI and the environment paths fail.
    """
    try:
        credential = cli_credential(timeout)
        get_bearer_token(credential)
        logger.debug("Authenticated with the Azure CLI session")
        return credential
    except Exception as e:
        cli_error = e
        logger.debug(f"Azure CLI authentication failed, trying environment: {str(e)}")

    try:
        credential = service_principal_credential(settings, timeout)
        get_bearer_token(credential)
        logger.debug("Authenticated with service principal from environment")
        return credential
    except Exception as e:
        raise AuthenticationFailure(cli_error, e) from e
