"""
Access key lookup for located resources.
"""

from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.web import WebSiteManagementClient

from .errors import KeyListEmpty, ProviderCallError
from .logging_utils import logger


def fetch_primary_key(credential, subscription_id, resource_group, account_name, timeout=None) -> str:
    """
    Return the first access key of a storage account.

    Args:
        credential: A resolved TokenCredential
        subscription_id: Subscription holding the account
        resource_group: Resource group holding the account
        account_name: The storage account name
        timeout: Seconds allowed for the key listing call

    Raises:
        KeyListEmpty: If the account has no keys.
    """
    kwargs = {"timeout": timeout} if timeout else {}
    client = StorageManagementClient(credential, subscription_id)
    try:
        result = client.storage_accounts.list_keys(resource_group, account_name, **kwargs)
    except Exception as e:
        raise ProviderCallError(
            f"failed to list keys for storage account '{account_name}', {str(e)}",
            stage="keys",
            name=account_name,
        ) from e

    keys = result.keys or []
    if not keys or not keys[0].value:
        raise KeyListEmpty(
            f"failed to list keys in storage account '{account_name}'", stage="keys", name=account_name
        )
    logger.debug(f"Using key '{keys[0].key_name}' of storage account '{account_name}'")
    return keys[0].value


def fetch_master_key(credential, subscription_id, resource_group, app_name, timeout=None) -> str:
    """Return the master host key of a web app."""
    kwargs = {"timeout": timeout} if timeout else {}
    client = WebSiteManagementClient(credential, subscription_id)
    try:
        host_keys = client.web_apps.list_host_keys(resource_group, app_name, **kwargs)
    except Exception as e:
        raise ProviderCallError(
            f"failed to list host keys for app with name '{app_name}', {str(e)}",
            stage="keys",
            name=app_name,
        ) from e

    if not host_keys.master_key:
        raise KeyListEmpty(f"app '{app_name}' has no master key", stage="keys", name=app_name)
    return host_keys.master_key
