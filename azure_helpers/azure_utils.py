"""
Azure utilities: the top-level lookups that end in a usable client or secret.
"""

from azure.mgmt.web import WebSiteManagementClient
from azure.storage.blob import BlobServiceClient

from .credentials import get_bearer_token, resolve_credential, service_principal_credential
from .errors import AzureLookupError, MissingEnvironment
from .keys import fetch_master_key, fetch_primary_key
from .logging_utils import logger
from .resources import STORAGE_ACCOUNTS, WEB_APPS, find_resource, find_resource_group, list_resources
from .rest import ArmRestClient
from .settings import ENVIRONMENT_VARIABLES, AzureSettings
from .subscriptions import first_subscription

BLOB_ACCOUNT_URL = "https://{account_name}.blob.core.windows.net"


def get_blob_service_client(account_name: str, timeout=None) -> BlobServiceClient:
    """
    Build a blob service client for a storage account found by name.

    Picks the first subscription available to the logged in identity and the
    first storage account with the requested name within it.
    """
    credential = resolve_credential(timeout=timeout)

    try:
        subscription_id = first_subscription(credential, timeout)
    except AzureLookupError as e:
        e.add_context("could not infer subscription id for logged in user", account_name)
        raise

    try:
        resource_group = find_resource_group(credential, subscription_id, STORAGE_ACCOUNTS, account_name, timeout)
    except AzureLookupError as e:
        e.add_context("could not find storage account", account_name)
        raise

    account_key = fetch_primary_key(credential, subscription_id, resource_group, account_name, timeout)
    logger.info(f"Resolved storage account '{account_name}' in resource group '{resource_group}'")
    return BlobServiceClient(
        account_url=BLOB_ACCOUNT_URL.format(account_name=account_name),
        credential={"account_name": account_name, "account_key": account_key},
    )


def get_master_key(app_name: str, timeout=None) -> str:
    """Return the master host key of the first web app named ``app_name``."""
    credential = resolve_credential(timeout=timeout)

    try:
        subscription_id = first_subscription(credential, timeout)
    except AzureLookupError as e:
        e.add_context("failed to infer subscription ID based on logged in user", app_name)
        raise

    try:
        site = find_resource(list_resources(credential, subscription_id, WEB_APPS, timeout), app_name)
        resource_group = site.resource_group
    except AzureLookupError as e:
        e.add_context(f"could not find site with name {app_name}", app_name)
        raise

    return fetch_master_key(credential, subscription_id, resource_group, site.name, timeout)


def find_storage_account_resource_group(account_name: str, timeout=None) -> str:
    """Find a storage account's resource group using a bearer token and the REST API."""
    credential = resolve_credential(timeout=timeout)
    with ArmRestClient(get_bearer_token(credential), timeout=timeout or 30) as client:
        try:
            subscription_id = client.first_subscription()
        except AzureLookupError as e:
            e.add_context("could not infer subscription id for logged in user", account_name)
            raise

        try:
            return client.find_resource_group(subscription_id, account_name)
        except AzureLookupError as e:
            e.add_context("could not find storage account", account_name)
            raise


def web_apps_client_from_environment(settings=None, timeout=None) -> WebSiteManagementClient:
    """
    Build a web apps management client purely from the environment.

    Raises:
        MissingEnvironment: Naming the unset variables and all four recognized ones.
    """
    settings = settings or AzureSettings.from_env()
    missing = settings.missing()
    if missing:
        raise MissingEnvironment(missing, ENVIRONMENT_VARIABLES)
    credential = service_principal_credential(settings, timeout)
    return WebSiteManagementClient(credential, settings.subscription_id)
