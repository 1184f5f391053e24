"""
Subscription lookup for the logged in identity.
"""

from azure.mgmt.resource.subscriptions import SubscriptionClient

from .errors import ProviderCallError, SubscriptionNotFound
from .logging_utils import logger
from .settings import AzureSettings


def list_subscriptions(credential, timeout=None):
    """Yield subscription IDs visible to the credential, in the order Azure returns them."""
    kwargs = {"timeout": timeout} if timeout else {}
    subscription_client = SubscriptionClient(credential)
    try:
        for sub in subscription_client.subscriptions.list(**kwargs):
            yield sub.subscription_id
    except Exception as e:
        raise ProviderCallError(f"failed to list subscriptions, {str(e)}", stage="subscription") from e


def first_subscription(credential, timeout=None) -> str:
    """
    Return the first subscription available to the credential.

    Azure's listing order is kept as is: no sorting, no preference for a
    default subscription or tenant.
    """
    for subscription_id in list_subscriptions(credential, timeout):
        logger.debug(f"Using subscription {subscription_id}")
        return subscription_id
    raise SubscriptionNotFound(
        "logged in user does not have access to any subscriptions", stage="subscription"
    )


def resolve_subscription_id(credential, settings=None, timeout=None) -> str:
    """Prefer AZURE_SUBSCRIPTION_ID when it is set, else the first listed subscription."""
    settings = settings or AzureSettings.from_env()
    if settings.subscription_id:
        logger.debug("Using subscription from AZURE_SUBSCRIPTION_ID")
        return settings.subscription_id
    return first_subscription(credential, timeout)
