"""
Bearer-token lookups against the ARM REST API.

Used where only an access token is at hand rather than an SDK credential.
"""

import requests

from .errors import ProviderCallError, SubscriptionNotFound
from .logging_utils import logger
from .resources import STORAGE_ACCOUNTS, ResourceListing, find_resource_group_in
from .settings import AZURE_MGMT_URL

SUBSCRIPTIONS_API_VERSION = "2020-01-01"
STORAGE_API_VERSION = "2021-04-01"

API_VERSIONS = {
    STORAGE_ACCOUNTS: STORAGE_API_VERSION,
}


class ArmRestClient:
    """Explicit, per-call ARM client. Holds a token and an HTTP session, nothing else."""

    def __init__(self, token: str, session=None, base_url: str = AZURE_MGMT_URL, timeout=30):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        """Close the HTTP session if this client opened it."""
        if self._owns_session:
            self.session.close()

    def iter_pages(self, url: str):
        """Yield the ``value`` list of each page, following ``nextLink``."""
        while url:
            resp = self.session.get(url, headers=self.headers, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
            yield data.get("value", [])
            url = data.get("nextLink")

    def list_subscriptions(self):
        """Yield subscription IDs in the order ARM returns them."""
        url = f"{self.base_url}/subscriptions?api-version={SUBSCRIPTIONS_API_VERSION}"
        try:
            for page in self.iter_pages(url):
                for sub in page:
                    yield sub["subscriptionId"]
        except Exception as e:
            raise ProviderCallError(f"failed to list subscriptions, {str(e)}", stage="subscription") from e

    def first_subscription(self) -> str:
        for subscription_id in self.list_subscriptions():
            logger.debug(f"Using subscription {subscription_id}")
            return subscription_id
        raise SubscriptionNotFound(
            "no subscriptions available for service principal", stage="subscription"
        )

    def list_resources(self, subscription_id: str, kind=STORAGE_ACCOUNTS, api_version=None) -> ResourceListing:
        api_version = api_version or API_VERSIONS.get(kind)
        if not api_version:
            raise ValueError(f"no api-version known for {kind}, pass one explicitly")
        url = (
            f"{self.base_url}/subscriptions/{subscription_id}/providers/"
            f"{kind.resource_type}?api-version={api_version}"
        )
        return ResourceListing(lambda: self.iter_pages(url))

    def find_resource_group(self, subscription_id: str, name: str, kind=STORAGE_ACCOUNTS, api_version=None) -> str:
        listing = self.list_resources(subscription_id, kind, api_version)
        return find_resource_group_in(listing, name)
