"""
Resource lookup by name within a subscription.

Every listing, whether it comes back as one page or many, goes through
``ResourceListing`` so a single name scan serves storage accounts, web apps,
generic ARM resources and raw REST responses alike.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.web import WebSiteManagementClient

from .errors import MalformedIdentifier, ProviderCallError, ResourceNotFound
from .logging_utils import logger


def resource_group_from_id(resource_id: str) -> str:
    """
    Extract the resource group from an ARM resource ID.

    ``/subscriptions/S/resourceGroups/RG1/providers/Microsoft.Storage/storageAccounts/acct1``
    gives ``RG1``.

    Raises:
        MalformedIdentifier: If the ID has fewer than four segments or the
            third one is not ``resourceGroups``.
    """
    parts = [part for part in (resource_id or "").split("/") if part]
    if len(parts) < 4 or parts[2].lower() != "resourcegroups":
        raise MalformedIdentifier(
            f"invalid resource id '{resource_id}'", stage="resource"
        )
    return parts[3]


@dataclass(frozen=True)
class ResourceSummary:
    id: str
    name: str

    @property
    def resource_group(self) -> str:
        return resource_group_from_id(self.id)

    @classmethod
    def from_item(cls, item):
        """Build from an SDK model (attributes) or a REST JSON dict (keys)."""
        if isinstance(item, dict):
            return cls(id=item.get("id", ""), name=item.get("name", ""))
        return cls(id=item.id, name=item.name)


@dataclass(frozen=True)
class ResourceKind:
    namespace: str
    type: str

    @property
    def resource_type(self) -> str:
        return f"{self.namespace}/{self.type}"

    @classmethod
    def parse(cls, value: str):
        """Parse an alias (``storage``, ``webapp``) or ``Namespace/type``."""
        if value in KIND_ALIASES:
            return KIND_ALIASES[value]
        namespace, sep, kind = value.partition("/")
        if not sep or not namespace or not kind:
            raise ValueError(f"unknown resource kind '{value}'")
        return cls(namespace, kind)

    def __str__(self):
        return self.resource_type


STORAGE_ACCOUNTS = ResourceKind("Microsoft.Storage", "storageAccounts")
WEB_APPS = ResourceKind("Microsoft.Web", "sites")

KIND_ALIASES = {
    "storage": STORAGE_ACCOUNTS,
    "webapp": WEB_APPS,
}


class ResourceListing:
    """
    Lazy, finite sequence of ResourceSummary.

    ``fetch_pages`` issues the listing call and returns an iterable of pages,
    each page an iterable of raw items. A listing that is not paginated is
    simply one page. Iterating again issues the listing call again.
    """

    def __init__(self, fetch_pages: Callable[[], Iterable], convert=ResourceSummary.from_item, stage="resource"):
        self._fetch_pages = fetch_pages
        self._convert = convert
        self._stage = stage

    @classmethod
    def from_pager(cls, list_call: Callable[[], Iterable], **kwargs):
        """Wrap an Azure SDK ``ItemPaged`` factory, walking it page by page."""
        return cls(lambda: list_call().by_page(), **kwargs)

    @classmethod
    def single_page(cls, list_call: Callable[[], Iterable], **kwargs):
        return cls(lambda: [list_call()], **kwargs)

    def __iter__(self) -> Iterator[ResourceSummary]:
        try:
            for page in self._fetch_pages():
                for item in page:
                    yield self._convert(item)
        except ProviderCallError:
            raise
        except Exception as e:
            raise ProviderCallError(f"failed to list resources, {str(e)}", stage=self._stage) from e


def list_resources(credential, subscription_id: str, kind: ResourceKind, timeout=None) -> ResourceListing:
    """
    List resources of one kind in a subscription.

    Storage accounts and web apps use their own management clients, any
    other kind goes through the generic resources API with a type filter.
    """
    kwargs = {"timeout": timeout} if timeout else {}
    if kind == STORAGE_ACCOUNTS:
        client = StorageManagementClient(credential, subscription_id)
        return ResourceListing.from_pager(lambda: client.storage_accounts.list(**kwargs))
    if kind == WEB_APPS:
        client = WebSiteManagementClient(credential, subscription_id)
        return ResourceListing.from_pager(lambda: client.web_apps.list(**kwargs))
    client = ResourceManagementClient(credential, subscription_id)
    return ResourceListing.from_pager(
        lambda: client.resources.list(filter=f"resourceType eq '{kind.resource_type}'", **kwargs)
    )


def find_resource(listing: Iterable[ResourceSummary], name: str) -> ResourceSummary:
    """Return the first resource whose name matches exactly (case-sensitive)."""
    for resource in listing:
        if resource.name == name:
            logger.debug(f"Found resource '{name}': {resource.id}")
            return resource
    raise ResourceNotFound(f"could not find resource '{name}'", stage="resource", name=name)


def find_resource_group_in(listing: Iterable[ResourceSummary], name: str) -> str:
    return find_resource(listing, name).resource_group


def find_resource_group(credential, subscription_id: str, kind: ResourceKind, name: str, timeout=None) -> str:
    """
    Find the resource group of the first resource of ``kind`` named ``name``.

    Raises:
        ResourceNotFound: If no page of the listing contains the name.
        MalformedIdentifier: If the matching resource's ID cannot be parsed.
    """
    listing = list_resources(credential, subscription_id, kind, timeout)
    return find_resource_group_in(listing, name)
