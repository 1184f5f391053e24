"""
Environment configuration for the Azure helpers.
"""

import os
from dataclasses import dataclass

AZURE_MGMT_URL = "https://management.azure.com"
AZURE_MGMT_SCOPE = f"{AZURE_MGMT_URL}/.default"

ENVIRONMENT_VARIABLES = (
    "AZURE_CLIENT_ID",
    "AZURE_CLIENT_SECRET",
    "AZURE_TENANT_ID",
    "AZURE_SUBSCRIPTION_ID",
)

SERVICE_PRINCIPAL_VARIABLES = ENVIRONMENT_VARIABLES[:3]


@dataclass(frozen=True)
class AzureSettings:
    """Values read from the AZURE_* environment variables. Empty means unset."""

    client_id: str = ""
    client_secret: str = ""
    tenant_id: str = ""
    subscription_id: str = ""

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        return cls(
            client_id=environ.get("AZURE_CLIENT_ID", ""),
            client_secret=environ.get("AZURE_CLIENT_SECRET", ""),
            tenant_id=environ.get("AZURE_TENANT_ID", ""),
            subscription_id=environ.get("AZURE_SUBSCRIPTION_ID", ""),
        )

    def value(self, variable: str) -> str:
        """Return the setting backing an environment variable name."""
        return getattr(self, variable[len("AZURE_"):].lower())

    def missing(self, *variables: str) -> list:
        """List the given variables (default: all four) that are unset."""
        return [name for name in variables or ENVIRONMENT_VARIABLES if not self.value(name)]
