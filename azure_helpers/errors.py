"""
Errors raised by the credential, subscription, resource and key lookups.
"""

from typing import Optional


class AzureLookupError(Exception):
    """Base class. ``stage`` and ``name`` say where in the lookup chain it failed."""

    def __init__(self, message: str, stage: Optional[str] = None, name: Optional[str] = None):
        super().__init__(message)
        self.stage = stage
        self.name = name

    def add_context(self, message: str, name: Optional[str] = None):
        """Prefix the message with what the caller was doing."""
        self.args = (f"{message}, {self.args[0]}",) + self.args[1:]
        self.name = self.name or name
        return self


class AuthenticationFailure(AzureLookupError):
    """Neither the Azure CLI session nor the service principal could authenticate."""

    def __init__(self, cli_error: Exception, env_error: Exception):
        super().__init__(
            f"auth initialization failed, Azure CLI: {cli_error}; environment: {env_error}",
            stage="credential",
        )
        self.cli_error = cli_error
        self.env_error = env_error


class MissingEnvironment(AzureLookupError):
    def __init__(self, missing, required):
        super().__init__(
            f"environment variables {', '.join(missing)} are unset, "
            f"check that you have set {', '.join(required)}",
            stage="environment",
        )
        self.missing = list(missing)


class SubscriptionNotFound(AzureLookupError):
    pass


class ResourceNotFound(AzureLookupError):
    pass


class MalformedIdentifier(AzureLookupError, ValueError):
    pass


class KeyListEmpty(AzureLookupError):
    pass


class ProviderCallError(AzureLookupError):
    """An SDK or HTTP call to Azure failed."""
