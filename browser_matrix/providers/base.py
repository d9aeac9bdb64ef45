"""Base class for device-cloud catalog providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseCatalogProvider(ABC):
    """Abstract base for catalog provider implementations."""

    def __init__(self, username: str, access_key: str):
        self.username = username
        self.access_key = access_key

    @abstractmethod
    async def list_browsers(self) -> list[dict[str, Any]]:
        """Fetch the raw browser catalog.

        Returns:
            One dict per browser/OS/device combination, with at least
            os, os_version, browser, browser_version and device keys.

        Raises:
            CatalogFetchError: On any network or provider failure.
        """

    @classmethod
    @abstractmethod
    def from_env(cls) -> BaseCatalogProvider:
        """Build a provider from credentials in the environment."""

    @staticmethod
    @abstractmethod
    def check_credentials() -> tuple[bool, list[str]]:
        """Check whether the required credentials are set.

        Returns:
            (all_set, missing_env_var_names)
        """
