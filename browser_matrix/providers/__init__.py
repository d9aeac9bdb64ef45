"""Provider registry for device-cloud catalogs."""

from __future__ import annotations

from typing import Type

from browser_matrix.providers.base import BaseCatalogProvider

DEFAULT_PROVIDER = "browserstack"


def list_providers() -> list[str]:
    return ["browserstack"]


def get_provider_class(name: str) -> Type[BaseCatalogProvider]:
    """Return the provider class for the given provider name.

    Raises:
        ValueError: If the provider name is unknown.
    """
    if name.lower() == "browserstack":
        from browser_matrix.providers.browserstack import BrowserStackProvider
        return BrowserStackProvider

    raise ValueError(
        f"Unknown provider: {name!r}. Available: {', '.join(list_providers())}"
    )
