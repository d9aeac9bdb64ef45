"""Catalog fetcher — pulls the provider catalog and keeps stable versions."""

from __future__ import annotations

import logging

from browser_matrix.core.models import AvailableBrowser
from browser_matrix.core.versions import is_stable_version
from browser_matrix.providers.base import BaseCatalogProvider

logger = logging.getLogger(__name__)


async def fetch_catalog(provider: BaseCatalogProvider) -> list[AvailableBrowser]:
    """Fetch every available browser, dropping beta/dev channel versions.

    Provider errors propagate; there is no retry.
    """
    raw = await provider.list_browsers()
    catalog = []
    for entry in raw:
        browser = AvailableBrowser.from_dict(entry)
        if not is_stable_version(browser.browser_version):
            logger.debug(
                "Skipping unstable version %s %s",
                browser.browser,
                browser.browser_version,
            )
            continue
        catalog.append(browser)
    logger.debug("Catalog: %d of %d entries kept", len(catalog), len(raw))
    return catalog
