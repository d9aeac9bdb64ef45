"""BrowserStack catalog provider."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Optional

import aiohttp

from browser_matrix.core.errors import CatalogFetchError
from browser_matrix.providers.base import BaseCatalogProvider

logger = logging.getLogger(__name__)

USER_ENV_VAR = "BROWSERSTACK_USER"
ACCESS_KEY_ENV_VAR = "BROWSERSTACK_ACCESSKEY"


class BrowserStackProvider(BaseCatalogProvider):
    """Lists browsers through the BrowserStack REST API."""

    BASE_URL = "https://api.browserstack.com"
    BROWSERS_ENDPOINT = "/4/browsers"
    TIMEOUT_SECONDS = 30

    def __init__(
        self,
        username: str,
        access_key: str,
        base_url: Optional[str] = None,
    ):
        super().__init__(username, access_key)
        self.base_url = (base_url or self.BASE_URL).rstrip("/")

    @classmethod
    def from_env(cls) -> BrowserStackProvider:
        return cls(
            username=os.environ.get(USER_ENV_VAR, ""),
            access_key=os.environ.get(ACCESS_KEY_ENV_VAR, ""),
        )

    async def list_browsers(self) -> list[dict[str, Any]]:
        url = f"{self.base_url}{self.BROWSERS_ENDPOINT}"
        auth = aiohttp.BasicAuth(self.username, self.access_key)
        timeout = aiohttp.ClientTimeout(total=self.TIMEOUT_SECONDS)

        logger.debug("GET %s", url)
        try:
            async with aiohttp.ClientSession(
                auth=auth, timeout=timeout
            ) as session:
                async with session.get(url, params={"flat": "true"}) as resp:
                    if resp.status == 401:
                        raise CatalogFetchError(
                            "BrowserStack rejected the credentials (HTTP 401)"
                        )
                    resp.raise_for_status()
                    try:
                        data = await resp.json(content_type=None)
                    except ValueError as e:
                        raise CatalogFetchError(
                            f"BrowserStack returned a body that is not JSON: {e}"
                        ) from e
        except aiohttp.ClientError as e:
            raise CatalogFetchError(
                f"Failed to fetch BrowserStack browsers: {e}"
            ) from e
        except asyncio.TimeoutError as e:
            raise CatalogFetchError(
                f"Timed out after {self.TIMEOUT_SECONDS}s fetching "
                "BrowserStack browsers"
            ) from e

        if not isinstance(data, list):
            raise CatalogFetchError(
                "Unexpected BrowserStack response: expected a list, got "
                f"{type(data).__name__}"
            )
        for i, entry in enumerate(data):
            if not isinstance(entry, dict):
                raise CatalogFetchError(
                    f"Unexpected BrowserStack response: entry {i} is a "
                    f"{type(entry).__name__}, expected an object"
                )
        return data

    @staticmethod
    def check_credentials() -> tuple[bool, list[str]]:
        missing = [
            name
            for name in (USER_ENV_VAR, ACCESS_KEY_ENV_VAR)
            if not os.environ.get(name)
        ]
        return not missing, missing
