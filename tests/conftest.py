"""Shared test fixtures for browser-matrix tests."""

from __future__ import annotations

import json
from typing import Any

import pytest

from browser_matrix.core.models import (
    AvailableBrowser,
    BrowserVersionSpec,
    GroupedBrowserSpec,
)
from browser_matrix.data.store import DataStore


def make_browser(
    browser: str = "chrome",
    browser_version: str | None = "70.0",
    os: str = "Windows",
    os_version: str = "10",
    device: str | None = None,
    real_mobile: bool | None = None,
) -> AvailableBrowser:
    """Helper to create an AvailableBrowser for testing."""
    return AvailableBrowser(
        os=os,
        os_version=os_version,
        browser=browser,
        browser_version=browser_version,
        device=device,
        real_mobile=real_mobile,
    )


def make_group(
    browsers: list[tuple[str, str | None]],
    os: str = "Windows",
    os_version: str = "10",
    device: str | None = None,
) -> GroupedBrowserSpec:
    """Helper to create a GroupedBrowserSpec from (browser, version) pairs."""
    return GroupedBrowserSpec(
        os=os,
        os_version=os_version,
        device=device,
        browsers=tuple(BrowserVersionSpec(b, v) for b, v in browsers),
    )


@pytest.fixture
def iphone7_safari() -> AvailableBrowser:
    return make_browser(
        browser="Mobile Safari",
        browser_version="10.3",
        os="ios",
        os_version="10.3",
        device="iPhone 7",
        real_mobile=True,
    )


@pytest.fixture
def windows_catalog() -> list[AvailableBrowser]:
    """Five chrome versions, two firefox versions and an IE on Windows 10."""
    return [
        make_browser("chrome", "68.0"),
        make_browser("chrome", "70.0"),
        make_browser("chrome", "69.0"),
        make_browser("chrome", "71.0"),
        make_browser("chrome", "67.0"),
        make_browser("firefox", "9"),
        make_browser("firefox", "10"),
        make_browser("ie", "11.0"),
    ]


@pytest.fixture
def raw_catalog() -> list[dict[str, Any]]:
    """BrowserStack-shaped catalog response, including unstable versions."""
    return [
        {
            "os": "Windows",
            "os_version": "10",
            "browser": "chrome",
            "browser_version": "71.0",
            "device": None,
        },
        {
            "os": "Windows",
            "os_version": "10",
            "browser": "chrome",
            "browser_version": "72.0 beta",
            "device": None,
        },
        {
            "os": "Windows",
            "os_version": "10",
            "browser": "firefox",
            "browser_version": "65.0 dev",
            "device": None,
        },
        {
            "os": "ios",
            "os_version": "10.3",
            "browser": "Mobile Safari",
            "browser_version": None,
            "device": "iPhone 7",
            "real_mobile": True,
        },
    ]


@pytest.fixture
def specs_file(tmp_path):
    """Write a spec list to a temp browsers.json and return its path."""

    def _write(data: Any) -> str:
        path = tmp_path / "browsers.json"
        path.write_text(json.dumps(data))
        return str(path)

    return _write


@pytest.fixture
def temp_db(tmp_path):
    """DataStore with a temporary SQLite database."""
    db_path = str(tmp_path / "test.db")
    store = DataStore(db_path=db_path)
    yield store
    store.close()
