"""Exception hierarchy for browser-matrix."""

from __future__ import annotations

import json

from browser_matrix.core.models import ResolvedSpec


class BrowserMatrixError(Exception):
    """Base class for all errors the CLI reports and exits on."""


class CatalogFetchError(BrowserMatrixError):
    """The provider catalog could not be retrieved."""


class SpecLoadError(BrowserMatrixError):
    """The browser spec file is missing, unparseable or malformed."""


class RunnerLaunchError(BrowserMatrixError):
    """The external test runner could not be started."""


class ConfigurationError(BrowserMatrixError):
    """A declared spec cannot be satisfied by the catalog."""

    headline = "Invalid browser spec"

    def __init__(self, spec: ResolvedSpec):
        self.spec = spec
        super().__init__(f"{self.headline}: {self.spec_json()}")

    def spec_json(self) -> str:
        return json.dumps(self.spec.to_dict(), indent="\t")


class NoMatchingBrowsersError(ConfigurationError):
    headline = "No browsers available for the following spec"


class InsufficientVersionsError(ConfigurationError):
    headline = "Not enough versions available for the following spec"

    def __init__(self, spec: ResolvedSpec, available: int):
        self.available = available
        super().__init__(spec)
