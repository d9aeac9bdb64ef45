"""Core data models for browser-matrix."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class AvailableBrowser:
    """One browser/OS/device combination offered by the provider."""

    os: str
    os_version: str
    browser: str
    browser_version: Optional[str] = None
    device: Optional[str] = None
    real_mobile: Optional[bool] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AvailableBrowser:
        return cls(
            os=data.get("os"),
            os_version=data.get("os_version"),
            browser=data.get("browser"),
            browser_version=data.get("browser_version"),
            device=data.get("device"),
            real_mobile=data.get("real_mobile"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "os": self.os,
            "os_version": self.os_version,
            "browser": self.browser,
            "browser_version": self.browser_version,
            "device": self.device,
            "real_mobile": self.real_mobile,
        }

    def identity_key(self) -> str:
        """Key used to de-duplicate browsers matched by several specs."""
        parts = (
            self.os,
            self.os_version,
            self.browser,
            self.browser_version,
            self.device,
        )
        return "_".join("" if p is None else str(p) for p in parts)


@dataclass(frozen=True)
class BrowserVersionSpec:
    browser: str
    browser_version: Optional[str] = None


@dataclass(frozen=True)
class GroupedBrowserSpec:
    os: str
    os_version: str
    device: Optional[str] = None
    browsers: tuple[BrowserVersionSpec, ...] = ()


# ── Version constraints ──────────────────────────────────────────────


@dataclass(frozen=True)
class NoVersion:
    """Any version matches."""

    def to_dict(self) -> dict[str, Any]:
        return {"type": "no-version"}


@dataclass(frozen=True)
class ExactList:
    """Version string must be one of ``versions``."""

    versions: frozenset[str] = field(default_factory=frozenset)
    # As written in browsers.json; used for display only.
    order: tuple[str, ...] = field(default=(), compare=False)

    def to_dict(self) -> dict[str, Any]:
        value = list(self.order) if self.order else sorted(self.versions)
        return {"type": "list", "value": value}


@dataclass(frozen=True)
class LastN:
    """The ``n`` numerically highest available versions."""

    n: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "last", "value": self.n}


VersionConstraint = Union[NoVersion, ExactList, LastN]


@dataclass(frozen=True)
class ResolvedSpec:
    device: Optional[str]
    os: str
    os_version: str
    browser: str
    browser_version: VersionConstraint

    def to_dict(self) -> dict[str, Any]:
        return {
            "device": self.device,
            "os": self.os,
            "os_version": self.os_version,
            "browser": self.browser,
            "browser_version": self.browser_version.to_dict(),
        }


@dataclass(frozen=True)
class TargetSelection:
    browsers: tuple[AvailableBrowser, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass
class RunResult:
    success: bool
    exit_code: int
    targets_file: Optional[str] = None
    duration_seconds: float = 0.0
