"""Runner invoker — hands the target browsers to the external test runner."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from browser_matrix.core.errors import RunnerLaunchError
from browser_matrix.core.models import AvailableBrowser, RunResult

logger = logging.getLogger(__name__)

DEFAULT_RUNNER_COMMAND = ["node_modules/.bin/karma", "start", "karma.config.js"]
DEFAULT_BROWSERS_FILE_VAR = "KARMA_BROWSERSTACK_BROWSERSFILE"


@dataclass
class RunnerConfig:
    command: list[str] = field(
        default_factory=lambda: list(DEFAULT_RUNNER_COMMAND)
    )
    browsers_file_var: str = DEFAULT_BROWSERS_FILE_VAR
    cwd: Optional[str] = None


def write_targets(
    browsers: Iterable[AvailableBrowser], directory: Optional[str] = None
) -> Path:
    """Serialize target browsers to a fresh JSON file and return its path."""
    timestamp = datetime.now().strftime("%Y%m%dT%H%M%S")
    payload = [b.to_dict() for b in browsers]
    with tempfile.NamedTemporaryFile(
        mode="w",
        prefix=f"browser-matrix-targets-{timestamp}-",
        suffix=".json",
        dir=directory,
        delete=False,
    ) as f:
        json.dump(payload, f)
    logger.debug("Wrote %d target browsers to %s", len(payload), f.name)
    return Path(f.name)


def read_targets(path: str | Path) -> list[AvailableBrowser]:
    """Read a targets file written by :func:`write_targets`."""
    data = json.loads(Path(path).read_text())
    return [AvailableBrowser.from_dict(entry) for entry in data]


@contextmanager
def targets_file(
    browsers: Iterable[AvailableBrowser], directory: Optional[str] = None
) -> Iterator[Path]:
    """Write the targets file for the duration of the block, then remove it."""
    path = write_targets(browsers, directory=directory)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Removed %s", path)


def launch_runner(config: RunnerConfig, browsers_file: str | Path) -> int:
    """Run the test runner to completion and return its exit code.

    The child inherits stdout/stderr, so its output reaches the terminal
    unchanged as it is produced.
    """
    env = os.environ.copy()
    env[config.browsers_file_var] = str(browsers_file)

    logger.info("Launching runner: %s", " ".join(config.command))
    try:
        result = subprocess.run(config.command, env=env, cwd=config.cwd)
    except OSError as e:
        raise RunnerLaunchError(
            f"Failed to launch runner {config.command[0]!r}: {e}"
        ) from e
    return result.returncode


def run_tests(
    browsers: Iterable[AvailableBrowser], config: RunnerConfig
) -> RunResult:
    """Write the targets file, run the suite against it and clean up."""
    start = time.time()
    with targets_file(browsers) as path:
        exit_code = launch_runner(config, path)
    return RunResult(
        success=exit_code == 0,
        exit_code=exit_code,
        targets_file=str(path),
        duration_seconds=time.time() - start,
    )


def launcher_profiles(
    browsers: Iterable[AvailableBrowser],
) -> dict[str, dict[str, Any]]:
    """Build Karma ``customLaunchers`` entries for the given browsers."""
    profiles = {}
    for b in browsers:
        name = "bs_" + "".join(
            c if c.isalnum() else "_" for c in b.identity_key()
        ).lower()
        profiles[name] = {
            "base": "BrowserStack",
            "os": b.os,
            "os_version": b.os_version,
            "browser": b.browser,
            "browser_version": b.browser_version,
            "device": b.device,
            "real_mobile": bool(b.real_mobile),
        }
    return profiles
