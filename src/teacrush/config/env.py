"""TEACRUSH_* environment variables, parsed.

Values that do not parse are logged and treated as unset, so a typo in the
environment falls back to the config file instead of aborting a job.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})


class EnvReader:
    """Typed lookups over an environment mapping.

    Tests pass their own mapping; everything else reads os.environ:

        EnvReader({"TEACRUSH_PROBE_TIMEOUT": "5"}).get_float(
            "TEACRUSH_PROBE_TIMEOUT"
        )
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env: Mapping[str, str] = os.environ if env is None else env

    def get_str(self, var: str, default: str | None = None) -> str | None:
        return self._env.get(var, default)

    def get_float(self, var: str, default: float | None = None) -> float | None:
        raw = self._env.get(var)
        if raw is None:
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a number", var, raw)
            return default

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Any value other than true/1/yes/on (any case) reads as False."""
        raw = self._env.get(var)
        if raw is None:
            return default
        return raw.strip().lower() in _TRUE_WORDS

    def get_path(
        self, var: str, must_exist: bool = True, default: Path | None = None
    ) -> Path | None:
        """User-expanded path; with must_exist, a missing path reads as unset.

        Tool paths must exist. A log file path is created on first write, so
        it is read with must_exist=False.
        """
        raw = self._env.get(var)
        if raw is None:
            return default
        path = Path(raw).expanduser()
        if must_exist and not path.exists():
            logger.warning("Ignoring %s=%s: path does not exist", var, raw)
            return default
        return path
