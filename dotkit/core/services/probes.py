"""
Read-only probes of the machine: tool lookup, version output, env.

The plan builders ask these questions instead of calling ``shutil`` or
``subprocess`` directly, so tests can answer them with a fake.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)


class SystemProbe:
    """Answers questions about the current machine.

    ``add_path`` prepends directories to the PATH used for lookups and
    exported to later plan steps (the Homebrew ``bin`` directory, which
    may not exist until the Homebrew step has run).
    """

    def __init__(self, base_path: str | None = None, environ: dict[str, str] | None = None):
        self._environ = dict(os.environ if environ is None else environ)
        self._base_path = base_path if base_path is not None else self._environ.get("PATH", os.defpath)
        self._extra: list[str] = []

    def add_path(self, directory: str | Path) -> None:
        entry = str(directory)
        if entry not in self._extra:
            self._extra.insert(0, entry)

    @property
    def path(self) -> str:
        return os.pathsep.join([*self._extra, self._base_path]) if self._extra else self._base_path

    def env(self) -> dict[str, str]:
        """Environment overrides for plan steps."""
        return {"PATH": self.path}

    def getenv(self, name: str, default: str = "") -> str:
        return self._environ.get(name, default)

    def which(self, tool: str) -> str | None:
        return shutil.which(tool, path=self.path)

    def output(self, argv: list[str], timeout: int = 10) -> str:
        """Combined stdout+stderr of ``argv``, or "" if it can't be run."""
        if not argv or self.which(argv[0]) is None:
            return ""
        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=timeout,
                env={**self._environ, "PATH": self.path},
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            logger.debug("Probe %s failed: %s", argv, e)
            return ""
        return (result.stdout or "") + (result.stderr or "")

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_symlink(self, path: Path) -> bool:
        return path.is_symlink()
