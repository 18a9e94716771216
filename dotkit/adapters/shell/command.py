"""
Shell command adapter — run one external command.

Package managers, installer scripts, ``chsh`` and version probes all go
through here.  Output is either captured into the receipt or streamed
straight to the terminal (``stream=True``) for long interactive steps
like ``apt upgrade``, where the user needs to see progress and answer
prompts.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from dotkit.adapters.base import Adapter, ExecutionContext
from dotkit.core.models.action import Receipt

logger = logging.getLogger(__name__)

_TAIL = 2000


class ShellCommandAdapter(Adapter):
    """Execute a command and capture its result.

    Action params:
        argv (list[str]): The command and its arguments.
        sudo (bool): Prefix with ``sudo`` unless already root (default: False).
        stream (bool): Inherit stdout/stderr instead of capturing (default: False).
        timeout (int | None): Seconds before giving up (default: None).
        expect_output (str): Substring stdout+stderr must contain for success.
    """

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self) -> bool:
        return shutil.which("sh") is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.params.get("argv")
        if not argv:
            return False, "Missing required param: 'argv'"
        if not isinstance(argv, list) or not all(isinstance(a, str) for a in argv):
            return False, "'argv' must be a list of strings"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        params = context.params
        argv: list[str] = list(params["argv"])
        if params.get("sudo") and os.geteuid() != 0:
            argv = ["sudo", *argv]
        stream = bool(params.get("stream", False))
        timeout = params.get("timeout")
        expect = params.get("expect_output")

        env = os.environ.copy()
        env.update(context.env)

        logger.debug("Executing: %s", " ".join(argv))
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=not stream,
                text=True,
                timeout=timeout,
                env=env,
            )
        except FileNotFoundError:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"{argv[0]}: command not found",
                metadata={"argv": argv},
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command timed out after {timeout}s",
                metadata={"argv": argv, "timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Command execution error: {e}",
                metadata={"argv": argv},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = (result.stdout or "").strip()[-_TAIL:]
        stderr = (result.stderr or "").strip()[-_TAIL:]
        metadata = {"argv": argv, "return_code": result.returncode}

        if result.returncode != 0:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=stderr or f"Command exited with code {result.returncode}",
                output=stdout,
                duration_ms=elapsed_ms,
                metadata=metadata,
            )

        if expect and expect not in f"{stdout}\n{stderr}":
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Expected '{expect}' in output, got: {stdout or stderr or '(nothing)'}",
                output=stdout,
                duration_ms=elapsed_ms,
                metadata=metadata,
            )

        return Receipt.success(
            adapter=self.name,
            action_id=context.action.id,
            output=stdout,
            duration_ms=elapsed_ms,
            metadata={**metadata, "stderr": stderr},
        )
