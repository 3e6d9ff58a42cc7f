# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free execution of the external linter process."""

from __future__ import annotations

import logging
import os
import shutil

# Bandit: subprocess usage is intentional; commands are passed as argument
# vectors and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from .errors import ProcessExecutionError, ProcessLaunchError

LOGGER = logging.getLogger(__name__)

TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class ProcessResult:
    """Output and exit status captured from a finished process."""

    command: tuple[str, ...]
    returncode: int
    stdout: bytes
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Return ``True`` when the process exited with status zero."""

        return self.returncode == 0


@runtime_checkable
class ProcessRunner(Protocol):
    """Run a command vector in a working directory and capture its output."""

    def run(self, command_parts: Sequence[str], working_dir: Path) -> ProcessResult:
        """Execute ``command_parts`` and return the captured result.

        Raises:
            ProcessLaunchError: If the process cannot be started.
            ProcessExecutionError: If the process is terminated before completing.
        """


def _ensure_text(value: str | bytes | None) -> str:
    """Return ``value`` as text, decoding bytes with replacement.

    Args:
        value: Stream content captured from the child process.

    Returns:
        str: Decoded text; empty when ``value`` is ``None``.
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="replace")


def _has_separator(name: str) -> bool:
    return os.sep in name or bool(os.altsep and os.altsep in name)


def _normalize_args(args: Sequence[str], working_dir: Path, search_path: str | None) -> list[str]:
    """Return ``args`` with the executable resolved as the child will see it.

    Absolute executables are kept. Executables containing a path separator are
    anchored at ``working_dir``. Bare names are looked up on ``search_path``.

    Args:
        args: Argument vector; the first item names the executable.
        working_dir: Directory the child process starts in.
        search_path: ``PATH`` value of the child environment.

    Returns:
        list[str]: Argument vector whose first item is the executable path.

    Raises:
        ProcessLaunchError: If ``args`` is empty or the executable cannot be found.
    """

    if not args:
        raise ProcessLaunchError((), "command requires at least one argument")

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]
    if _has_separator(head):
        return [str(working_dir / head_path), *rest]

    resolved = shutil.which(head, path=search_path)
    if resolved is None:
        raise ProcessLaunchError(args, f"executable '{head}' was not found on PATH")
    return [resolved, *rest]


class SubprocessRunner:
    """Run the linter through :mod:`subprocess` without shell interpolation."""

    def __init__(self, *, timeout: float | None = None, env: Mapping[str, str] | None = None) -> None:
        """Configure the runner.

        Args:
            timeout: Seconds to wait before the child is killed; ``None`` waits forever.
            env: Environment for the child; the parent environment when ``None``.
        """

        if timeout is not None and timeout < 0:
            raise ValueError("timeout must be non-negative")
        self._timeout = timeout
        self._env = dict(env) if env is not None else None

    def run(self, command_parts: Sequence[str], working_dir: Path) -> ProcessResult:
        """Execute ``command_parts`` in ``working_dir``.

        Standard output is read until end-of-stream before the exit status is
        collected.

        Args:
            command_parts: Argument vector; the first item names the executable.
            working_dir: Directory the child process starts in.

        Returns:
            ProcessResult: Captured stdout bytes, decoded stderr and exit status.

        Raises:
            ProcessLaunchError: If the executable is missing or cannot be started.
            ProcessExecutionError: If the process exceeds the configured timeout.
        """

        command = tuple(command_parts)
        environment = self._env if self._env is not None else os.environ
        normalized = _normalize_args(command, working_dir, environment.get("PATH"))
        LOGGER.debug("running %s in %s", " ".join(command), working_dir)
        try:
            # Bandit: argument vectors come from the host command template.
            process = subprocess.Popen(  # nosec B603
                normalized,
                cwd=str(working_dir),
                env=self._env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise ProcessLaunchError(command, exc.strerror or str(exc)) from exc

        with process:
            try:
                stdout, stderr = process.communicate(timeout=self._timeout)
            except subprocess.TimeoutExpired as exc:
                process.kill()
                _, late_stderr = process.communicate()
                stderr_text = _ensure_text(exc.stderr) or _ensure_text(late_stderr)
                raise ProcessExecutionError(
                    command,
                    TIMEOUT_RETURNCODE,
                    stderr_text,
                    detail=f"timed out after {self._timeout:.1f}s",
                ) from exc

        return ProcessResult(
            command=command,
            returncode=process.returncode,
            stdout=stdout or b"",
            stderr=_ensure_text(stderr),
        )


__all__ = ["ProcessResult", "ProcessRunner", "SubprocessRunner", "TIMEOUT_RETURNCODE"]
