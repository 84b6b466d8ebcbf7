"""Renderer collaborator — runs the typesetting executable and opens results.

The DocumentBuilder never touches ``subprocess`` directly; it talks to an
object with two methods:

    run(command, args) -> int      blocking, returns the exit code
    open_for_viewing(path)         hand a finished artifact to the OS viewer

``ProcessRenderer`` is the real implementation. Tests inject a recording
object with the same two methods instead.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Protocol, Sequence

from texdoc.errors import RendererExecutionError

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Narrow interface the builder uses to reach the operating system."""

    def run(self, command: str, args: Sequence[str]) -> int: ...

    def open_for_viewing(self, path: Path) -> None: ...


class ProcessRenderer:
    """Runs the renderer as a child process and waits for it to exit."""

    def run(self, command: str, args: Sequence[str]) -> int:
        """Run ``command`` with ``args`` and return its exit code.

        A non-zero exit code is returned, not raised.

        Raises
        ------
        RendererExecutionError
            If the executable cannot be launched (missing, not executable).
        """
        cmd = [str(command), *[str(a) for a in args]]
        logger.debug("Renderer cmd: %s", " ".join(cmd))
        try:
            completed = subprocess.run(cmd, check=False)
        except FileNotFoundError as e:
            raise RendererExecutionError(
                f"Renderer executable not found: {command}"
            ) from e
        except OSError as e:
            raise RendererExecutionError(
                f"Could not launch renderer {command}: {e}"
            ) from e
        return completed.returncode

    def open_for_viewing(self, path: Path) -> None:
        """Open ``path`` with the platform's default viewer."""
        path = Path(path)
        logger.debug("Opening %s for viewing", path)
        if sys.platform.startswith("win"):
            try:
                os.startfile(str(path))  # type: ignore[attr-defined]
            except OSError as e:
                raise RendererExecutionError(f"Could not open {path}: {e}") from e
            return
        opener = "open" if sys.platform == "darwin" else "xdg-open"
        try:
            subprocess.Popen([opener, str(path)])
        except OSError as e:
            raise RendererExecutionError(
                f"Could not open {path} with {opener}: {e}"
            ) from e
