"""
Actions service - launches the configured script after a verified delivery.
"""
from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List

from webhook_handler.logging import get_logger

logger = get_logger(__name__)


class ActionLaunchError(Exception):
    """Raised when the script could not be started."""


class ActionLauncher:
    """
    Starts the script with the configured interpreter without waiting for it.

    Only a failure to start is reported; the script's exit code never
    reaches the caller. Handles of started scripts are kept until they
    have exited and been reaped.
    """

    def __init__(self, script: Path, interpreter: str = "bash"):
        self.script = Path(script)
        self.interpreter = interpreter
        self._running: List[subprocess.Popen] = []

    def command(self) -> List[str]:
        return [self.interpreter, str(self.script)]

    @property
    def running(self) -> int:
        """Number of launched scripts not yet reaped."""
        return len(self._running)

    def reap(self) -> int:
        """
        Collect exit codes of finished scripts.

        Returns:
            The number of scripts still running
        """
        still_running = []
        for process in self._running:
            returncode = process.poll()
            if returncode is None:
                still_running.append(process)
            elif returncode == 0:
                logger.info(f"{self.script} (pid {process.pid}) finished")
            else:
                logger.warning(f"{self.script} (pid {process.pid}) exited with {returncode}")
        self._running = still_running
        return len(still_running)

    def launch(self) -> subprocess.Popen:
        """
        Launch the script in its own session.

        Returns:
            The running process handle

        Raises:
            ActionLaunchError: If the script is missing or the interpreter cannot be executed
        """
        self.reap()

        if not self.script.is_file():
            raise ActionLaunchError(f"Script not found: {self.script}")

        try:
            process = subprocess.Popen(
                self.command(),
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise ActionLaunchError(f"Could not execute {self.interpreter} {self.script}: {e}") from e

        self._running.append(process)
        logger.info(f"Launched {self.script} (pid {process.pid})")
        return process
