"""Base class for external tool execution."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import IO, Any, Optional, Sequence

from packaging import version

from rnapipe.exceptions import ExternalToolError
from rnapipe.utils.logging import LogTemplates, get_logger


def resolve_executable(executable: str) -> Optional[str]:
    """Return the absolute path of an executable name or explicit path."""
    if os.sep in executable or (os.altsep and os.altsep in executable):
        path = Path(executable)
        if path.is_file() and os.access(path, os.X_OK):
            return str(path)
        return None
    return shutil.which(executable)


class ExternalTool:
    """Base class for external tool wrappers."""

    tool_name: str = ""
    default_executable: str = ""
    required_version: Optional[str] = None
    version_command: Optional[str] = "--version"
    version_regex: Optional[str] = r"(\d+\.\d+(?:\.\d+)*)"

    def __init__(
        self,
        executable: Optional[str] = None,
        threads: int = 1,
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.executable = executable or self.default_executable
        self.threads = threads
        self.timeout = timeout
        # Use centralized logger; namespace under rnapipe.external.<tool>
        self.logger = logger or get_logger(f"external.{self.tool_name}")
        self._check_installation()

    def check_tool_availability(self) -> bool:
        """Check if the executable can be located."""
        return resolve_executable(self.executable) is not None

    def _check_installation(self) -> None:
        """Check that the tool can be invoked."""
        if not self.check_tool_availability():
            raise ExternalToolError(
                f"{self.tool_name} not found ({self.executable}). "
                f"Install it or set its path in the tools section of the configuration"
            )

    def get_tool_version(self) -> Optional[str]:
        """Get tool version string."""
        if not self.version_command:
            return None
        try:
            result = subprocess.run(
                [self.executable, self.version_command],
                capture_output=True,
                text=True,
                check=False,
                timeout=10,
            )
        except (subprocess.TimeoutExpired, OSError) as e:
            self.logger.debug(f"Could not get version for {self.tool_name}: {e}")
            return None

        output = result.stdout + result.stderr
        if self.version_regex:
            match = re.search(self.version_regex, output)
            if match:
                return match.group(1)
        return None

    def check_minimum_version(self, current_version: str, required_version: str) -> bool:
        """Check if current version meets minimum requirement.

        Unparseable versions are accepted with a warning so non-standard
        version strings never block a run.
        """
        try:
            current_ver = version.parse(current_version)
            required_ver = version.parse(required_version)
        except version.InvalidVersion:
            self.logger.warning(
                f"Could not compare {self.tool_name} version '{current_version}' "
                f"with '{required_version}'; please verify it manually"
            )
            return True
        return current_ver >= required_ver

    def get_tool_info(self) -> dict[str, Any]:
        """Get comprehensive tool information."""
        return {
            "name": self.tool_name,
            "executable": self.executable,
            "available": self.check_tool_availability(),
            "version": self.get_tool_version(),
            "required_version": self.required_version,
            "path": resolve_executable(self.executable),
        }

    def run(
        self,
        cmd: Sequence[str],
        cwd: Optional[Path] = None,
        log_file: Optional[Path] = None,
        stdout_file: Optional[Path] = None,
    ) -> tuple[str, str]:
        """Execute a command and block until it exits.

        Args:
            cmd: Command and arguments to execute
            cwd: Working directory for the command
            log_file: Append stderr (and stdout unless redirected) to this file
            stdout_file: Write stdout to this file

        Returns:
            Tuple of (stdout, stderr) for streams that were captured
        """
        cmd = [str(c) for c in cmd]
        cmd_str = " ".join(cmd)
        self.logger.info(LogTemplates.TOOL_START.format(tool_name=self.tool_name, command=cmd_str))

        handles: list[IO[str]] = []
        try:
            stdout: Any = subprocess.PIPE
            stderr: Any = subprocess.PIPE
            if log_file is not None:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                log_handle = open(log_file, "a", encoding="utf-8")
                handles.append(log_handle)
                stdout = stderr = log_handle
            if stdout_file is not None:
                stdout_file.parent.mkdir(parents=True, exist_ok=True)
                out_handle = open(stdout_file, "w", encoding="utf-8")
                handles.append(out_handle)
                stdout = out_handle

            result = subprocess.run(
                cmd,
                cwd=cwd,
                stdout=stdout,
                stderr=stderr,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            self.logger.error(f"Command timed out after {self.timeout}s: {cmd_str}")
            raise ExternalToolError(
                f"{self.tool_name} timed out after {self.timeout}s",
                command=cmd,
                returncode=-1,
                stderr=f"Process timed out after {self.timeout} seconds",
            )
        except subprocess.CalledProcessError as e:
            self.logger.error(
                LogTemplates.TOOL_FAILURE.format(tool_name=self.tool_name, exit_code=e.returncode)
            )
            if e.stderr:
                self.logger.error(f"Error: {e.stderr[-1000:]}")
            raise ExternalToolError(
                f"{self.tool_name} exited with status {e.returncode}",
                command=cmd,
                returncode=e.returncode,
                stderr=e.stderr,
            )
        except OSError as e:
            self.logger.error(f"OS error running command: {cmd_str}: {e}")
            raise ExternalToolError(
                f"Failed to execute {self.tool_name}", command=cmd, returncode=-1, stderr=str(e)
            )
        finally:
            for handle in handles:
                handle.close()

        if result.stderr:
            self.logger.debug(f"Command stderr: {result.stderr[:500]}")
        return result.stdout or "", result.stderr or ""
