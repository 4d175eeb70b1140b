"""Dependency checker for rnapipe.

Performs the run-wide pre-flight probe of every collaborator needed by an
enabled stage. Missing required tools are fatal; missing optional tools turn
their stage off for the whole run.
"""

from __future__ import annotations

import logging
import re
import subprocess
import warnings
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from packaging import version

from rnapipe.exceptions import DependencyError, OptionalToolUnavailable
from rnapipe.external.base import resolve_executable
from rnapipe.utils.logging import get_logger

if TYPE_CHECKING:
    from rnapipe.config import Config


@dataclass
class Tool:
    """Tool dependency definition."""

    key: str  # attribute of ToolConfig
    name: str
    required: bool
    purpose: str
    install_hint: str
    min_version: Optional[str] = None
    version_arg: str = "--version"
    # Config toggle demoted when an optional tool is absent
    toggle: Optional[str] = None


def find_tool(executable: str) -> Optional[str]:
    """Locate an executable name or explicit path; None if absent."""
    return resolve_executable(executable)


def get_tool_version(executable: str, version_arg: str = "--version") -> Optional[str]:
    """Get version string from a tool.

    Args:
        executable: Tool executable name or path
        version_arg: Argument to get version (default: --version)

    Returns:
        Version string if found, None otherwise
    """
    try:
        result = subprocess.run(
            [executable, version_arg],
            capture_output=True,
            text=True,
            timeout=5,
        )
        output = result.stdout + result.stderr
        match = re.search(r"(\d+\.\d+(?:\.\d+)?)", output)
        if match:
            return match.group(1)
    except (OSError, subprocess.SubprocessError):
        pass
    return None


def compare_versions(current: str, minimum: str) -> bool:
    """Return True if current >= minimum; unparseable versions pass."""
    try:
        return version.parse(current) >= version.parse(minimum)
    except version.InvalidVersion:
        return True


# Tool dependency definitions, in stage order
TOOLS = [
    Tool(
        key="fastqc",
        name="FastQC",
        required=False,
        purpose="Raw read quality check (optional)",
        install_hint="conda install -c bioconda fastqc",
        toggle="run_quality_check",
    ),
    Tool(
        key="trimmomatic",
        name="Trimmomatic",
        required=True,
        purpose="Adapter and quality trimming",
        install_hint="conda install -c bioconda trimmomatic",
        version_arg="-version",
    ),
    Tool(
        key="star",
        name="STAR",
        required=True,
        purpose="Spliced read alignment",
        install_hint="conda install -c bioconda star",
        min_version="2.7.0",
    ),
    Tool(
        key="samtools",
        name="samtools",
        required=True,
        purpose="BAM sorting and indexing",
        install_hint="conda install -c bioconda samtools",
        min_version="1.9",
    ),
    Tool(
        key="featurecounts",
        name="featureCounts",
        required=True,
        purpose="Gene-level quantification",
        install_hint="conda install -c bioconda subread",
        min_version="2.0.2",
        version_arg="-v",
    ),
    Tool(
        key="rscript",
        name="Rscript",
        required=True,
        purpose="Differential expression (DESeq2)",
        install_hint="conda install -c bioconda bioconductor-deseq2",
    ),
    Tool(
        key="multiqc",
        name="MultiQC",
        required=False,
        purpose="Combined QC report (optional)",
        install_hint="pip install multiqc",
        toggle="run_report_aggregation",
    ),
]


class DependencyChecker:
    """Check and report on tool dependencies for a configuration."""

    def __init__(self, config: Config, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or get_logger("dependency_checker")
        self.missing_required: List[Tool] = []
        self.missing_optional: List[Tool] = []
        self.found_tools: dict[str, str] = {}
        self.version_warnings: List[str] = []
        self.demoted: List[str] = []

    def _is_needed(self, tool: Tool) -> bool:
        return tool.toggle is None or bool(getattr(self.config, tool.toggle))

    def check_all(self, check_versions: bool = True) -> bool:
        """Probe every tool needed by an enabled stage.

        Returns:
            True if all required tools are available
        """
        self.logger.info("Checking external tools...")

        for tool in TOOLS:
            if not self._is_needed(tool):
                self.logger.debug(f"{tool.name} not needed (stage disabled)")
                continue

            executable = getattr(self.config.tools, tool.key)
            found = find_tool(executable)
            if found is None:
                if tool.required:
                    self.missing_required.append(tool)
                    self.logger.error(f"✗ {tool.name} not found: {executable} (REQUIRED)")
                else:
                    self.missing_optional.append(tool)
                    self.logger.warning(f"⚠ {tool.name} not found: {executable} (optional)")
                continue

            self.found_tools[tool.name] = found
            if check_versions and tool.min_version:
                current = get_tool_version(found, tool.version_arg)
                if current and not compare_versions(current, tool.min_version):
                    warning = (
                        f"{tool.name}: version {current} < recommended {tool.min_version}"
                    )
                    self.version_warnings.append(warning)
                    self.logger.warning(f"⚠ {warning}")
                else:
                    self.logger.debug(f"✓ {tool.name} {current or '(version unknown)'}")
            else:
                self.logger.debug(f"✓ {tool.name} found at {found}")

        return not self.missing_required

    def apply_demotions(self) -> List[str]:
        """Disable the stage of every missing optional tool.

        Evaluated once per run; returns the toggles that were switched off.
        """
        for tool in self.missing_optional:
            if tool.toggle and getattr(self.config, tool.toggle):
                setattr(self.config, tool.toggle, False)
                self.demoted.append(tool.toggle)
                message = f"{tool.name} unavailable; disabling {tool.toggle} for this run"
                self.logger.warning(message)
                warnings.warn(message, OptionalToolUnavailable, stacklevel=2)
        return self.demoted

    def raise_if_missing_required(self) -> None:
        """Raise DependencyError if required tools are missing."""
        if self.missing_required:
            names = [tool.name for tool in self.missing_required]
            hints = "; ".join(f"{t.name}: {t.install_hint}" for t in self.missing_required)
            raise DependencyError(
                f"Missing required tools: {', '.join(names)} ({hints})", missing=names
            )

    def format_report(self) -> str:
        """Render a detailed dependency report."""
        lines = ["=" * 70, "rnapipe Tool Check", "=" * 70]

        if self.found_tools:
            lines.append("")
            lines.append("✓ Found tools:")
            for name, path in self.found_tools.items():
                lines.append(f"  - {name}: {path}")

        if self.version_warnings:
            lines.append("")
            lines.append("⚠ Version warnings:")
            lines.extend(f"  - {warning}" for warning in self.version_warnings)

        for title, tools in (
            ("⚠ Missing optional tools (stage will be skipped):", self.missing_optional),
            ("✗ Missing REQUIRED tools:", self.missing_required),
        ):
            if not tools:
                continue
            lines.append("")
            lines.append(title)
            for tool in tools:
                lines.append(f"  - {tool.name}")
                lines.append(f"    Purpose: {tool.purpose}")
                lines.append(f"    Install: {tool.install_hint}")

        lines.append("")
        lines.append("=" * 70)
        if self.missing_required:
            lines.append("ERROR: Cannot proceed without required tools.")
        else:
            lines.append("✓ All required tools available")
        lines.append("=" * 70)
        return "\n".join(lines)

    def print_report(self) -> None:
        """Print a detailed dependency report."""
        print("\n" + self.format_report() + "\n")


def check_dependencies(config: Config, logger: Optional[logging.Logger] = None) -> DependencyChecker:
    """Run the pre-flight check, demote optional stages, fail on missing tools.

    Raises:
        DependencyError: If required tools are missing
    """
    checker = DependencyChecker(config, logger=logger)
    checker.check_all()
    checker.raise_if_missing_required()
    checker.apply_demotions()
    return checker
