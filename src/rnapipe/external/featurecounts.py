"""featureCounts wrapper."""

from pathlib import Path
from typing import Optional, Sequence

from rnapipe.external.base import ExternalTool


class FeatureCounts(ExternalTool):
    """featureCounts gene-level read pair quantification."""

    tool_name = "featureCounts"
    default_executable = "featureCounts"
    version_command = "-v"
    version_regex = r"v(\d+\.\d+(?:\.\d+)*)"

    def count(
        self,
        bams: Sequence[Path],
        annotation: Path,
        output: Path,
        strandedness: int = 0,
        log_file: Optional[Path] = None,
    ) -> None:
        """Count read pairs per gene across all BAMs into one table."""
        output.parent.mkdir(parents=True, exist_ok=True)
        cmd = [
            self.executable,
            "-T", str(self.threads),
            "-p", "--countReadPairs",
            "-s", str(strandedness),
            "-a", str(annotation),
            "-o", str(output),
            *[str(b) for b in bams],
        ]
        self.run(cmd, log_file=log_file)
        self.logger.info(f"Count table written to: {output}")
