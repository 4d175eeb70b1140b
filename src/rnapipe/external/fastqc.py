"""FastQC wrapper."""

from pathlib import Path
from typing import Sequence

from rnapipe.external.base import ExternalTool


class FastQC(ExternalTool):
    """FastQC read quality reports."""

    tool_name = "fastqc"
    default_executable = "fastqc"
    version_regex = r"v(\d+\.\d+(?:\.\d+)*)"

    def run_qc(self, reads: Sequence[Path], output_dir: Path) -> None:
        """Write an HTML/zip report pair per read file into output_dir."""
        output_dir.mkdir(parents=True, exist_ok=True)
        cmd = [
            self.executable,
            "--threads", str(self.threads),
            "--outdir", str(output_dir),
            *[str(r) for r in reads],
        ]
        self.run(cmd)
        self.logger.info(f"FastQC reports written to: {output_dir}")
