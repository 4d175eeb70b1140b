"""MultiQC wrapper."""

from pathlib import Path
from typing import Optional

from rnapipe.external.base import ExternalTool


class MultiQC(ExternalTool):
    """MultiQC report aggregation over a project tree."""

    tool_name = "multiqc"
    default_executable = "multiqc"

    def aggregate(self, input_dir: Path, output_dir: Path, log_file: Optional[Path] = None) -> None:
        """Combine every recognised tool report below input_dir."""
        output_dir.mkdir(parents=True, exist_ok=True)
        cmd = [
            self.executable,
            "--force",
            "--outdir", str(output_dir),
            str(input_dir),
        ]
        self.run(cmd, log_file=log_file)
        self.logger.info(f"MultiQC report written to: {output_dir}")
