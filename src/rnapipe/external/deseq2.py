"""Rscript/DESeq2 wrapper."""

from pathlib import Path
from typing import Optional

from rnapipe.external.base import ExternalTool


class DESeq2Runner(ExternalTool):
    """Differential expression through an R script run by Rscript.

    The script receives positional arguments:
    ``counts.csv coldata.csv output_dir reference_condition padj_threshold``.
    """

    tool_name = "Rscript"
    default_executable = "Rscript"

    def run_analysis(
        self,
        script: Path,
        counts: Path,
        coldata: Path,
        output_dir: Path,
        reference_condition: str = "control",
        padj_threshold: float = 0.05,
        log_file: Optional[Path] = None,
    ) -> None:
        """Run the analysis script on a count matrix and sample table."""
        output_dir.mkdir(parents=True, exist_ok=True)
        cmd = [
            self.executable,
            "--vanilla",
            str(script),
            str(counts),
            str(coldata),
            str(output_dir),
            reference_condition,
            str(padj_threshold),
        ]
        self.run(cmd, log_file=log_file)
        self.logger.info(f"Differential expression results in: {output_dir}")
