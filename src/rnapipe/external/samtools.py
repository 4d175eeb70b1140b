"""Samtools wrapper."""

from pathlib import Path

from rnapipe.external.base import ExternalTool


class Samtools(ExternalTool):
    """Samtools BAM sorting and indexing."""

    tool_name = "samtools"
    default_executable = "samtools"
    required_version = "1.9"

    def sort_bam(self, input_bam: Path, output_bam: Path) -> None:
        """Coordinate-sort a BAM file."""
        cmd = [
            self.executable, "sort",
            "-@", str(self.threads),
            "-o", str(output_bam),
            str(input_bam),
        ]

        output_bam.parent.mkdir(parents=True, exist_ok=True)
        stdout, _ = self.run(cmd)
        if stdout:
            self.logger.debug(f"samtools sort output: {stdout[:500]}")
        self.logger.info(f"Sorted BAM saved to: {output_bam}")

    def index_bam(self, bam_file: Path) -> Path:
        """Index a sorted BAM file and return the .bai path."""
        cmd = [
            self.executable, "index",
            "-@", str(self.threads),
            str(bam_file),
        ]

        stdout, _ = self.run(cmd)
        if stdout:
            self.logger.debug(f"samtools index output: {stdout[:500]}")
        index = Path(f"{bam_file}.bai")
        self.logger.info(f"BAM index created: {index}")
        return index
