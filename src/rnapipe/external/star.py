"""STAR aligner wrapper."""

from pathlib import Path

from rnapipe.external.base import ExternalTool

# STAR appends this to --outFileNamePrefix for unsorted BAM output
UNSORTED_BAM_SUFFIX = "Aligned.out.bam"


class StarAligner(ExternalTool):
    """STAR spliced alignment of paired reads."""

    tool_name = "STAR"
    default_executable = "STAR"
    required_version = "2.7.0"
    version_regex = r"(\d+\.\d+\.\d+)"

    @staticmethod
    def output_bam(prefix: str) -> Path:
        """Path of the unsorted BAM STAR writes for a given prefix."""
        return Path(prefix + UNSORTED_BAM_SUFFIX)

    def align_paired(
        self,
        mate1: Path,
        mate2: Path,
        genome_index: Path,
        prefix: str,
    ) -> Path:
        """Align a trimmed read pair and return the unsorted BAM path."""
        Path(prefix).parent.mkdir(parents=True, exist_ok=True)
        cmd = [
            self.executable,
            "--runThreadN", str(self.threads),
            "--genomeDir", str(genome_index),
            "--readFilesIn", str(mate1), str(mate2),
            "--outSAMtype", "BAM", "Unsorted",
            "--outFileNamePrefix", prefix,
        ]
        if str(mate1).endswith(".gz"):
            cmd.extend(["--readFilesCommand", "zcat"])
        self.run(cmd)
        output = self.output_bam(prefix)
        self.logger.info(f"Alignment written to: {output}")
        return output
