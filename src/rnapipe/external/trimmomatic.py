"""Trimmomatic wrapper."""

from pathlib import Path
from typing import Optional, Sequence

from rnapipe.external.base import ExternalTool


class Trimmomatic(ExternalTool):
    """Trimmomatic paired-end adapter and quality trimming."""

    tool_name = "trimmomatic"
    default_executable = "trimmomatic"
    version_command = "-version"

    def trim_paired(
        self,
        mate1: Path,
        mate2: Path,
        paired1: Path,
        unpaired1: Path,
        paired2: Path,
        unpaired2: Path,
        adapters: Path,
        illuminaclip: str = "2:30:10",
        steps: Sequence[str] = (),
        log_file: Optional[Path] = None,
    ) -> None:
        """Trim a read pair into paired/unpaired outputs for each mate."""
        paired1.parent.mkdir(parents=True, exist_ok=True)
        cmd = [
            self.executable, "PE",
            "-threads", str(self.threads),
            "-phred33",
            str(mate1), str(mate2),
            str(paired1), str(unpaired1),
            str(paired2), str(unpaired2),
            f"ILLUMINACLIP:{adapters}:{illuminaclip}",
            *steps,
        ]
        self.run(cmd, log_file=log_file)
        self.logger.info(f"Trimmed reads saved to: {paired1.parent}")
