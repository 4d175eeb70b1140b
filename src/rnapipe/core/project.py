"""Project directory layout and artifact naming."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, NamedTuple, Optional

from rnapipe.constants import (
    ALIGNED_DIR,
    ANALYSIS_DIR,
    COUNTS_DIR,
    DEFAULT_SAMPLE_SHEET,
    LOGS_DIR,
    QC_DIR,
    RAW_DIR,
    REPORT_SUBDIR,
    RUN_LOG_NAME,
    TRIMMED_DIR,
)
from rnapipe.exceptions import NoInputSamplesError
from rnapipe.external.star import StarAligner

if TYPE_CHECKING:
    from rnapipe.core.samples import Sample


class TrimmedReads(NamedTuple):
    """The four Trimmomatic outputs of one sample."""

    paired1: Path
    unpaired1: Path
    paired2: Path
    unpaired2: Path


def _read_stem(path: Path) -> str:
    """File name without the read extension, as FastQC names its reports."""
    name = path.name
    for ext in (".gz", ".bz2"):
        if name.endswith(ext):
            name = name[: -len(ext)]
    for ext in (".fastq", ".fq", ".sam", ".bam"):
        if name.endswith(ext):
            return name[: -len(ext)]
    return name


@dataclass(frozen=True)
class ProjectLayout:
    """Fixed sub-areas of a project root.

    The raw-input area is populated by the operator and never written; every
    other area is created on demand and reused across re-runs.
    """

    root: Path
    # Relative to root; None when conditions never come from a sheet
    sample_sheet_name: Optional[str] = DEFAULT_SAMPLE_SHEET

    @property
    def name(self) -> str:
        return self.root.name

    @property
    def raw_dir(self) -> Path:
        return self.root / RAW_DIR

    @property
    def sample_sheet(self) -> Optional[Path]:
        return self.root / self.sample_sheet_name if self.sample_sheet_name else None

    @property
    def trimmed_dir(self) -> Path:
        return self.root / TRIMMED_DIR

    @property
    def qc_dir(self) -> Path:
        return self.root / QC_DIR

    @property
    def aligned_dir(self) -> Path:
        return self.root / ALIGNED_DIR

    @property
    def counts_dir(self) -> Path:
        return self.root / COUNTS_DIR

    @property
    def analysis_dir(self) -> Path:
        return self.root / ANALYSIS_DIR

    @property
    def logs_dir(self) -> Path:
        return self.root / LOGS_DIR

    @property
    def run_log(self) -> Path:
        return self.logs_dir / RUN_LOG_NAME

    @property
    def output_dirs(self) -> tuple[Path, ...]:
        return (
            self.trimmed_dir,
            self.qc_dir,
            self.aligned_dir,
            self.counts_dir,
            self.analysis_dir,
            self.logs_dir,
        )

    def check_raw_input(self) -> None:
        """Require an existing, non-empty raw-input area."""
        if not self.root.is_dir():
            raise NoInputSamplesError(f"Project directory not found: {self.root}")
        if not self.raw_dir.is_dir():
            raise NoInputSamplesError(f"Raw-input directory not found: {self.raw_dir}")
        if not any(self.raw_dir.iterdir()):
            raise NoInputSamplesError(f"Raw-input directory is empty: {self.raw_dir}")

    def prepare(self) -> None:
        """Validate the raw-input area and create the output areas."""
        self.check_raw_input()
        for directory in self.output_dirs:
            directory.mkdir(parents=True, exist_ok=True)

    # ---- per-sample artifacts ----

    def qc_reports(self, read_file: Path) -> tuple[Path, Path]:
        stem = _read_stem(read_file)
        return (
            self.qc_dir / f"{stem}_fastqc.html",
            self.qc_dir / f"{stem}_fastqc.zip",
        )

    def trimmed_reads(self, sample: Sample) -> TrimmedReads:
        base = self.trimmed_dir
        return TrimmedReads(
            paired1=base / f"{sample.name}_R1.paired.fastq.gz",
            unpaired1=base / f"{sample.name}_R1.unpaired.fastq.gz",
            paired2=base / f"{sample.name}_R2.paired.fastq.gz",
            unpaired2=base / f"{sample.name}_R2.unpaired.fastq.gz",
        )

    def trim_log(self, sample: Sample) -> Path:
        return self.logs_dir / f"{sample.name}.trimmomatic.log"

    def aligner_prefix(self, sample: Sample) -> str:
        return str(self.aligned_dir / f"{sample.name}_")

    def unsorted_bam(self, sample: Sample) -> Path:
        return StarAligner.output_bam(self.aligner_prefix(sample))

    def sorted_bam(self, sample: Sample) -> Path:
        return self.aligned_dir / f"{sample.name}.sorted.bam"

    def bam_index(self, sample: Sample) -> Path:
        return self.aligned_dir / f"{sample.name}.sorted.bam.bai"

    # ---- project artifacts ----

    @property
    def count_table(self) -> Path:
        return self.counts_dir / "gene_counts.txt"

    @property
    def count_matrix(self) -> Path:
        return self.counts_dir / "count_matrix.csv"

    @property
    def quantify_log(self) -> Path:
        return self.logs_dir / "featurecounts.log"

    @property
    def coldata(self) -> Path:
        return self.analysis_dir / "coldata.csv"

    @property
    def results_table(self) -> Path:
        return self.analysis_dir / "deseq2_results.csv"

    @property
    def significant_table(self) -> Path:
        return self.analysis_dir / "significant_genes.csv"

    @property
    def ma_plot(self) -> Path:
        return self.analysis_dir / "ma_plot.pdf"

    @property
    def analysis_log(self) -> Path:
        return self.logs_dir / "deseq2.log"

    @property
    def report_dir(self) -> Path:
        return self.qc_dir / REPORT_SUBDIR

    @property
    def report_html(self) -> Path:
        return self.report_dir / "multiqc_report.html"

    @property
    def report_log(self) -> Path:
        return self.logs_dir / "multiqc.log"
