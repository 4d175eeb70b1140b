"""Resource files and configuration templates."""

from pathlib import Path

ANALYSIS_SCRIPT = "deseq2_analysis.R"


def get_analysis_script() -> Path:
    """Path of the bundled DESeq2 analysis script."""
    return Path(__file__).resolve().parent / ANALYSIS_SCRIPT


def get_default_config() -> str:
    """Return default configuration YAML content."""
    return """# rnapipe Configuration File

# Stage toggles
run_quality_check: true
run_report_aggregation: true

# Library strandedness: unstranded, forward or reverse
strandedness: "unstranded"

# Reference data shared by every project of a run
references:
  genome_index: ~        # STAR genome directory
  annotation: ~          # GTF used by featureCounts
  adapters: ~            # Trimmomatic adapter FASTA

# Read file naming inside <project>/raw
samples:
  mate1_suffix: "_R1.fastq.gz"
  mate2_suffix: "_R2.fastq.gz"

# Trimmomatic parameters
trimming:
  illuminaclip: "2:30:10"
  steps:
    - "LEADING:3"
    - "TRAILING:3"
    - "SLIDINGWINDOW:4:15"
    - "MINLEN:36"

# Differential expression
analysis:
  script: ~              # defaults to the bundled DESeq2 script
  sample_sheet: "samples.csv"
  conditions: {}         # sample -> condition, used without a sample sheet
  infer_conditions: true
  reference_condition: "control"
  padj_threshold: 0.05

# Executables (name on PATH or explicit path)
tools:
  fastqc: "fastqc"
  trimmomatic: "trimmomatic"
  star: "STAR"
  samtools: "samtools"
  featurecounts: "featureCounts"
  rscript: "Rscript"
  multiqc: "multiqc"

# Performance settings
performance:
  threads: 4
  max_workers: 1

# Runtime settings
runtime:
  log_level: "INFO"
  log_file: ~
  stage_timeout: ~
  enable_progress: false
"""
