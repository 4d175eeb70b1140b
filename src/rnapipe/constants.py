"""Unified constants for rnapipe.

Directory names and file naming conventions shared by the project layout,
sample discovery and stage contracts.
"""

# ================== Project Layout ==================
RAW_DIR = "raw"
TRIMMED_DIR = "trimmed"
QC_DIR = "qc"
ALIGNED_DIR = "aligned"
COUNTS_DIR = "counts"
ANALYSIS_DIR = "analysis"
LOGS_DIR = "logs"

RUN_LOG_NAME = "rnapipe.log"
REPORT_SUBDIR = "multiqc"

# ================== Read File Naming ==================
DEFAULT_MATE1_SUFFIX = "_R1.fastq.gz"
DEFAULT_MATE2_SUFFIX = "_R2.fastq.gz"

# Extensions that mark a file as sequencing reads; such files must follow the
# mate naming convention.
READ_EXTENSIONS = (".fastq.gz", ".fq.gz", ".fastq", ".fq")

# ================== Quantification ==================
STRANDEDNESS_CODES = {"unstranded": 0, "forward": 1, "reverse": 2}

# ================== Statistical Analysis ==================
DEFAULT_SAMPLE_SHEET = "samples.csv"
INFERRED_CONDITIONS = ("control", "treatment")
