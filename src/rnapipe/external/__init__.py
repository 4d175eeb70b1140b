"""External tool wrappers (rnapipe).

This package provides Python wrappers for the pipeline's collaborators:
- FastQC: read quality reports
- Trimmomatic: adapter and quality trimming
- STAR: spliced alignment
- Samtools: BAM sorting and indexing
- featureCounts: gene-level quantification
- Rscript/DESeq2: differential expression
- MultiQC: report aggregation
"""

from rnapipe.external.base import ExternalTool, resolve_executable
from rnapipe.external.fastqc import FastQC
from rnapipe.external.trimmomatic import Trimmomatic
from rnapipe.external.star import StarAligner
from rnapipe.external.samtools import Samtools
from rnapipe.external.featurecounts import FeatureCounts
from rnapipe.external.deseq2 import DESeq2Runner
from rnapipe.external.multiqc import MultiQC

# Config tool key -> wrapper class
TOOL_CLASSES = {
    "fastqc": FastQC,
    "trimmomatic": Trimmomatic,
    "star": StarAligner,
    "samtools": Samtools,
    "featurecounts": FeatureCounts,
    "rscript": DESeq2Runner,
    "multiqc": MultiQC,
}

__all__ = [
    "ExternalTool",
    "resolve_executable",
    "FastQC",
    "Trimmomatic",
    "StarAligner",
    "Samtools",
    "FeatureCounts",
    "DESeq2Runner",
    "MultiQC",
    "TOOL_CLASSES",
]
