"""Canonical stage ordering and user-facing metadata."""

from __future__ import annotations

from rnapipe.core.pipeline_types import PROJECT_SCOPE, SAMPLE_SCOPE, Stage


# Fixed total order. Per-sample stages run for every sample before the
# aggregate stages start.
PIPELINE_STAGES: list[Stage] = [
    Stage(
        "quality_check",
        "FastQC reports for raw reads",
        scope=SAMPLE_SCOPE,
        tool="fastqc",
        toggle="run_quality_check",
    ),
    Stage(
        "trim",
        "Adapter and quality trimming with Trimmomatic",
        scope=SAMPLE_SCOPE,
        tool="trimmomatic",
    ),
    Stage(
        "align",
        "Spliced alignment with STAR",
        scope=SAMPLE_SCOPE,
        tool="star",
    ),
    Stage(
        "sort_index",
        "Sort and index alignments with samtools",
        scope=SAMPLE_SCOPE,
        tool="samtools",
    ),
    Stage(
        "quantify",
        "Gene counts for all samples with featureCounts",
        scope=PROJECT_SCOPE,
        tool="featurecounts",
    ),
    Stage(
        "analyze",
        "Differential expression with DESeq2",
        scope=PROJECT_SCOPE,
        tool="rscript",
    ),
    Stage(
        "report",
        "Combined QC report with MultiQC",
        scope=PROJECT_SCOPE,
        tool="multiqc",
        toggle="run_report_aggregation",
        fatal=False,
    ),
]

STAGES_BY_NAME: dict[str, Stage] = {stage.name: stage for stage in PIPELINE_STAGES}


def get_stage(name: str) -> Stage:
    try:
        return STAGES_BY_NAME[name]
    except KeyError:
        raise KeyError(f"Unknown stage: {name}") from None
