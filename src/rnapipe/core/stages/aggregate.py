"""Stage runners that operate on all samples of a project at once."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Dict, Sequence

import pandas as pd

from rnapipe.exceptions import ConfigurationError, OutputValidationError
from rnapipe.resources import get_analysis_script

if TYPE_CHECKING:
    from rnapipe.core.samples import Sample
    from rnapipe.core.stages.context import StageContext

# Annotation columns featureCounts writes before the per-BAM count columns
FEATURECOUNTS_ANNOTATION_COLUMNS = ("Geneid", "Chr", "Start", "End", "Strand", "Length")


def build_count_matrix(
    count_table: Path,
    bam_to_sample: Dict[str, str],
) -> pd.DataFrame:
    """Reshape a featureCounts table into a gene x sample matrix.

    Count columns are named after the BAM paths passed to featureCounts; they
    are renamed to sample names and every sample must be present.
    """
    try:
        table = pd.read_csv(count_table, sep="\t", comment="#")
    except (OSError, ValueError) as exc:
        raise OutputValidationError(f"Could not parse count table {count_table}: {exc}") from exc

    missing_annotation = [c for c in FEATURECOUNTS_ANNOTATION_COLUMNS if c not in table.columns]
    if missing_annotation:
        raise OutputValidationError(
            f"Count table {count_table} lacks column(s): {', '.join(missing_annotation)}"
        )
    if table.empty:
        raise OutputValidationError(f"Count table {count_table} has no features")

    by_name = {Path(bam).name: sample for bam, sample in bam_to_sample.items()}
    renamed: Dict[str, str] = {}
    for column in table.columns:
        if column in FEATURECOUNTS_ANNOTATION_COLUMNS:
            continue
        sample = bam_to_sample.get(column) or by_name.get(Path(column).name)
        if sample is not None:
            renamed[column] = sample

    absent = sorted(set(bam_to_sample.values()) - set(renamed.values()))
    if absent:
        raise OutputValidationError(
            f"Count table {count_table} has no column for sample(s): {', '.join(absent)}"
        )

    ordered = list(bam_to_sample.values())
    matrix = table.set_index("Geneid")[list(renamed)].rename(columns=renamed)
    matrix.index.name = "gene_id"
    return matrix[ordered]


def quantify(ctx: StageContext, _sample: Sample | None = None) -> None:
    """featureCounts over every sorted BAM, then a sample-named matrix."""
    layout = ctx.layout
    bams = [layout.sorted_bam(s) for s in ctx.samples]
    annotation = ctx.config.references.annotation
    if annotation is None:
        raise ConfigurationError("references.annotation is required for quantification")

    featurecounts = ctx.tool("featurecounts")
    featurecounts.count(
        bams,
        annotation=annotation,
        output=layout.count_table,
        strandedness=ctx.config.strandedness_code,
        log_file=layout.quantify_log,
    )

    bam_to_sample = {str(layout.sorted_bam(s)): s.name for s in ctx.samples}
    matrix = build_count_matrix(layout.count_table, bam_to_sample)
    matrix.to_csv(layout.count_matrix)
    ctx.logger.info(
        f"Count matrix: {matrix.shape[0]:,} genes x {matrix.shape[1]} samples -> {layout.count_matrix}"
    )


def write_coldata(samples: Sequence[Sample], path: Path) -> pd.DataFrame:
    """Write the sample -> condition design table used by DESeq2."""
    coldata = pd.DataFrame(
        {"sample": [s.name for s in samples], "condition": [s.condition for s in samples]}
    )
    if coldata["condition"].isna().any():
        unassigned = coldata.loc[coldata["condition"].isna(), "sample"].tolist()
        raise OutputValidationError(f"Samples without condition: {', '.join(unassigned)}")
    path.parent.mkdir(parents=True, exist_ok=True)
    coldata.to_csv(path, index=False)
    return coldata


def analyze(ctx: StageContext, _sample: Sample | None = None) -> None:
    """DESeq2 on the count matrix; zero significant genes is a valid result."""
    layout = ctx.layout
    analysis = ctx.config.analysis
    write_coldata(ctx.samples, layout.coldata)

    script = Path(analysis.script) if analysis.script else get_analysis_script()
    runner = ctx.tool("rscript")
    runner.run_analysis(
        script,
        counts=layout.count_matrix,
        coldata=layout.coldata,
        output_dir=layout.analysis_dir,
        reference_condition=analysis.reference_condition,
        padj_threshold=analysis.padj_threshold,
        log_file=layout.analysis_log,
    )

    if layout.significant_table.is_file():
        try:
            significant = pd.read_csv(layout.significant_table, comment="#")
        except (OSError, ValueError) as exc:
            raise OutputValidationError(
                f"Could not parse significant gene table {layout.significant_table}: {exc}"
            ) from exc
        if significant.empty:
            ctx.logger.info("No genes passed the significance threshold")
        else:
            ctx.logger.info(f"{len(significant):,} significant genes")


def report(ctx: StageContext, _sample: Sample | None = None) -> None:
    layout = ctx.layout
    multiqc = ctx.tool("multiqc")
    multiqc.aggregate(layout.root, layout.report_dir, log_file=layout.report_log)
