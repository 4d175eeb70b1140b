"""Stage runners that operate on one sample at a time."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rnapipe.exceptions import ConfigurationError

if TYPE_CHECKING:
    from rnapipe.core.samples import Sample
    from rnapipe.core.stages.context import StageContext


def quality_check(ctx: StageContext, sample: Sample) -> None:
    """FastQC report pair for each mate of the sample."""
    fastqc = ctx.tool("fastqc")
    fastqc.run_qc([sample.mate1, sample.mate2], ctx.layout.qc_dir)


def trim(ctx: StageContext, sample: Sample) -> None:
    """Trimmomatic paired-end trimming into paired/unpaired outputs."""
    adapters = ctx.config.references.adapters
    if adapters is None:
        raise ConfigurationError("references.adapters is required for trimming")

    trimmed = ctx.layout.trimmed_reads(sample)
    trimmomatic = ctx.tool("trimmomatic")
    trimmomatic.trim_paired(
        sample.mate1,
        sample.mate2,
        trimmed.paired1,
        trimmed.unpaired1,
        trimmed.paired2,
        trimmed.unpaired2,
        adapters=adapters,
        illuminaclip=ctx.config.trimming.illuminaclip,
        steps=ctx.config.trimming.steps,
        log_file=ctx.layout.trim_log(sample),
    )


def align(ctx: StageContext, sample: Sample) -> None:
    """STAR alignment of the trimmed pairs into an unsorted BAM."""
    genome_index = ctx.config.references.genome_index
    if genome_index is None:
        raise ConfigurationError("references.genome_index is required for alignment")

    trimmed = ctx.layout.trimmed_reads(sample)
    star = ctx.tool("star")
    star.align_paired(
        trimmed.paired1,
        trimmed.paired2,
        genome_index=genome_index,
        prefix=ctx.layout.aligner_prefix(sample),
    )


def sort_index(ctx: StageContext, sample: Sample) -> None:
    samtools = ctx.tool("samtools")
    sorted_bam = ctx.layout.sorted_bam(sample)
    samtools.sort_bam(ctx.layout.unsorted_bam(sample), sorted_bam)
    samtools.index_bam(sorted_bam)
