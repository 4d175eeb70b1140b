"""Stage IO contracts.

Each stage declares the artifacts it reads and the artifacts whose presence
proves it completed. Contracts are pure path computations over the project
layout; they never touch the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence

from rnapipe.core.project import ProjectLayout
from rnapipe.core.samples import Sample


@dataclass(frozen=True)
class Artifact:
    """A file a stage consumes or produces."""

    path: Path
    # Must exist but may legitimately be empty (e.g. unpaired reads)
    allow_empty: bool = False
    # May be absent; only its timestamp matters when present
    optional: bool = False


@dataclass(frozen=True)
class StageContract:
    """Input/output artifacts of one stage unit."""

    inputs: tuple[Artifact, ...] = ()
    outputs: tuple[Artifact, ...] = ()


ContractFn = Callable[[ProjectLayout, Optional[Sample], Sequence[Sample]], StageContract]


def _quality_check(layout: ProjectLayout, sample: Optional[Sample], _samples) -> StageContract:
    assert sample is not None
    outputs = [Artifact(p) for read in (sample.mate1, sample.mate2) for p in layout.qc_reports(read)]
    return StageContract(
        inputs=(Artifact(sample.mate1), Artifact(sample.mate2)),
        outputs=tuple(outputs),
    )


def _trim(layout: ProjectLayout, sample: Optional[Sample], _samples) -> StageContract:
    assert sample is not None
    trimmed = layout.trimmed_reads(sample)
    return StageContract(
        inputs=(Artifact(sample.mate1), Artifact(sample.mate2)),
        outputs=(
            Artifact(trimmed.paired1),
            Artifact(trimmed.unpaired1, allow_empty=True),
            Artifact(trimmed.paired2),
            Artifact(trimmed.unpaired2, allow_empty=True),
        ),
    )


def _align(layout: ProjectLayout, sample: Optional[Sample], _samples) -> StageContract:
    assert sample is not None
    trimmed = layout.trimmed_reads(sample)
    return StageContract(
        inputs=(Artifact(trimmed.paired1), Artifact(trimmed.paired2)),
        outputs=(Artifact(layout.unsorted_bam(sample)),),
    )


def _sort_index(layout: ProjectLayout, sample: Optional[Sample], _samples) -> StageContract:
    assert sample is not None
    return StageContract(
        inputs=(Artifact(layout.unsorted_bam(sample)),),
        outputs=(Artifact(layout.sorted_bam(sample)), Artifact(layout.bam_index(sample))),
    )


def _quantify(layout: ProjectLayout, _sample, samples: Sequence[Sample]) -> StageContract:
    return StageContract(
        inputs=tuple(Artifact(layout.sorted_bam(s)) for s in samples),
        outputs=(Artifact(layout.count_table), Artifact(layout.count_matrix)),
    )


def _analyze(layout: ProjectLayout, _sample, _samples) -> StageContract:
    inputs = [Artifact(layout.count_matrix)]
    if layout.sample_sheet is not None:
        inputs.append(Artifact(layout.sample_sheet, optional=True))
    return StageContract(
        inputs=tuple(inputs),
        outputs=(
            Artifact(layout.coldata),
            Artifact(layout.results_table),
            Artifact(layout.significant_table),
            Artifact(layout.ma_plot),
        ),
    )


def _report(layout: ProjectLayout, _sample, _samples) -> StageContract:
    return StageContract(
        inputs=(Artifact(layout.count_table),),
        outputs=(Artifact(layout.report_html),),
    )


STAGE_CONTRACTS: dict[str, ContractFn] = {
    "quality_check": _quality_check,
    "trim": _trim,
    "align": _align,
    "sort_index": _sort_index,
    "quantify": _quantify,
    "analyze": _analyze,
    "report": _report,
}


def get_stage_contract(
    stage_name: str,
    layout: ProjectLayout,
    sample: Optional[Sample] = None,
    samples: Sequence[Sample] = (),
) -> StageContract:
    """Resolve the contract of a stage for one sample (or the whole project)."""
    try:
        contract_fn = STAGE_CONTRACTS[stage_name]
    except KeyError:
        raise KeyError(f"No contract for stage: {stage_name}") from None
    return contract_fn(layout, sample, samples)
