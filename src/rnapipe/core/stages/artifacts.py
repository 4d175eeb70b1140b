"""Filesystem-as-checkpoint helpers.

Whether a stage is done is decided solely from its declared artifacts: all
outputs present (and non-empty unless allowed), and none older than an input.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from rnapipe.core.project import ProjectLayout
from rnapipe.core.samples import Sample
from rnapipe.core.pipeline_types import Stage
from rnapipe.core.stages.contracts import Artifact, get_stage_contract


def artifact_ready(artifact: Artifact) -> bool:
    """True if the artifact exists as a file with acceptable size."""
    path = artifact.path
    try:
        if not path.is_file():
            return False
        return artifact.allow_empty or path.stat().st_size > 0
    except OSError:
        return False


def unready_artifacts(artifacts: Iterable[Artifact]) -> List[Path]:
    """Paths of artifacts that are missing or empty.

    An optional artifact only counts when it exists but is unusable.
    """
    return [
        a.path
        for a in artifacts
        if not artifact_ready(a) and not (a.optional and not a.path.exists())
    ]


def _mtime(path: Path) -> Optional[float]:
    try:
        return path.stat().st_mtime
    except OSError:
        return None


def outputs_are_fresh(inputs: Sequence[Artifact], outputs: Sequence[Artifact]) -> bool:
    """False if any existing input was modified after the oldest output."""
    output_times = [t for t in (_mtime(a.path) for a in outputs) if t is not None]
    input_times = [t for t in (_mtime(a.path) for a in inputs) if t is not None]
    if not output_times or not input_times:
        return True
    return max(input_times) <= min(output_times)


def stage_is_done(
    layout: ProjectLayout,
    stage: Stage,
    sample: Optional[Sample] = None,
    samples: Sequence[Sample] = (),
) -> bool:
    """Resume decision for one stage unit, computed from the filesystem only."""
    contract = get_stage_contract(stage.name, layout, sample, samples)
    if not contract.outputs:
        return False
    if unready_artifacts(contract.outputs):
        return False
    return outputs_are_fresh(contract.inputs, contract.outputs)


def remove_stale_artifacts(artifacts: Iterable[Artifact]) -> List[Path]:
    """Delete leftover outputs of an interrupted or outdated run."""
    removed: List[Path] = []
    for artifact in artifacts:
        path = artifact.path
        if path.is_file() or path.is_symlink():
            path.unlink()
            removed.append(path)
    return removed
