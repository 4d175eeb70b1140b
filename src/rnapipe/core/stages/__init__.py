"""Stage implementations and their registry."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from rnapipe.core.samples import Sample
from rnapipe.core.stages import aggregate, per_sample
from rnapipe.core.stages.context import StageContext

StageRunner = Callable[[StageContext, Optional[Sample]], None]

STAGE_RUNNERS: Dict[str, StageRunner] = {
    "quality_check": per_sample.quality_check,
    "trim": per_sample.trim,
    "align": per_sample.align,
    "sort_index": per_sample.sort_index,
    "quantify": aggregate.quantify,
    "analyze": aggregate.analyze,
    "report": aggregate.report,
}

__all__ = ["STAGE_RUNNERS", "StageContext", "StageRunner"]
