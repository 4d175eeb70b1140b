"""Shared pipeline types.

This module intentionally contains only lightweight dataclasses/constants so it
can be imported by stage definitions and contracts without pulling in the
executor.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

SAMPLE_SCOPE = "sample"
PROJECT_SCOPE = "project"

STATUS_COMPLETED = "completed"
STATUS_FAILED_PREFIX = "failed-at-stage:"


class StageState(str, Enum):
    """Lifecycle of one stage unit (stage x sample, or stage x project)."""

    PENDING = "pending"
    SKIPPED = "skipped-already-done"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    DISABLED = "disabled"

    @property
    def is_terminal_success(self) -> bool:
        return self in (StageState.SKIPPED, StageState.SUCCEEDED)


@dataclass(frozen=True)
class Stage:
    """Represents a pipeline stage."""

    name: str
    description: str
    scope: str = SAMPLE_SCOPE
    # Attribute of ToolConfig naming the collaborator
    tool: Optional[str] = None
    # Config attribute that enables the stage (None = always on)
    toggle: Optional[str] = None
    # A failing non-fatal stage is logged as a warning only
    fatal: bool = True

    @property
    def per_sample(self) -> bool:
        return self.scope == SAMPLE_SCOPE


@dataclass
class StageRecord:
    """Outcome of one stage unit."""

    stage: str
    sample: Optional[str] = None
    state: StageState = StageState.PENDING
    duration: Optional[float] = None
    error: Optional[str] = None

    @property
    def unit(self) -> str:
        return self.sample or "project"


@dataclass
class RunOutcome:
    """Terminal classification of one project run."""

    project: Path
    status: str = STATUS_COMPLETED
    records: List[StageRecord] = field(default_factory=list)
    log_file: Optional[Path] = None
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.status.startswith(STATUS_FAILED_PREFIX)

    @property
    def failed_stage(self) -> Optional[str]:
        if not self.failed:
            return None
        return self.status[len(STATUS_FAILED_PREFIX):]

    def mark_failed(self, stage: str, error: Exception) -> None:
        self.status = f"{STATUS_FAILED_PREFIX}{stage}"
        self.error = error

    def records_for(self, stage: str) -> List[StageRecord]:
        return [r for r in self.records if r.stage == stage]

    def states(self, stage: str) -> List[StageState]:
        return [r.state for r in self.records_for(stage)]
