"""Tests for the shared pipeline types and stage definitions."""

from pathlib import Path

import pytest

from rnapipe.core.pipeline_types import (
    STATUS_COMPLETED,
    RunOutcome,
    Stage,
    StageRecord,
    StageState,
)
from rnapipe.core.stages.definitions import PIPELINE_STAGES, STAGES_BY_NAME, get_stage
from rnapipe.exceptions import StageExecutionError


class TestStageState:
    def test_values(self):
        assert [s.value for s in StageState] == [
            "pending",
            "skipped-already-done",
            "running",
            "succeeded",
            "failed",
            "disabled",
        ]

    @pytest.mark.parametrize(
        "state, expected",
        [
            (StageState.SKIPPED, True),
            (StageState.SUCCEEDED, True),
            (StageState.FAILED, False),
            (StageState.PENDING, False),
            (StageState.DISABLED, False),
        ],
    )
    def test_terminal_success(self, state, expected):
        assert state.is_terminal_success is expected


class TestStageRecord:
    def test_defaults(self):
        record = StageRecord(stage="trim", sample="A")
        assert record.state is StageState.PENDING
        assert record.unit == "A"

    def test_project_unit(self):
        assert StageRecord(stage="quantify").unit == "project"


class TestRunOutcome:
    def test_completed_by_default(self):
        outcome = RunOutcome(project=Path("/data/p"))
        assert outcome.status == STATUS_COMPLETED
        assert not outcome.failed
        assert outcome.failed_stage is None

    def test_mark_failed(self):
        outcome = RunOutcome(project=Path("/data/p"))
        error = StageExecutionError("boom", stage="sort_index")
        outcome.mark_failed("sort_index", error)
        assert outcome.status == "failed-at-stage:sort_index"
        assert outcome.failed
        assert outcome.failed_stage == "sort_index"
        assert outcome.error is error

    def test_records_for(self):
        outcome = RunOutcome(project=Path("/data/p"))
        outcome.records.extend(
            [
                StageRecord("trim", "A", StageState.SUCCEEDED),
                StageRecord("align", "A", StageState.FAILED),
                StageRecord("trim", "B", StageState.SKIPPED),
            ]
        )
        assert [r.sample for r in outcome.records_for("trim")] == ["A", "B"]
        assert outcome.states("align") == [StageState.FAILED]


class TestStageDefinitions:
    def test_fixed_order(self):
        assert [s.name for s in PIPELINE_STAGES] == [
            "quality_check",
            "trim",
            "align",
            "sort_index",
            "quantify",
            "analyze",
            "report",
        ]

    def test_per_sample_stages_precede_aggregate_stages(self):
        scopes = [s.per_sample for s in PIPELINE_STAGES]
        assert scopes == sorted(scopes, reverse=True)

    def test_optional_stages(self):
        assert get_stage("quality_check").toggle == "run_quality_check"
        assert get_stage("report").toggle == "run_report_aggregation"
        assert not get_stage("report").fatal
        assert all(s.fatal for s in PIPELINE_STAGES if s.name != "report")

    def test_every_stage_names_a_tool(self):
        assert all(s.tool for s in PIPELINE_STAGES)
        assert set(STAGES_BY_NAME) == {s.name for s in PIPELINE_STAGES}

    def test_unknown_stage(self):
        with pytest.raises(KeyError, match="Unknown stage"):
            get_stage("assemble")

    def test_stage_is_frozen(self):
        stage = Stage("x", "test")
        with pytest.raises(AttributeError):
            stage.name = "y"
