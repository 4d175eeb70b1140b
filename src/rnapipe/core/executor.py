"""Stage executor: runs the ordered stages of one project with resume."""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Mapping, Optional, Sequence

from rnapipe.config import Config
from rnapipe.core.pipeline_types import RunOutcome, Stage, StageRecord, StageState
from rnapipe.core.project import ProjectLayout
from rnapipe.core.samples import Sample
from rnapipe.core.stages import STAGE_RUNNERS, StageRunner
from rnapipe.core.stages.artifacts import (
    remove_stale_artifacts,
    stage_is_done,
    unready_artifacts,
)
from rnapipe.core.stages.context import StageContext
from rnapipe.core.stages.contracts import get_stage_contract
from rnapipe.core.stages.definitions import PIPELINE_STAGES
from rnapipe.exceptions import OutputValidationError, RnaPipeError, StageExecutionError
from rnapipe.utils.logging import LogTemplates, get_logger
from rnapipe.utils.progress import iter_progress


def split_threads(threads: int, workers: int) -> int:
    """Per-worker thread budget when samples run concurrently."""
    return max(1, threads // max(1, workers))


class StageExecutor:
    """Drive every stage unit of a project through its state machine.

    A unit is skipped when its outputs are already complete and fresh,
    otherwise stale outputs are removed, inputs are checked and the runner is
    invoked. Any failure of a fatal stage stops the project.
    """

    def __init__(
        self,
        config: Config,
        logger: Optional[logging.Logger] = None,
        runners: Optional[Mapping[str, StageRunner]] = None,
        stages: Optional[Sequence[Stage]] = None,
    ):
        self.config = config
        self.logger = logger or get_logger("executor")
        self.runners: Mapping[str, StageRunner] = runners if runners is not None else STAGE_RUNNERS
        self.stages: Sequence[Stage] = stages if stages is not None else PIPELINE_STAGES
        self._records_lock = threading.Lock()

    def stage_enabled(self, stage: Stage) -> bool:
        return stage.toggle is None or bool(getattr(self.config, stage.toggle))

    # ---- public API ----

    def execute(self, layout: ProjectLayout, samples: Sequence[Sample]) -> RunOutcome:
        """Run all stages for one project and classify the result."""
        outcome = RunOutcome(project=layout.root, log_file=layout.run_log)
        ctx = StageContext(
            config=self.config,
            layout=layout,
            samples=list(samples),
            logger=self.logger,
            threads=self.config.threads,
        )
        self.logger.info(
            LogTemplates.RUN_START.format(project=layout.root, count=len(ctx.samples))
        )

        stages = iter_progress(
            self.stages,
            total=len(self.stages),
            desc=layout.name,
            enabled=self.config.runtime.enable_progress,
        )
        for stage in stages:
            if not self.stage_enabled(stage):
                self._record_disabled(stage, ctx, outcome)
                continue

            try:
                if stage.per_sample:
                    self._run_sample_stage(stage, ctx, outcome)
                else:
                    self._run_unit(stage, ctx, None, outcome)
            except StageExecutionError as exc:
                if not stage.fatal:
                    self.logger.warning(f"{stage.name} failed; continuing without it: {exc}")
                    continue
                outcome.mark_failed(stage.name, exc)
                self.logger.error(
                    LogTemplates.RUN_FAILED.format(project=layout.root, stage=stage.name)
                )
                return outcome

        self.logger.info(LogTemplates.RUN_COMPLETED.format(project=layout.root))
        return outcome

    # ---- internals ----

    def _append(self, outcome: RunOutcome, record: StageRecord) -> None:
        with self._records_lock:
            outcome.records.append(record)

    def _record_disabled(self, stage: Stage, ctx: StageContext, outcome: RunOutcome) -> None:
        units = [s.name for s in ctx.samples] if stage.per_sample else [None]
        for unit in units:
            record = StageRecord(stage=stage.name, sample=unit, state=StageState.DISABLED)
            self._append(outcome, record)
            self.logger.info(
                LogTemplates.STAGE_DISABLED.format(
                    unit=record.unit, stage=stage.name, reason=f"{stage.toggle} is off"
                )
            )

    def _run_sample_stage(self, stage: Stage, ctx: StageContext, outcome: RunOutcome) -> None:
        workers = min(self.config.performance.max_workers, len(ctx.samples))
        if workers <= 1:
            for sample in ctx.samples:
                self._run_unit(stage, ctx, sample, outcome)
            return

        worker_ctx = ctx.with_threads(split_threads(ctx.threads, workers))
        cancel = threading.Event()
        first_error: Optional[StageExecutionError] = None

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=stage.name) as pool:
            futures = {
                pool.submit(self._run_unit, stage, worker_ctx, sample, outcome, cancel): sample
                for sample in ctx.samples
            }
            for future in as_completed(futures):
                try:
                    future.result()
                except StageExecutionError as exc:
                    if first_error is None:
                        first_error = exc
                    cancel.set()
                    for pending in futures:
                        pending.cancel()

        # Futures cancelled before starting never produced a record
        recorded = {r.sample for r in outcome.records_for(stage.name)}
        for sample in ctx.samples:
            if sample.name not in recorded:
                self._append(outcome, StageRecord(stage=stage.name, sample=sample.name))
                self.logger.info(
                    LogTemplates.STAGE_CANCELLED.format(unit=sample.name, stage=stage.name)
                )

        if first_error is not None:
            raise first_error

    def _run_unit(
        self,
        stage: Stage,
        ctx: StageContext,
        sample: Optional[Sample],
        outcome: RunOutcome,
        cancel: Optional[threading.Event] = None,
    ) -> StageRecord:
        record = StageRecord(stage=stage.name, sample=sample.name if sample else None)
        unit = record.unit
        layout = ctx.layout

        if cancel is not None and cancel.is_set():
            self._append(outcome, record)
            self.logger.info(LogTemplates.STAGE_CANCELLED.format(unit=unit, stage=stage.name))
            return record

        if stage_is_done(layout, stage, sample, ctx.samples):
            record.state = StageState.SKIPPED
            self._append(outcome, record)
            self.logger.info(LogTemplates.STAGE_SKIPPED.format(unit=unit, stage=stage.name))
            return record

        record.state = StageState.RUNNING
        self._append(outcome, record)
        self.logger.info(LogTemplates.STAGE_START.format(unit=unit, stage=stage.name))
        contract = get_stage_contract(stage.name, layout, sample, ctx.samples)
        start = time.time()
        try:
            for path in remove_stale_artifacts(contract.outputs):
                self.logger.debug(
                    LogTemplates.STALE_REMOVED.format(unit=unit, stage=stage.name, path=path)
                )

            missing_inputs = unready_artifacts(contract.inputs)
            if missing_inputs:
                raise OutputValidationError(
                    "missing input(s): " + ", ".join(str(p) for p in missing_inputs)
                )

            runner = self.runners[stage.name]
            runner(ctx, sample)

            missing_outputs = unready_artifacts(contract.outputs)
            if missing_outputs:
                raise OutputValidationError(
                    "tool exited successfully but output(s) are missing or empty: "
                    + ", ".join(str(p) for p in missing_outputs)
                )
        except (RnaPipeError, OSError) as exc:
            if cancel is not None:
                cancel.set()
            record.state = StageState.FAILED
            record.duration = time.time() - start
            record.error = str(exc)
            log = self.logger.error if stage.fatal else self.logger.warning
            log(LogTemplates.STAGE_FAILURE.format(unit=unit, stage=stage.name, error=exc))
            raise StageExecutionError(
                f"Stage '{stage.name}' failed for {unit}: {exc}",
                stage=stage.name,
                sample=record.sample,
                project=layout.root,
            ) from exc

        record.state = StageState.SUCCEEDED
        record.duration = time.time() - start
        self.logger.info(
            LogTemplates.STAGE_SUCCESS.format(unit=unit, stage=stage.name, duration=record.duration)
        )
        return record


def summarize_states(outcome: RunOutcome) -> Dict[str, List[str]]:
    """Group unit names by final state, for reporting."""
    summary: Dict[str, List[str]] = {}
    for record in outcome.records:
        summary.setdefault(record.state.value, []).append(f"{record.stage}[{record.unit}]")
    return summary
