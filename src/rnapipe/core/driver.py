"""Pipeline driver: pre-flight checks, then every project in order."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence

from rnapipe.config import Config
from rnapipe.core.executor import StageExecutor
from rnapipe.core.pipeline_types import RunOutcome
from rnapipe.core.project import ProjectLayout
from rnapipe.core.samples import MateConvention, Sample, assign_conditions, discover_samples
from rnapipe.core.stages.artifacts import stage_is_done
from rnapipe.core.stages.definitions import PIPELINE_STAGES
from rnapipe.exceptions import RnaPipeError
from rnapipe.utils.dependency_checker import DependencyChecker, check_dependencies
from rnapipe.utils.logging import get_logger, project_run_log


class PlannedUnit(NamedTuple):
    """Resume status of one stage unit, as shown by ``--dry-run``."""

    project: Path
    stage: str
    unit: str
    status: str  # "done", "pending" or "disabled"


class PipelineDriver:
    """Run the pipeline over one or more project roots.

    Projects are processed strictly one after another. The first fatal
    error aborts the invocation; later projects are not started.
    """

    def __init__(
        self,
        config: Config,
        logger: Optional[logging.Logger] = None,
        executor: Optional[StageExecutor] = None,
        check_tools: bool = True,
    ):
        self.config = config
        self.logger = logger or get_logger("pipeline")
        self.executor = executor or StageExecutor(config, logger=self.logger)
        self.check_tools = check_tools
        self.dependency_checker: Optional[DependencyChecker] = None

    @property
    def convention(self) -> MateConvention:
        return MateConvention(
            self.config.samples.mate1_suffix, self.config.samples.mate2_suffix
        )

    def preflight(self) -> None:
        """Probe collaborators once per run and demote optional stages."""
        if self.check_tools:
            self.dependency_checker = check_dependencies(self.config, logger=self.logger)

    def layout_for(self, project: Path) -> ProjectLayout:
        sheet = self.config.analysis.sample_sheet or None
        return ProjectLayout(Path(project), sample_sheet_name=sheet)

    def load_samples(self, layout: ProjectLayout) -> List[Sample]:
        """Discover sample pairs and attach their conditions."""
        samples = discover_samples(layout.raw_dir, self.convention, logger=self.logger)
        analysis = self.config.analysis
        return assign_conditions(
            samples,
            sample_sheet=layout.sample_sheet,
            conditions=analysis.conditions,
            infer=analysis.infer_conditions,
        )

    def run_project(self, project: Path) -> RunOutcome:
        layout = self.layout_for(project)
        # Validate before creating logs/ so a mistyped path leaves no trace
        layout.check_raw_input()
        layout.logs_dir.mkdir(parents=True, exist_ok=True)

        with project_run_log(layout.run_log):
            try:
                layout.prepare()
                samples = self.load_samples(layout)
                outcome = self.executor.execute(layout, samples)
            except RnaPipeError as exc:
                self.logger.error(f"Project {layout.root}: {exc}")
                raise

        if outcome.failed:
            assert outcome.error is not None
            raise outcome.error
        return outcome

    def run(self, projects: Sequence[Path]) -> List[RunOutcome]:
        """Run every project; raises the first fatal error encountered."""
        self.preflight()
        outcomes: List[RunOutcome] = []
        for index, project in enumerate(projects, 1):
            self.logger.info(f"Project {index}/{len(projects)}: {project}")
            outcomes.append(self.run_project(Path(project)))
        return outcomes

    def plan(self, projects: Sequence[Path]) -> List[PlannedUnit]:
        """Resume status of every stage unit, without running or creating anything."""
        planned: List[PlannedUnit] = []
        for project in projects:
            layout = self.layout_for(project)
            layout.check_raw_input()
            samples = discover_samples(layout.raw_dir, self.convention, logger=self.logger)
            for stage in PIPELINE_STAGES:
                enabled = self.executor.stage_enabled(stage)
                units = samples if stage.per_sample else [None]
                for sample in units:
                    if not enabled:
                        status = "disabled"
                    elif stage_is_done(layout, stage, sample, samples):
                        status = "done"
                    else:
                        status = "pending"
                    planned.append(
                        PlannedUnit(
                            project=layout.root,
                            stage=stage.name,
                            unit=sample.name if sample else "project",
                            status=status,
                        )
                    )
        return planned
