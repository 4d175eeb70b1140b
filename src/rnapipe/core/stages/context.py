"""Execution context handed to stage runners."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from rnapipe.config import Config
from rnapipe.core.project import ProjectLayout
from rnapipe.core.samples import Sample
from rnapipe.external import TOOL_CLASSES, ExternalTool


@dataclass
class StageContext:
    """Everything a stage runner needs for one project.

    ``threads`` is the budget of a single stage invocation; the executor
    lowers it when samples run concurrently.
    """

    config: Config
    layout: ProjectLayout
    samples: List[Sample]
    logger: logging.Logger
    threads: int = field(default=1)

    def tool(self, key: str) -> ExternalTool:
        """Instantiate the wrapper configured for a ToolConfig key."""
        tool_cls = TOOL_CLASSES[key]
        return tool_cls(
            executable=getattr(self.config.tools, key),
            threads=self.threads,
            timeout=self.config.runtime.stage_timeout,
            logger=self.logger.getChild(key),
        )

    def with_threads(self, threads: int) -> "StageContext":
        return StageContext(
            config=self.config,
            layout=self.layout,
            samples=self.samples,
            logger=self.logger,
            threads=threads,
        )
