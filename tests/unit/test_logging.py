"""Tests for the logging helpers."""

import logging
import re

from rnapipe.utils.logging import (
    LogTemplates,
    get_logger,
    project_run_log,
    setup_logging,
)

ENTRY = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] (INFO|WARNING|ERROR): .+$")


def test_get_logger_is_namespaced():
    assert get_logger("executor").name == "rnapipe.executor"


def test_setup_logging_replaces_handlers(tmp_path):
    setup_logging(level=logging.INFO)
    setup_logging(level=logging.INFO, log_file=tmp_path / "logs" / "run.log")
    app = logging.getLogger("rnapipe")
    assert len(app.handlers) == 2
    assert app.propagate is False
    # File handler records DEBUG even when the console is at INFO
    assert app.level == logging.DEBUG
    assert (tmp_path / "logs").is_dir()


class TestProjectRunLog:
    def test_entries_are_timestamped(self, tmp_path):
        log_file = tmp_path / "logs" / "pipeline.log"
        logger = get_logger("executor")
        with project_run_log(log_file):
            logger.info("[A] trim: running")
            logger.warning("MultiQC unavailable")
            logger.debug("not recorded at INFO")

        lines = log_file.read_text().splitlines()
        assert len(lines) == 2
        assert all(ENTRY.match(line) for line in lines)
        assert lines[0].endswith("INFO: [A] trim: running")

    def test_appends_across_runs(self, tmp_path):
        log_file = tmp_path / "pipeline.log"
        logger = get_logger("driver")
        with project_run_log(log_file):
            logger.info("first run")
        with project_run_log(log_file):
            logger.info("second run")
        text = log_file.read_text()
        assert text.index("first run") < text.index("second run")

    def test_handler_detached_afterwards(self, tmp_path):
        log_file = tmp_path / "pipeline.log"
        app = logging.getLogger("rnapipe")
        before = list(app.handlers)
        with project_run_log(log_file):
            assert len(app.handlers) == len(before) + 1
        assert app.handlers == before
        get_logger("x").info("after the run")
        assert "after the run" not in log_file.read_text()


class TestLogTemplates:
    def test_stage_lines(self):
        assert LogTemplates.STAGE_SKIPPED.format(unit="A", stage="align") == (
            "[A] align: skipped-already-done"
        )
        assert LogTemplates.STAGE_SUCCESS.format(unit="project", stage="quantify", duration=2.04) == (
            "[project] quantify: succeeded in 2.0s"
        )

    def test_run_failed(self):
        text = LogTemplates.RUN_FAILED.format(project="/data/A", stage="sort_index")
        assert text == "Project /data/A failed at stage sort_index"
