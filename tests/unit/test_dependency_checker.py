"""Tests for dependency_checker module."""

import warnings
from unittest.mock import MagicMock, patch

import pytest

from rnapipe.config import Config
from rnapipe.exceptions import DependencyError, OptionalToolUnavailable
from rnapipe.utils.dependency_checker import (
    TOOLS,
    DependencyChecker,
    Tool,
    check_dependencies,
    compare_versions,
    find_tool,
    get_tool_version,
)

REQUIRED = {"trimmomatic", "star", "samtools", "featurecounts", "rscript"}
OPTIONAL = {"fastqc", "multiqc"}


def which_except(*missing):
    """shutil.which stand-in that knows every tool except the given names."""

    def _which(name):
        return None if name in missing else f"/usr/bin/{name}"

    return _which


class TestTool:
    def test_tool_creation(self):
        tool = Tool(key="star", name="STAR", required=True, purpose="Alignment", install_hint="conda")
        assert tool.min_version is None
        assert tool.version_arg == "--version"
        assert tool.toggle is None

    def test_tool_table(self):
        assert {t.key for t in TOOLS if t.required} == REQUIRED
        assert {t.key for t in TOOLS if not t.required} == OPTIONAL
        assert all(t.toggle for t in TOOLS if not t.required)


class TestHelpers:
    @patch("shutil.which", return_value="/usr/bin/samtools")
    def test_find_tool(self, _which):
        assert find_tool("samtools") == "/usr/bin/samtools"

    @patch("shutil.which", return_value=None)
    def test_find_tool_missing(self, _which):
        assert find_tool("samtools") is None

    @patch("subprocess.run")
    def test_get_tool_version(self, mock_run):
        mock_run.return_value = MagicMock(stdout="samtools 1.17\nUsing htslib 1.17\n", stderr="")
        assert get_tool_version("samtools") == "1.17"

    @patch("subprocess.run", side_effect=OSError("boom"))
    def test_get_tool_version_error(self, _run):
        assert get_tool_version("samtools") is None

    @pytest.mark.parametrize(
        "current, minimum, expected",
        [("2.7.10", "2.7.0", True), ("1.9", "1.9", True), ("1.3", "1.9", False), ("weird", "1.0", True)],
    )
    def test_compare_versions(self, current, minimum, expected):
        assert compare_versions(current, minimum) is expected


class TestDependencyChecker:
    @patch("shutil.which", side_effect=which_except())
    def test_all_present(self, _which):
        checker = DependencyChecker(Config())
        assert checker.check_all(check_versions=False)
        assert checker.missing_required == []
        assert checker.missing_optional == []
        assert "STAR" in checker.found_tools

    @patch("shutil.which", side_effect=which_except("STAR"))
    def test_missing_required(self, _which):
        checker = DependencyChecker(Config())
        assert not checker.check_all(check_versions=False)
        with pytest.raises(DependencyError) as excinfo:
            checker.raise_if_missing_required()
        assert excinfo.value.missing == ["STAR"]

    @patch("shutil.which", side_effect=which_except("fastqc"))
    def test_missing_optional_demotes_stage(self, _which):
        config = Config()
        checker = DependencyChecker(config)
        assert checker.check_all(check_versions=False)
        with pytest.warns(OptionalToolUnavailable):
            demoted = checker.apply_demotions()
        assert demoted == ["run_quality_check"]
        assert config.run_quality_check is False
        assert config.run_report_aggregation is True

    @patch("shutil.which", side_effect=which_except("multiqc"))
    def test_disabled_stage_tool_not_probed(self, mock_which):
        config = Config(run_report_aggregation=False)
        checker = DependencyChecker(config)
        checker.check_all(check_versions=False)
        assert checker.missing_optional == []
        assert "multiqc" not in [c.args[0] for c in mock_which.call_args_list]

    @patch("shutil.which", side_effect=which_except())
    @patch("rnapipe.utils.dependency_checker.get_tool_version", return_value="2.5.0")
    def test_old_version_is_warning_only(self, _version, _which):
        checker = DependencyChecker(Config())
        assert checker.check_all(check_versions=True)
        assert any("STAR" in w for w in checker.version_warnings)

    def test_explicit_tool_path(self, tmp_path):
        star = tmp_path / "STAR"
        star.write_text("#!/bin/sh\n")
        star.chmod(0o755)
        config = Config()
        config.tools.star = str(star)
        with patch("shutil.which", side_effect=which_except()):
            checker = DependencyChecker(config)
            checker.check_all(check_versions=False)
        assert checker.found_tools["STAR"] == str(star)

    @patch("shutil.which", side_effect=which_except("samtools", "multiqc"))
    def test_format_report(self, _which):
        checker = DependencyChecker(Config())
        checker.check_all(check_versions=False)
        report = checker.format_report()
        assert "Missing REQUIRED tools" in report
        assert "samtools" in report
        assert "MultiQC" in report
        assert "Cannot proceed" in report


@patch("rnapipe.utils.dependency_checker.get_tool_version", return_value=None)
class TestCheckDependencies:
    @patch("shutil.which", side_effect=which_except("featureCounts", "multiqc"))
    def test_required_failure_precedes_demotion(self, _which, _version):
        config = Config()
        with pytest.raises(DependencyError, match="featureCounts"):
            check_dependencies(config)
        # Nothing was demoted because the run never starts
        assert config.run_report_aggregation is True

    @patch("shutil.which", side_effect=which_except("multiqc"))
    def test_returns_checker_after_demotion(self, _which, _version):
        config = Config()
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", OptionalToolUnavailable)
            checker = check_dependencies(config)
        assert checker.demoted == ["run_report_aggregation"]
        assert config.run_report_aggregation is False
