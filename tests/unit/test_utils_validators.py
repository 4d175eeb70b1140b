"""Tests for installation validation."""

import importlib
from unittest.mock import patch

from rnapipe.utils.validators import REQUIRED_MODULES, validate_installation


def test_clean_installation_has_no_issues():
    assert validate_installation() == []


def test_required_modules_cover_runtime_stack():
    assert set(REQUIRED_MODULES) == {"click", "yaml", "pandas", "packaging", "tqdm"}
    assert REQUIRED_MODULES["yaml"] == "PyYAML"


def test_missing_module_reported():
    real_import = importlib.import_module

    def fake_import(name, *args, **kwargs):
        if name == "tqdm":
            raise ImportError("No module named 'tqdm'")
        return real_import(name, *args, **kwargs)

    with patch("rnapipe.utils.validators.importlib.import_module", side_effect=fake_import):
        issues = validate_installation()
    assert issues == ["Missing Python module: tqdm (pip install tqdm)"]


def test_missing_analysis_script_reported(tmp_path):
    absent = tmp_path / "deseq2_analysis.R"
    with patch("rnapipe.utils.validators.get_analysis_script", return_value=absent):
        issues = validate_installation()
    assert len(issues) == 1
    assert "deseq2_analysis.R" in issues[0]
