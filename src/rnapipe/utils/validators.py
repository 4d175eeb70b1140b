"""Validation utilities for rnapipe."""

from __future__ import annotations

import importlib
from typing import List

from rnapipe.resources import get_analysis_script

# Import name -> distribution name
REQUIRED_MODULES = {
    "click": "click",
    "yaml": "PyYAML",
    "pandas": "pandas",
    "packaging": "packaging",
    "tqdm": "tqdm",
}


def validate_installation() -> List[str]:
    """
    Validate the Python side of an rnapipe installation.

    External tools are covered by the dependency checker; this only looks at
    Python modules and bundled resources.

    Returns:
        List of validation issues (empty if all good)
    """
    issues = []

    for module, distribution in REQUIRED_MODULES.items():
        try:
            importlib.import_module(module)
        except ImportError:
            issues.append(f"Missing Python module: {module} (pip install {distribution})")

    script = get_analysis_script()
    if not script.is_file():
        issues.append(f"Bundled analysis script missing: {script}")

    try:
        from rnapipe.core.driver import PipelineDriver  # noqa: F401
        from rnapipe.core.stages import STAGE_RUNNERS  # noqa: F401
    except ImportError as e:
        issues.append(f"rnapipe module import error: {e}")

    return issues
