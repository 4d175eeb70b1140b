"""Pytest configuration for rnapipe tests."""

import logging
import os
import sys
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import pytest

# Add src directory to Python path
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rnapipe.core.stages.contracts import get_stage_contract
from rnapipe.core.stages.definitions import PIPELINE_STAGES
from rnapipe.exceptions import ExternalToolError


@pytest.fixture(autouse=True)
def reset_logging_after_test():
    """Reset rnapipe logger state after each test.

    This prevents test pollution from tests that call setup_logging(),
    which sets propagate=False and breaks caplog in subsequent tests.
    """
    yield
    app_logger = logging.getLogger("rnapipe")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)
    app_logger.propagate = True


def write_reads(raw_dir: Path, samples: Iterable[str], suffixes=("_R1.fastq.gz", "_R2.fastq.gz")):
    raw_dir.mkdir(parents=True, exist_ok=True)
    for name in samples:
        for suffix in suffixes:
            (raw_dir / f"{name}{suffix}").write_bytes(b"@read\nACGT\n+\nIIII\n")


@pytest.fixture
def make_project(tmp_path) -> Callable[..., Path]:
    """Create a project root with paired raw reads for the given samples."""

    def _make(name: str = "project", samples=("control_1", "treatment_1")) -> Path:
        root = tmp_path / name
        write_reads(root / "raw", samples)
        return root

    return _make


def age_tree(root: Path, seconds: float = 100.0) -> None:
    """Push every file's mtime into the past."""
    past = time.time() - seconds
    for path in root.rglob("*"):
        if path.is_file():
            os.utime(path, (past, past))


class FakeRunners:
    """Stage runners that write the declared outputs instead of calling tools."""

    def __init__(
        self,
        fail_on: Optional[Dict[Tuple[str, Optional[str]], str]] = None,
        leave_empty: Optional[Iterable[Tuple[str, Optional[str]]]] = None,
    ):
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.fail_on = dict(fail_on or {})
        self.leave_empty = set(leave_empty or ())

    def stage_calls(self, stage: str) -> List[Optional[str]]:
        return [unit for name, unit in self.calls if name == stage]

    def _runner(self, stage_name: str):
        def run(ctx, sample=None):
            unit = sample.name if sample else None
            self.calls.append((stage_name, unit))
            if (stage_name, unit) in self.fail_on:
                raise ExternalToolError(self.fail_on[(stage_name, unit)], returncode=1)
            contract = get_stage_contract(stage_name, ctx.layout, sample, ctx.samples)
            for artifact in contract.outputs:
                artifact.path.parent.mkdir(parents=True, exist_ok=True)
                if artifact.allow_empty or (stage_name, unit) in self.leave_empty:
                    artifact.path.write_text("")
                else:
                    artifact.path.write_text(f"{stage_name} {unit or 'project'}\n")

        return run

    def mapping(self):
        return {stage.name: self._runner(stage.name) for stage in PIPELINE_STAGES}


@pytest.fixture
def fake_runners() -> FakeRunners:
    return FakeRunners()


@pytest.fixture
def runner_factory():
    """FakeRunners class, for tests that need failures or empty outputs."""
    return FakeRunners


@pytest.fixture
def age_files():
    return age_tree


@pytest.fixture
def reference_files(tmp_path) -> Dict[str, Path]:
    """Minimal on-disk references that pass configuration validation."""
    refs = tmp_path / "refs"
    (refs / "star_index").mkdir(parents=True)
    (refs / "genes.gtf").write_text('chr1\tsrc\texon\t1\t100\t.\t+\t.\tgene_id "g1";\n')
    (refs / "TruSeq3-PE.fa").write_text(">PrefixPE/1\nTACACTCTTTCCCTACACGACGCTCTTCCGATCT\n")
    return {
        "genome_index": refs / "star_index",
        "annotation": refs / "genes.gtf",
        "adapters": refs / "TruSeq3-PE.fa",
    }


@pytest.fixture
def config_file(tmp_path, reference_files) -> Callable[..., Path]:
    """Write a YAML configuration pointing at the reference fixtures."""
    import yaml

    def _write(**overrides) -> Path:
        data = {"references": {k: str(v) for k, v in reference_files.items()}}
        data.update(overrides)
        path = tmp_path / "rnapipe.yaml"
        path.write_text(yaml.safe_dump(data))
        return path

    return _write
