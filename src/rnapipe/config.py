"""Configuration management for rnapipe."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Optional, Dict, Any, List, Union
import os
import yaml

from rnapipe.constants import (
    DEFAULT_MATE1_SUFFIX,
    DEFAULT_MATE2_SUFFIX,
    DEFAULT_SAMPLE_SHEET,
    STRANDEDNESS_CODES,
)
from rnapipe.exceptions import ConfigurationError


@dataclass
class RuntimeConfig:
    """Runtime configuration."""

    log_level: str = "INFO"
    log_file: Optional[Path] = None
    # Seconds before a hung collaborator is killed (None = wait forever)
    stage_timeout: Optional[float] = None
    enable_progress: bool = False


@dataclass
class PerformanceConfig:
    """Performance-related configuration."""

    threads: int = 4
    # Samples processed concurrently inside a per-sample stage
    max_workers: int = 1


@dataclass
class ToolConfig:
    """Executable per stage: a name on PATH or an explicit path."""

    fastqc: str = "fastqc"
    trimmomatic: str = "trimmomatic"
    star: str = "STAR"
    samtools: str = "samtools"
    featurecounts: str = "featureCounts"
    rscript: str = "Rscript"
    multiqc: str = "multiqc"


@dataclass
class ReferenceConfig:
    """Reference data shared by all projects of a run."""

    genome_index: Optional[Path] = None
    annotation: Optional[Path] = None
    adapters: Optional[Path] = None


@dataclass
class SampleConfig:
    """Read file naming convention."""

    mate1_suffix: str = DEFAULT_MATE1_SUFFIX
    mate2_suffix: str = DEFAULT_MATE2_SUFFIX


@dataclass
class TrimmingConfig:
    """Trimmomatic parameters."""

    illuminaclip: str = "2:30:10"
    steps: List[str] = field(
        default_factory=lambda: ["LEADING:3", "TRAILING:3", "SLIDINGWINDOW:4:15", "MINLEN:36"]
    )


@dataclass
class AnalysisConfig:
    """Differential expression settings."""

    script: Optional[Path] = None
    sample_sheet: str = DEFAULT_SAMPLE_SHEET
    conditions: Dict[str, str] = field(default_factory=dict)
    infer_conditions: bool = True
    reference_condition: str = "control"
    padj_threshold: float = 0.05


@dataclass
class Config:
    """Main configuration class."""

    # Feature toggles
    run_quality_check: bool = True
    run_report_aggregation: bool = True
    strandedness: Union[str, int] = "unstranded"

    # Sub-configurations
    references: ReferenceConfig = field(default_factory=ReferenceConfig)
    samples: SampleConfig = field(default_factory=SampleConfig)
    trimming: TrimmingConfig = field(default_factory=TrimmingConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    tools: ToolConfig = field(default_factory=ToolConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)

    # Convenience properties
    @property
    def threads(self) -> int:
        return self.performance.threads

    @threads.setter
    def threads(self, value: int):
        self.performance.threads = value

    @property
    def strandedness_mode(self) -> str:
        """Strandedness as one of unstranded/forward/reverse."""
        value = self.strandedness
        if isinstance(value, str) and value.strip().lower() in STRANDEDNESS_CODES:
            return value.strip().lower()
        if isinstance(value, int) and not isinstance(value, bool):
            for mode, code in STRANDEDNESS_CODES.items():
                if code == value:
                    return mode
        raise ConfigurationError(
            f"Invalid strandedness {value!r}; expected one of "
            f"{', '.join(STRANDEDNESS_CODES)} (or 0/1/2)"
        )

    @property
    def strandedness_code(self) -> int:
        return STRANDEDNESS_CODES[self.strandedness_mode]

    def validate(self) -> None:
        """Validate configuration."""
        refs = self.references
        if not refs.genome_index:
            raise ConfigurationError("references.genome_index is required")
        if not Path(refs.genome_index).is_dir():
            raise ConfigurationError(f"Genome index directory not found: {refs.genome_index}")
        for label, value in (("annotation", refs.annotation), ("adapters", refs.adapters)):
            if not value:
                raise ConfigurationError(f"references.{label} is required")
            if not Path(value).is_file():
                raise ConfigurationError(f"Reference {label} file not found: {value}")

        for tool in fields(ToolConfig):
            value = getattr(self.tools, tool.name)
            if not value or not isinstance(value, str):
                raise ConfigurationError(f"tools.{tool.name} must be a non-empty string")
            # Values containing a separator are explicit paths, not PATH lookups
            if os.sep in value or (os.altsep and os.altsep in value):
                if not Path(value).is_file():
                    raise ConfigurationError(f"tools.{tool.name} not found on disk: {value}")

        # Validate numeric ranges
        if not _is_positive_int(self.performance.threads):
            raise ConfigurationError("performance.threads must be a positive integer")
        if not _is_positive_int(self.performance.max_workers):
            raise ConfigurationError("performance.max_workers must be a positive integer")
        timeout = self.runtime.stage_timeout
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
                raise ConfigurationError("runtime.stage_timeout must be a positive number")

        # Raises ConfigurationError for unknown values
        self.strandedness_mode

        mate1, mate2 = self.samples.mate1_suffix, self.samples.mate2_suffix
        if not mate1 or not mate2:
            raise ConfigurationError("Mate suffixes must be non-empty")
        if mate1 == mate2:
            raise ConfigurationError("samples.mate1_suffix and samples.mate2_suffix must differ")

        analysis = self.analysis
        if analysis.script is not None and not Path(analysis.script).is_file():
            raise ConfigurationError(f"Analysis script not found: {analysis.script}")
        threshold = analysis.padj_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise ConfigurationError("analysis.padj_threshold must be a number")
        if not 0 < threshold <= 1:
            raise ConfigurationError("analysis.padj_threshold must be within (0, 1]")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""

        def path_to_str(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: path_to_str(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [path_to_str(item) for item in obj]
            return obj

        return path_to_str(asdict(self))


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


_SECTIONS = {
    "references": ReferenceConfig,
    "samples": SampleConfig,
    "trimming": TrimmingConfig,
    "analysis": AnalysisConfig,
    "tools": ToolConfig,
    "performance": PerformanceConfig,
    "runtime": RuntimeConfig,
}
_TOP_LEVEL = {"run_quality_check", "run_report_aggregation", "strandedness"}
_PATH_KEYS = {
    ("references", "genome_index"),
    ("references", "annotation"),
    ("references", "adapters"),
    ("analysis", "script"),
    ("runtime", "log_file"),
}


def config_from_dict(data: Dict[str, Any]) -> Config:
    """Build a Config from a parsed mapping, rejecting unknown options."""
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")

    unknown = sorted(set(data) - _TOP_LEVEL - set(_SECTIONS))
    if unknown:
        raise ConfigurationError("Unsupported config option(s): " + ", ".join(unknown))

    cfg = Config()
    for key in _TOP_LEVEL:
        if key in data and data[key] is not None:
            setattr(cfg, key, data[key])

    for section, section_cls in _SECTIONS.items():
        values = data.get(section)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ConfigurationError(f"Section '{section}' must be a mapping")
        known = {f.name for f in fields(section_cls)}
        bad = sorted(set(values) - known)
        if bad:
            raise ConfigurationError(
                f"Unsupported option(s) in '{section}': " + ", ".join(bad)
            )
        target = getattr(cfg, section)
        for key, value in values.items():
            if value is not None and (section, key) in _PATH_KEYS:
                value = Path(value).expanduser()
            if value is None and (section, key) not in _PATH_KEYS:
                continue
            setattr(target, key, value)

    return cfg


def load_config(path: Path) -> Config:
    """Load configuration from YAML file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse configuration {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Could not read configuration {path}: {exc}") from exc
    return config_from_dict(data)


def save_config(cfg: Config, path: Path) -> None:
    """Save configuration to YAML file."""
    data = cfg.to_dict()
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
