"""Sample discovery, mate pairing and condition assignment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, NamedTuple, Optional, Sequence

import pandas as pd

from rnapipe.constants import INFERRED_CONDITIONS, READ_EXTENSIONS
from rnapipe.exceptions import (
    ConditionAssignmentError,
    IncompleteSamplePairError,
    NoInputSamplesError,
    SampleDiscoveryError,
    UnrecognizedReadFileError,
)
from rnapipe.utils.logging import get_logger

MATE1 = 1
MATE2 = 2


@dataclass(frozen=True)
class MateConvention:
    """Fixed file name suffixes that identify the two mates of a sample."""

    mate1_suffix: str
    mate2_suffix: str

    def mate2_name(self, mate1_name: str) -> str:
        """Name of the mate-2 file expected next to a mate-1 file."""
        return mate1_name[: -len(self.mate1_suffix)] + self.mate2_suffix


class ReadFile(NamedTuple):
    """A parsed read file name."""

    sample: str
    mate: int


@dataclass(frozen=True)
class Sample:
    """A paired-end sample reconstructed from the raw-input area."""

    name: str
    mate1: Path
    mate2: Path
    condition: Optional[str] = None


def is_read_file(name: str) -> bool:
    return name.endswith(READ_EXTENSIONS)


def parse_read_filename(name: str, convention: MateConvention) -> Optional[ReadFile]:
    """Map a file name to its (sample, mate) identity.

    Returns None for files that are not sequencing reads. Read files that do
    not follow the convention raise instead of being skipped.

    Raises:
        UnrecognizedReadFileError: Read file without a mate suffix or with an
            empty sample name
    """
    if name.startswith(".") or not is_read_file(name):
        return None

    # Longest suffix first so e.g. "_R1.fastq.gz" never shadows a longer one
    candidates = sorted(
        ((convention.mate1_suffix, MATE1), (convention.mate2_suffix, MATE2)),
        key=lambda item: len(item[0]),
        reverse=True,
    )
    for suffix, mate in candidates:
        if name.endswith(suffix):
            sample = name[: -len(suffix)]
            if not sample:
                raise UnrecognizedReadFileError(f"Read file has no sample name: {name}")
            return ReadFile(sample=sample, mate=mate)

    raise UnrecognizedReadFileError(
        f"Read file does not match '*{convention.mate1_suffix}' or "
        f"'*{convention.mate2_suffix}': {name}"
    )


def discover_samples(
    raw_dir: Path,
    convention: MateConvention,
    logger: Optional[logging.Logger] = None,
) -> List[Sample]:
    """Pair the read files of a raw-input area into samples.

    Samples are ordered lexicographically by mate-1 file name so that stage
    order and logs are stable across re-runs.

    Raises:
        NoInputSamplesError: No mate-1 files were found
        IncompleteSamplePairError: A mate has no counterpart
        SampleDiscoveryError: Unparseable read names or duplicate samples
    """
    logger = logger or get_logger("samples")
    if not raw_dir.is_dir():
        raise NoInputSamplesError(f"Raw-input directory not found: {raw_dir}")

    mate1_files: Dict[str, Path] = {}
    mate2_files: Dict[str, Path] = {}
    for path in sorted(raw_dir.iterdir(), key=lambda p: p.name):
        if not path.is_file():
            continue
        parsed = parse_read_filename(path.name, convention)
        if parsed is None:
            logger.debug(f"Ignoring non-read file: {path.name}")
            continue
        bucket = mate1_files if parsed.mate == MATE1 else mate2_files
        if parsed.sample in bucket:
            raise SampleDiscoveryError(
                f"Duplicate sample name '{parsed.sample}' in {raw_dir}"
            )
        bucket[parsed.sample] = path

    if not mate1_files:
        raise NoInputSamplesError(
            f"No '*{convention.mate1_suffix}' files found in {raw_dir}"
        )

    samples: List[Sample] = []
    for mate1 in sorted(mate1_files.values(), key=lambda p: p.name):
        name = mate1.name[: -len(convention.mate1_suffix)]
        mate2 = raw_dir / convention.mate2_name(mate1.name)
        if not mate2.is_file():
            raise IncompleteSamplePairError(
                f"Sample '{name}': {mate1.name} has no mate file {mate2.name}"
            )
        samples.append(Sample(name=name, mate1=mate1, mate2=mate2))

    orphans = sorted(set(mate2_files) - set(mate1_files))
    if orphans:
        raise IncompleteSamplePairError(
            "Mate-2 file(s) without mate-1: "
            + ", ".join(mate2_files[name].name for name in orphans)
        )

    logger.info(f"Discovered {len(samples)} samples in {raw_dir}: "
                + ", ".join(s.name for s in samples))
    return samples


def read_sample_sheet(path: Path) -> Dict[str, str]:
    """Read a ``sample,condition`` CSV into a mapping."""
    try:
        sheet = pd.read_csv(path, dtype=str)
    except (OSError, ValueError) as exc:
        raise ConditionAssignmentError(f"Could not read sample sheet {path}: {exc}") from exc

    sheet.columns = [str(c).strip().lower() for c in sheet.columns]
    missing = {"sample", "condition"} - set(sheet.columns)
    if missing:
        raise ConditionAssignmentError(
            f"Sample sheet {path} lacks column(s): {', '.join(sorted(missing))}"
        )
    sheet = sheet.dropna(subset=["sample"])
    sheet["sample"] = sheet["sample"].str.strip()
    if sheet["sample"].duplicated().any():
        dupes = sorted(sheet.loc[sheet["sample"].duplicated(), "sample"].unique())
        raise ConditionAssignmentError(
            f"Sample sheet {path} lists samples more than once: {', '.join(dupes)}"
        )
    if sheet["condition"].isna().any():
        raise ConditionAssignmentError(f"Sample sheet {path} has rows without a condition")
    return dict(zip(sheet["sample"], sheet["condition"].str.strip()))


def infer_condition(sample_name: str) -> Optional[str]:
    """Condition named in a sample name, or None when absent or ambiguous."""
    lowered = sample_name.lower()
    hits = [condition for condition in INFERRED_CONDITIONS if condition in lowered]
    return hits[0] if len(hits) == 1 else None


def assign_conditions(
    samples: Sequence[Sample],
    sample_sheet: Optional[Path] = None,
    conditions: Optional[Mapping[str, str]] = None,
    infer: bool = True,
) -> List[Sample]:
    """Attach an experimental condition to every sample.

    Priority: sample sheet, explicit mapping, then name inference (if
    enabled). A sample without a condition is an error; there is no
    catch-all group.

    Raises:
        ConditionAssignmentError: Unassigned samples, unknown names in the
            explicit mapping, or fewer than two conditions
    """
    if sample_sheet is not None and sample_sheet.is_file():
        mapping: Mapping[str, str] = read_sample_sheet(sample_sheet)
        source = str(sample_sheet)
    elif conditions:
        mapping = conditions
        source = "analysis.conditions"
    else:
        mapping = {}
        source = "sample names"

    names = {s.name for s in samples}
    unknown = sorted(set(mapping) - names)
    if unknown:
        raise ConditionAssignmentError(
            f"{source} names samples not present in the project: {', '.join(unknown)}"
        )

    assigned: List[Sample] = []
    unassigned: List[str] = []
    for sample in samples:
        condition = mapping.get(sample.name)
        if condition is None and infer and not mapping:
            condition = infer_condition(sample.name)
        if not condition:
            unassigned.append(sample.name)
            continue
        assigned.append(
            Sample(name=sample.name, mate1=sample.mate1, mate2=sample.mate2, condition=condition)
        )

    if unassigned:
        raise ConditionAssignmentError(
            f"No condition for sample(s) {', '.join(unassigned)} (from {source}); "
            "provide a sample sheet or analysis.conditions"
        )

    distinct = {s.condition for s in assigned}
    if len(distinct) < 2:
        raise ConditionAssignmentError(
            f"Differential expression needs at least two conditions, found: "
            f"{', '.join(sorted(c for c in distinct if c)) or 'none'}"
        )
    return assigned
