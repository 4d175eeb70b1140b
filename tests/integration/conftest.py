"""Pytest configuration for integration tests."""

import shutil
from pathlib import Path
from typing import Callable, Dict

import pytest
import yaml


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: end-to-end tests over temporary project directories"
    )


VERSION_GUARD = """\
if [ $# -eq 1 ]; then
  case "$1" in --version|-version|-v) echo "{name} v{version}"; exit 0;; esac
fi
"""

# Stand-ins for the collaborators: each writes the files the real tool
# would write for the argument layout rnapipe uses.
FAKE_TOOLS = {
    "fastqc": ("FastQC", "0.12.1", r"""
outdir=""
while [ $# -gt 0 ]; do
  case "$1" in
    --threads) shift 2 ;;
    --outdir) outdir="$2"; shift 2 ;;
    *)
      base=$(basename "$1"); base=${base%.gz}; base=${base%.fastq}; base=${base%.fq}
      echo "<html>$base</html>" > "$outdir/${base}_fastqc.html"
      echo "zip" > "$outdir/${base}_fastqc.zip"
      shift ;;
  esac
done
"""),
    "trimmomatic": ("Trimmomatic", "0.39", r"""
# PE -threads N -phred33 in1 in2 p1 u1 p2 u2 steps...
cp "$5" "$7"
: > "$8"
cp "$6" "$9"
: > "${10}"
echo "Input Read Pairs: 1 Both Surviving: 1 (100.00%)" >&2
"""),
    "star": ("STAR", "2.7.11", r"""
prefix=""; reads=""
while [ $# -gt 0 ]; do
  case "$1" in
    --outFileNamePrefix) prefix="$2"; shift 2 ;;
    --readFilesIn) reads="$2 $3"; shift 3 ;;
    *) shift ;;
  esac
done
case "$reads" in *corrupt*) echo "EXITING because of FATAL ERROR in reads input" >&2; exit 102 ;; esac
echo "BAM $reads" > "${prefix}Aligned.out.bam"
echo "Uniquely mapped reads % | 91.00%" > "${prefix}Log.final.out"
"""),
    "samtools": ("samtools", "1.17", r"""
cmd="$1"; shift
if [ "$cmd" = "sort" ]; then
  out=""
  while [ $# -gt 1 ]; do
    case "$1" in
      -o) out="$2"; shift 2 ;;
      *) shift ;;
    esac
  done
  cp "$1" "$out"
elif [ "$cmd" = "index" ]; then
  for last; do :; done
  echo "BAI" > "$last.bai"
fi
"""),
    "featurecounts": ("featureCounts", "2.0.6", r"""
T=$(printf '\t')
out=""; bams=""
while [ $# -gt 0 ]; do
  case "$1" in
    -o) out="$2"; shift 2 ;;
    -T|-s|-a) shift 2 ;;
    -p|--countReadPairs) shift ;;
    *) bams="$bams${T}$1"; shift ;;
  esac
done
{
  echo "# Program:featureCounts v2.0.6; Command:featureCounts"
  echo "Geneid${T}Chr${T}Start${T}End${T}Strand${T}Length$bams"
  for gene in g1 g2 g3; do
    row="$gene${T}chr1${T}1${T}100${T}+${T}100"
    for _ in $bams; do row="$row${T}7"; done
    echo "$row"
  done
} > "$out"
echo "Status$bams" > "$out.summary"
"""),
    "rscript": ("R scripting front-end", "4.3.1", r"""
# --vanilla script counts coldata outdir reference padj
outdir="$5"
echo "gene_id,baseMean,log2FoldChange,lfcSE,stat,pvalue,padj" > "$outdir/deseq2_results.csv"
echo "g1,7,0,0.1,0,1,1" >> "$outdir/deseq2_results.csv"
echo "gene_id,baseMean,log2FoldChange,lfcSE,stat,pvalue,padj" > "$outdir/significant_genes.csv"
echo "%PDF-1.4" > "$outdir/ma_plot.pdf"
"""),
    "multiqc": ("multiqc", "1.19", r"""
outdir=""
while [ $# -gt 0 ]; do
  case "$1" in
    --outdir) outdir="$2"; shift 2 ;;
    *) shift ;;
  esac
done
echo "<html>MultiQC</html>" > "$outdir/multiqc_report.html"
"""),
}


@pytest.fixture
def fake_toolchain(tmp_path) -> Dict[str, Path]:
    """Executable shell scripts standing in for every collaborator."""
    if shutil.which("sh") is None:
        pytest.skip("POSIX shell required for the fake toolchain")

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    tools = {}
    for key, (name, version, body) in FAKE_TOOLS.items():
        script = bin_dir / key
        script.write_text(
            "#!/bin/sh\nset -e\n" + VERSION_GUARD.format(name=name, version=version) + body
        )
        script.chmod(0o755)
        tools[key] = script
    return tools


@pytest.fixture
def pipeline_config(tmp_path, reference_files, fake_toolchain) -> Callable[..., Path]:
    """YAML configuration wired to the fake toolchain."""

    def _write(**overrides) -> Path:
        data = {
            "references": {k: str(v) for k, v in reference_files.items()},
            "tools": {k: str(v) for k, v in fake_toolchain.items()},
            "performance": {"threads": 2},
        }
        data.update(overrides)
        path = tmp_path / "rnapipe.yaml"
        path.write_text(yaml.safe_dump(data))
        return path

    return _write
