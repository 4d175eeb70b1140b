"""rnapipe: resumable paired-end RNA-seq pipeline orchestration."""

from rnapipe.__version__ import __version__

__all__ = ["__version__"]
