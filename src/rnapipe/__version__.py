"""Version information for rnapipe."""

__version__ = "0.4.0"
__license__ = "GPL-2.0"
__description__ = "Resumable orchestration of paired-end bulk RNA-seq pipelines"
