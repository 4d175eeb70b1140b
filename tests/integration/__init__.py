"""Integration tests for rnapipe.

These tests drive whole projects through the executor and the CLI with
stage runners that write artifacts instead of calling external tools.

Run with: pytest tests/integration/ -v
"""
