"""Tests for utils progress module."""

from rnapipe.utils.progress import iter_progress


class TestIterProgress:
    """Test cases for iter_progress function."""

    def test_disabled_returns_plain_iterator(self):
        data = ["quality_check", "trim", "align"]
        progress = iter_progress(data, enabled=False)
        assert hasattr(progress, "__next__")
        assert list(progress) == data

    def test_enabled_yields_all_items(self):
        data = list(range(5))
        assert list(iter_progress(data, total=5, desc="project")) == data

    def test_generator_input(self):
        result = list(iter_progress((x * 2 for x in range(3)), enabled=False))
        assert result == [0, 2, 4]

    def test_empty_iterable(self):
        assert list(iter_progress([], desc="empty")) == []
