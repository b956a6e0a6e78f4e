"""Tests for table I/O and formatting helpers."""

import pandas as pd
import pytest

from telco_sentiment.utils import (
    format_percentage,
    format_sentiment_score,
    read_table,
    save_table,
    truncate_text,
)


@pytest.fixture
def table():
    return pd.DataFrame({'company': ['TIM', 'Vodafone'], 'rating': [1, 4]})


class TestTableIO:
    """Test suffix-dispatched reading and writing."""

    @pytest.mark.parametrize("suffix", ['.csv', '.parquet', '.xlsx'])
    def test_save_then_read(self, table, tmp_path, suffix):
        path = save_table(table, tmp_path / "out" / f"scored{suffix}")
        pd.testing.assert_frame_equal(read_table(path), table)

    def test_unsupported_output(self, table, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            save_table(table, tmp_path / "scored.txt")

    def test_missing_input(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_table(tmp_path / "missing.csv")


class TestFormatting:
    """Test console formatters."""

    def test_percentage(self):
        assert format_percentage(33.333) == "33.3%"

    def test_sentiment_score_sign(self):
        assert format_sentiment_score(0.25) == "+0.250"
        assert format_sentiment_score(-0.1) == "-0.100"

    def test_truncate(self):
        assert truncate_text("servizio clienti", 50) == "servizio clienti"
        assert truncate_text("a" * 60, 10) == "aaaaaaa..."
