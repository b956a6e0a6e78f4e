"""Tests for rating classes, distributions and report charts."""

import pandas as pd
import pytest

from telco_sentiment.reporting import (
    add_rating_class,
    agreement_accuracy,
    build_figures,
    build_report,
    describe_companies,
    emotion_distribution,
    polarity_distribution,
    print_report,
    rating_class,
    rating_polarity_crosstab,
    save_figures,
)
from telco_sentiment.sentiment import classify_polarity


@pytest.fixture
def scored():
    scores = [-0.8, 0.6, -0.3, 0.4, 0.0, 0.9]
    return pd.DataFrame({
        'review_id': [1, 2, 3, 4, 5, 6],
        'company': ['TIM', 'TIM', 'Vodafone', 'Vodafone', 'WindTre', 'WindTre'],
        'rating': [1, 5, 2, 4, 3, 5],
        'sentiment_score': scores,
        'polarity': [classify_polarity(s) for s in scores],
        'emotion': ['anger', 'joy', 'anger', 'trust', None, 'joy'],
    })


class TestRatingClass:
    """Test the rating buckets."""

    @pytest.mark.parametrize("rating,expected", [
        (1, 'Negative'), (2, 'Negative'), (2.5, 'Neutral'),
        (3, 'Neutral'), (3.5, 'Positive'), (5, 'Positive'),
    ])
    def test_boundaries(self, rating, expected):
        assert rating_class(rating) == expected

    @pytest.mark.parametrize("rating", [0, 6, 'abc', None])
    def test_invalid_ratings(self, rating):
        with pytest.raises(ValueError):
            rating_class(rating)

    def test_column_matches_single_value_rule(self):
        """The vectorized column agrees with rating_class()."""
        ratings = [1, 1.5, 2, 2.5, 3, 3.5, 4, 5]
        df = add_rating_class(pd.DataFrame({'rating': ratings}))
        assert df['rating_class'].tolist() == [rating_class(r) for r in ratings]

    def test_column_rejects_out_of_range(self):
        with pytest.raises(ValueError, match="outside"):
            add_rating_class(pd.DataFrame({'rating': [1, 7]}))

    def test_column_rejects_non_numeric(self):
        with pytest.raises(ValueError, match=r"rows: \[1\]"):
            add_rating_class(pd.DataFrame({'rating': [3, 'tre']}))


class TestDistributions:
    """Test polarity and emotion shares."""

    def test_three_way_split(self):
        """Scores -1, 0 and +2 give one third per class."""
        df = pd.DataFrame({'polarity': [classify_polarity(s) for s in [-1, 0, 2]]})
        shares = polarity_distribution(df)

        assert shares.index.tolist() == ['Negative', 'Neutral', 'Positive']
        for value in shares:
            assert value == pytest.approx(100 / 3)

    def test_missing_class_reported_as_zero(self):
        """Classes with no review still appear."""
        df = pd.DataFrame({'polarity': ['Positive', 'Positive']})
        shares = polarity_distribution(df)
        assert shares['Negative'] == 0
        assert shares['Positive'] == 100

    def test_by_company(self, scored):
        """Each company row sums to 100."""
        table = polarity_distribution(scored, by='company')
        assert table.columns.tolist() == ['Negative', 'Neutral', 'Positive']
        assert table.loc['TIM', 'Negative'] == pytest.approx(50)
        for total in table.sum(axis=1):
            assert total == pytest.approx(100)

    def test_emotions_with_unknown(self, scored):
        """Reviews without an emotion count as unknown."""
        shares = emotion_distribution(scored)
        assert shares['anger'] == pytest.approx(100 / 3)
        assert shares['unknown'] == pytest.approx(100 / 6)


class TestAgreement:
    """Test the rating vs polarity comparison."""

    def test_crosstab_and_accuracy(self, scored):
        """All six reviews agree with their rating."""
        table = rating_polarity_crosstab(add_rating_class(scored))

        assert table.index.tolist() == ['Negative', 'Neutral', 'Positive']
        assert table.columns.tolist() == ['Negative', 'Neutral', 'Positive']
        assert table.to_numpy().sum() == 6
        assert agreement_accuracy(table) == 1.0

    def test_partial_agreement(self, scored):
        """Disagreeing reviews fall off the diagonal."""
        scored.loc[1, 'polarity'] = 'Negative'
        table = rating_polarity_crosstab(add_rating_class(scored))
        assert table.loc['Positive', 'Negative'] == 1
        assert agreement_accuracy(table) == pytest.approx(5 / 6)

    def test_empty_crosstab(self):
        with pytest.raises(ValueError):
            agreement_accuracy(pd.DataFrame())


class TestReport:
    """Test the combined report, console output and charts."""

    def test_describe_companies(self, scored):
        stats = describe_companies(scored).set_index('company')
        assert stats.loc['TIM', 'review_count'] == 2
        assert stats.loc['TIM', 'avg_rating'] == 3
        assert stats.loc['TIM', 'pct_positive'] == 50
        assert stats.loc['WindTre', 'pct_negative'] == 0

    def test_build_report(self, scored):
        report = build_report(add_rating_class(scored))
        assert report['n_reviews'] == 6
        assert report['rating_accuracy'] == 1.0
        assert report['mean_sentiment_by_company'].index[0] == 'WindTre'

    def test_print_report(self, scored, capsys):
        print_report(build_report(add_rating_class(scored)))
        output = capsys.readouterr().out
        assert "SENTIMENT ANALYSIS REPORT" in output
        assert "Vodafone" in output

    def test_figures_saved(self, scored, tmp_path):
        figures = build_figures(build_report(add_rating_class(scored)))
        paths = save_figures(figures, tmp_path)

        assert len(paths) == 4
        for path in paths:
            assert path.exists()
            assert path.suffix == '.html'
