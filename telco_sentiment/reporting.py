"""
Sentiment Reporting Module
===========================
Descriptive comparisons across companies, polarity classes, rating classes and
emotions, plus the plotly charts and the console summary.

Key Functions:
- add_rating_class(): Bin 1-5 ratings into Negative / Neutral / Positive
- polarity_distribution(): Percentage of each polarity class (optionally per group)
- rating_polarity_crosstab() / agreement_accuracy(): Rating vs polarity agreement
- emotion_distribution(): Percentage of each best-fit emotion
- build_report() / print_report(): All of the above in one dict / on the console
"""

import math
from pathlib import Path

import numpy as np
import pandas as pd
import plotly.express as px

from .config import *
from .utils import format_percentage, format_sentiment_score


def rating_class(rating):
    """
    Rating bucket of a single rating.

    Args:
        rating: Numeric rating in [1, 5]

    Returns:
        'Negative' for [1, 2], 'Neutral' for (2, 3], 'Positive' for (3, 5]
    """
    try:
        value = float(rating)
    except (TypeError, ValueError):
        raise ValueError(f"Rating {rating!r} is not numeric") from None

    if math.isnan(value) or value < RATING_BINS[0] or value > RATING_BINS[-1]:
        raise ValueError(f"Rating {rating!r} is outside [{RATING_BINS[0]}, {RATING_BINS[-1]}]")

    for upper, label in zip(RATING_BINS[1:], RATING_LABELS):
        if value <= upper:
            return label


def add_rating_class(df):
    """
    Add the 'rating_class' column.

    Args:
        df: Review DataFrame with a numeric 'rating' column

    Returns:
        New DataFrame with 'rating_class'
    """
    df = df.copy()
    ratings = pd.to_numeric(df['rating'], errors='coerce')

    invalid = df.index[ratings.isna() | (ratings < RATING_BINS[0]) | (ratings > RATING_BINS[-1])].tolist()
    if invalid:
        raise ValueError(f"Ratings outside [{RATING_BINS[0]}, {RATING_BINS[-1]}] or non-numeric in rows: {invalid[:10]}")

    df['rating_class'] = ratings.map(rating_class)
    return df


def mean_sentiment_by_company(df):
    """Average sentiment score per company, highest first."""
    return df.groupby('company')['sentiment_score'].mean().sort_values(ascending=False)


def polarity_distribution(df, by=None):
    """
    Percentage of reviews in each polarity class.

    Args:
        df: Scored review DataFrame
        by: Optional grouping column (e.g. 'company')

    Returns:
        Series of percentages, or a DataFrame (groups x classes) when grouped
    """
    if by is None:
        shares = df['polarity'].value_counts(normalize=True)
        return shares.reindex(POLARITY_CLASSES, fill_value=0.0) * 100

    table = pd.crosstab(df[by], df['polarity'], normalize='index')
    return table.reindex(columns=POLARITY_CLASSES, fill_value=0.0) * 100


def rating_polarity_crosstab(df):
    """
    Count of reviews per rating class (rows) and polarity class (columns).

    Args:
        df: Scored review DataFrame with 'rating_class'

    Returns:
        DataFrame with every class present on both axes
    """
    table = pd.crosstab(df['rating_class'], df['polarity'])
    table = table.reindex(index=RATING_LABELS, columns=POLARITY_CLASSES, fill_value=0)
    table.index.name = 'rating_class'
    table.columns.name = 'polarity'
    return table


def agreement_accuracy(crosstab):
    """
    Share of reviews whose polarity class matches their rating class.

    Args:
        crosstab: Output of rating_polarity_crosstab()

    Returns:
        Diagonal sum divided by the total
    """
    total = crosstab.to_numpy().sum()
    if total == 0:
        raise ValueError("Cannot compute agreement on an empty cross-tabulation")

    diagonal = sum(
        crosstab.loc[label, label]
        for label in crosstab.index
        if label in crosstab.columns
    )
    return float(diagonal / total)


def emotion_distribution(df, by=None):
    """
    Percentage of reviews per best-fit emotion.

    Args:
        df: Review DataFrame with an 'emotion' column
        by: Optional grouping column

    Returns:
        Series of percentages (highest first), or a DataFrame when grouped
    """
    labels = df['emotion'].fillna(UNKNOWN_EMOTION)
    if by is None:
        return labels.value_counts(normalize=True) * 100
    return pd.crosstab(df[by], labels, normalize='index') * 100


def describe_companies(df):
    """
    Side-by-side company metrics.

    Args:
        df: Scored review DataFrame

    Returns:
        DataFrame with review count, mean rating, mean sentiment and
        positive / negative percentages per company
    """
    stats = df.groupby('company').agg(
        review_count=(ID_COLUMN, 'count'),
        avg_rating=('rating', 'mean'),
        avg_sentiment=('sentiment_score', 'mean'),
        positive_count=('polarity', lambda s: (s == POLARITY_POSITIVE).sum()),
        negative_count=('polarity', lambda s: (s == POLARITY_NEGATIVE).sum()),
    ).reset_index()

    stats['pct_positive'] = stats['positive_count'] / stats['review_count'] * 100
    stats['pct_negative'] = stats['negative_count'] / stats['review_count'] * 100
    return stats.sort_values('review_count', ascending=False).reset_index(drop=True)


def build_report(df):
    """
    Collect every aggregation of the scored reviews.

    Args:
        df: Review DataFrame with polarity, rating_class and emotion columns

    Returns:
        Dictionary of tables and metrics
    """
    crosstab = rating_polarity_crosstab(df)
    return {
        'n_reviews': len(df),
        'companies': describe_companies(df),
        'mean_sentiment_by_company': mean_sentiment_by_company(df),
        'polarity_distribution': polarity_distribution(df),
        'polarity_by_company': polarity_distribution(df, by='company'),
        'rating_crosstab': crosstab,
        'rating_accuracy': agreement_accuracy(crosstab) if len(df) else np.nan,
        'emotion_distribution': emotion_distribution(df),
        'emotion_by_company': emotion_distribution(df, by='company'),
    }


def print_report(report):
    """Print the report tables to the console."""
    print("\n" + "="*60)
    print("SENTIMENT ANALYSIS REPORT")
    print("="*60)

    print(f"\n📊 Reviews analysed: {report['n_reviews']:,}")

    print("\n🏢 Companies:")
    for _, row in report['companies'].iterrows():
        print(f"  - {str(row['company']):20s} {row['review_count']:6d} reviews | "
              f"rating {row['avg_rating']:.2f} | sentiment {format_sentiment_score(row['avg_sentiment'])} | "
              f"{format_percentage(row['pct_positive'])} positive, {format_percentage(row['pct_negative'])} negative")

    print("\n📈 Polarity distribution:")
    for label, pct in report['polarity_distribution'].items():
        print(f"  - {label:10s} {format_percentage(pct)}")

    print("\n📋 Polarity by company (%):")
    print(report['polarity_by_company'].round(1).to_string())

    print("\n⭐ Rating class vs polarity:")
    print(report['rating_crosstab'].to_string())
    if not pd.isna(report['rating_accuracy']):
        print(f"  Agreement (diagonal / total): {format_percentage(report['rating_accuracy'] * 100)}")

    print("\n🎭 Emotion distribution:")
    for label, pct in report['emotion_distribution'].items():
        print(f"  - {label:15s} {format_percentage(pct)}")

    if 'top_terms' in report:
        print("\n🔝 Top 20 lemmas:")
        top_tf = report['top_terms'].head(20)
        top_tfidf = report['top_tfidf_terms'].head(20)
        for i, ((term, count), (tfidf_term, weight)) in enumerate(zip(top_tf.items(), top_tfidf.items()), 1):
            print(f"  {i:2d}. {term:20s} {int(count):6d}   |   {tfidf_term:20s} {weight:.3f}")

    print("\n" + "="*60 + "\n")


# ==================== CHARTS ====================

def plot_mean_sentiment(mean_by_company):
    """Bar chart of the average sentiment per company."""
    data = mean_by_company.rename('sentiment_score').reset_index()
    fig = px.bar(
        data, x='company', y='sentiment_score',
        title='Average Sentiment Score by Company',
        labels={'company': 'Company', 'sentiment_score': 'Average sentiment'},
        height=CHART_HEIGHT, width=CHART_WIDTH
    )
    return fig


def plot_polarity_by_company(distribution):
    """Grouped bar chart of polarity percentages per company."""
    group_col = distribution.index.name or 'group'
    data = distribution.rename_axis(index=group_col, columns=None).reset_index().melt(
        id_vars=group_col, var_name='polarity', value_name='percentage'
    )
    fig = px.bar(
        data, x=group_col, y='percentage', color='polarity', barmode='group',
        category_orders={'polarity': POLARITY_CLASSES},
        color_discrete_map=COLOR_PALETTE_SENTIMENT,
        title='Polarity Distribution by Company',
        labels={group_col: 'Company', 'percentage': '% of reviews'},
        height=CHART_HEIGHT, width=CHART_WIDTH
    )
    return fig


def plot_rating_crosstab(crosstab):
    """Heatmap of rating class vs polarity class counts."""
    fig = px.imshow(
        crosstab, text_auto=True, color_continuous_scale='Blues',
        labels={'x': 'Polarity', 'y': 'Rating class', 'color': 'Reviews'},
        title='Rating Class vs Polarity',
        height=CHART_HEIGHT, width=CHART_WIDTH
    )
    return fig


def plot_emotion_distribution(distribution):
    """Bar chart of emotion percentages."""
    data = distribution.rename('percentage').rename_axis('emotion').reset_index()
    fig = px.bar(
        data, x='emotion', y='percentage',
        title='Emotion Distribution',
        labels={'emotion': 'Emotion', 'percentage': '% of reviews'},
        height=CHART_HEIGHT, width=CHART_WIDTH
    )
    return fig


def build_figures(report):
    """All report charts keyed by file stem."""
    return {
        'mean_sentiment_by_company': plot_mean_sentiment(report['mean_sentiment_by_company']),
        'polarity_by_company': plot_polarity_by_company(report['polarity_by_company']),
        'rating_vs_polarity': plot_rating_crosstab(report['rating_crosstab']),
        'emotion_distribution': plot_emotion_distribution(report['emotion_distribution']),
    }


def save_figures(figures, output_dir=FIGURES_DIR):
    """
    Write plotly figures as standalone HTML files.

    Args:
        figures: Dict name -> plotly Figure
        output_dir: Destination directory

    Returns:
        List of written paths
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    saved = []
    for name, fig in figures.items():
        path = output_dir / f"{name}.html"
        fig.write_html(str(path))
        saved.append(path)
        print(f"✓ Saved: {path}")
    return saved
