"""
Telco Review Sentiment Pipeline
================================
Runs the whole analysis over a loaded review table, one step at a time.
Every step returns a new DataFrame with extra columns; the input table is left untouched.

Steps:
1. Text normalization and compound merging
2. Lemmatization
3. Dictionary sentiment scoring
4. Emotion classification
5. Rating classes
6. Term frequencies and word clouds
7. Report and charts
"""

import logging
from pathlib import Path

from .config import *
from .emotion import EmotionClassifier, classify_emotions
from .frequency import (
    comparison_weights,
    filter_short_documents,
    render_comparison_cloud,
    render_wordcloud,
    term_frequencies,
    tfidf_frequencies,
)
from .lemmatizer import lemmatize_reviews
from .reporting import add_rating_class, build_figures, build_report, save_figures
from .sentiment import score_documents
from .text_normalizer import normalize_reviews, scan_ngrams
from .utils import save_table

logger = logging.getLogger(__name__)


def frequency_analysis(df, top_n=TOP_N_TERMS, min_lemmas=MIN_DOCUMENT_LEMMAS):
    """
    Term rankings over documents long enough for frequency analysis.

    Args:
        df: Review DataFrame with 'lemmatized_text', 'company' and 'polarity'
        top_n: Terms kept per ranking
        min_lemmas: Minimum lemmas per document

    Returns:
        Dictionary with 'top_terms', 'top_tfidf_terms', 'company_comparison'
        and 'polarity_comparison' (empty dict when no document is long enough)
    """
    df_freq = filter_short_documents(df, min_lemmas=min_lemmas)
    if df_freq.empty:
        logger.warning(f"No document has at least {min_lemmas} lemmas; skipping frequency analysis")
        return {}

    documents = df_freq['lemmatized_text'].tolist()
    return {
        'top_terms': term_frequencies(documents, top_n=top_n),
        'top_tfidf_terms': tfidf_frequencies(documents, top_n=top_n),
        'company_comparison': comparison_weights(df_freq, 'company', top_n=top_n),
        'polarity_comparison': comparison_weights(df_freq, 'polarity', top_n=top_n),
    }


def render_wordclouds(frequencies, output_dir):
    """
    Save the word clouds and comparison clouds as PNG files.

    Args:
        frequencies: Output of frequency_analysis()
        output_dir: Destination directory

    Returns:
        List of written paths
    """
    output_dir = Path(output_dir)
    if not frequencies:
        return []

    saved = []
    for key, title, filename in [
        ('top_terms', 'Most Frequent Lemmas', 'wordcloud_frequency.png'),
        ('top_tfidf_terms', 'Most Distinctive Lemmas (TF-IDF)', 'wordcloud_tfidf.png'),
    ]:
        if (frequencies[key] > 0).any():
            render_wordcloud(frequencies[key], title, output_dir / filename)
            saved.append(output_dir / filename)
        else:
            logger.warning(f"Skipping '{title}': no term has positive weight")

    for key, title, filename in [
        ('company_comparison', 'Comparison Cloud by Company', 'comparison_company.png'),
        ('polarity_comparison', 'Comparison Cloud by Polarity', 'comparison_polarity.png'),
    ]:
        render_comparison_cloud(frequencies[key], title, output_dir / filename)
        saved.append(output_dir / filename)

    return saved


def analysis_pipeline(df_reviews, resources, drop_empty=False, scan=False, top_n=TOP_N_TERMS,
                      figures_dir=None, output_path=None):
    """
    Complete analysis pipeline.

    Args:
        df_reviews: Validated review DataFrame (see loader.load_reviews)
        resources: ResourceBundle with a loaded tagging model
        drop_empty: Drop reviews with no content lemma instead of failing
        scan: Also list frequent n-grams missing from the correction table
        top_n: Terms kept per frequency ranking
        figures_dir: Optional directory for word clouds and charts
        output_path: Optional path to save the scored review table

    Returns:
        Tuple of (scored DataFrame, report dictionary)
    """
    if resources.nlp is None:
        raise ValueError("ResourceBundle has no tagging model; load one with loader.load_language_model()")

    print("\n" + "="*60)
    print("STARTING TELCO REVIEW SENTIMENT PIPELINE")
    print("="*60)

    print("\n[1/7] Normalizing review text...")
    df = normalize_reviews(df_reviews, resources.corrections)

    ngram_candidates = None
    if scan:
        ngram_candidates = scan_ngrams(
            df['normalized_text'],
            known_phrases=resources.corrections['phrase'].tolist()
        )
        print(f"✓ Found {len(ngram_candidates)} frequent n-grams not in the correction table")

    print("\n[2/7] Lemmatizing...")
    # valence shifters must reach the scorer even when listed as stopwords (e.g. 'non')
    stopwords = set(resources.stopwords) - resources.shifters.terms
    kept = set(resources.stopwords) & resources.shifters.terms
    if kept:
        logger.info(f"Keeping {len(kept)} valence shifters that are also stopwords: {sorted(kept)}")
    df, tokens = lemmatize_reviews(df, resources.nlp, stopwords, drop_empty=drop_empty)

    print("\n[3/7] Scoring sentiment...")
    df = score_documents(df, resources.dictionaries, resources.shifters)

    print("\n[4/7] Classifying emotions...")
    classifier = EmotionClassifier(resources.emotion_lexicon)
    df = classify_emotions(df, classifier)

    print("\n[5/7] Adding rating classes...")
    df = add_rating_class(df)
    print("✓ Added rating_class column")

    print("\n[6/7] Computing term frequencies...")
    frequencies = frequency_analysis(df, top_n=top_n)

    print("\n[7/7] Building report...")
    report = build_report(df)
    report.update(frequencies)
    report['n_tokens'] = len(tokens)
    if ngram_candidates is not None:
        report['ngram_candidates'] = ngram_candidates

    if figures_dir:
        render_wordclouds(frequencies, figures_dir)
        save_figures(build_figures(report), figures_dir)

    if output_path:
        save_table(df, output_path)

    print("\n" + "="*60)
    print("ANALYSIS COMPLETE!")
    print("="*60 + "\n")

    return df, report
