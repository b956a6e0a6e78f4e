"""
Term Frequency & Word Cloud Module
===================================
Term-document matrix over lemmatized reviews, raw and TF-IDF weighted term
rankings, group-level comparison weights and word cloud rendering.

Features:
- Raw term frequency summed across documents
- TF-IDF (length-normalized tf, log2 idf): terms found in every document weigh zero
- Company / polarity pseudo-documents for comparison clouds
"""

from pathlib import Path

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer
from wordcloud import WordCloud

from .config import *


def filter_short_documents(df, text_col='lemmatized_text', min_lemmas=MIN_DOCUMENT_LEMMAS):
    """
    Drop documents with too few lemmas for frequency analysis.

    Args:
        df: Review DataFrame
        text_col: Column with space-separated lemmas
        min_lemmas: Minimum number of lemmas to keep a document

    Returns:
        Filtered copy of the DataFrame
    """
    n_lemmas = df[text_col].fillna('').str.split().str.len()
    filtered = df[n_lemmas >= min_lemmas].copy()
    print(f"✓ Kept {len(filtered)} of {len(df)} documents with at least {min_lemmas} lemmas")
    return filtered


def build_term_document_matrix(documents):
    """
    Count lemmas per document.

    Args:
        documents: List of space-separated lemma strings

    Returns:
        Tuple of (sparse documents x terms count matrix, array of terms)
    """
    documents = list(documents)
    if not documents:
        raise ValueError("Cannot build a term-document matrix from zero documents")

    vectorizer = CountVectorizer(
        token_pattern=r"(?u)\b\w+\b",
        lowercase=False
    )
    counts = vectorizer.fit_transform(documents)
    return counts, vectorizer.get_feature_names_out()


def _ranked(values, terms, top_n):
    ranked = pd.Series(np.asarray(values, dtype=float), index=terms, name='weight')
    ranked = ranked.sort_values(ascending=False, kind='stable')
    return ranked.head(top_n) if top_n else ranked


def term_frequencies(documents, top_n=None):
    """
    Raw term frequency across documents.

    Args:
        documents: List of lemma strings
        top_n: Optional number of top terms to return

    Returns:
        Series of counts indexed by term, highest first
    """
    counts, terms = build_term_document_matrix(documents)
    return _ranked(counts.sum(axis=0).A1, terms, top_n)


def tfidf_matrix(documents):
    """
    TF-IDF weighted term-document matrix.

    tf is the term count divided by the document length, idf is
    log2(N / document frequency).

    Args:
        documents: List of lemma strings

    Returns:
        Tuple of (sparse documents x terms weight matrix, array of terms)
    """
    counts, terms = build_term_document_matrix(documents)
    n_docs = counts.shape[0]

    lengths = counts.sum(axis=1).A1.astype(float)
    lengths[lengths == 0] = 1.0
    tf = sparse.diags(1.0 / lengths) @ counts

    doc_freq = (counts > 0).sum(axis=0).A1
    idf = np.log2(n_docs / doc_freq)

    weights = sparse.csr_matrix(tf @ sparse.diags(idf))
    return weights, terms


def tfidf_frequencies(documents, top_n=None):
    """
    TF-IDF weights summed across documents.

    Args:
        documents: List of lemma strings
        top_n: Optional number of top terms to return

    Returns:
        Series of weights indexed by term, highest first
    """
    weights, terms = tfidf_matrix(documents)
    return _ranked(weights.sum(axis=0).A1, terms, top_n)


def group_documents(df, group_col, text_col='lemmatized_text'):
    """
    Merge all documents of each group into one pseudo-document.

    Args:
        df: Review DataFrame
        group_col: Grouping column (e.g. 'company' or 'polarity')
        text_col: Column with lemma strings

    Returns:
        Series of pseudo-documents indexed by group
    """
    if group_col not in df.columns:
        raise ValueError(f"Review table has no '{group_col}' column")
    grouped = df.dropna(subset=[text_col]).groupby(group_col)[text_col].apply(' '.join)
    return grouped.sort_index()


def group_term_matrix(df, group_col, text_col='lemmatized_text', weighting='tf'):
    """
    Terms x groups matrix built from group pseudo-documents.

    Args:
        df: Review DataFrame
        group_col: Grouping column
        text_col: Column with lemma strings
        weighting: 'tf' for raw counts, 'tfidf' for TF-IDF weights

    Returns:
        DataFrame with one row per term and one column per group
    """
    grouped = group_documents(df, group_col, text_col)
    if weighting == 'tf':
        matrix, terms = build_term_document_matrix(grouped.tolist())
    elif weighting == 'tfidf':
        matrix, terms = tfidf_matrix(grouped.tolist())
    else:
        raise ValueError(f"Unknown weighting '{weighting}' (expected 'tf' or 'tfidf')")

    return pd.DataFrame(matrix.toarray().T, index=terms, columns=grouped.index)


def comparison_weights(df, group_col, text_col='lemmatized_text', weighting='tf', top_n=TOP_N_TERMS):
    """
    Terms distinctive to each group.

    Each group's term proportions are compared with the mean proportion across
    groups; only positive deviations are kept, so a term shows up for the
    group(s) that use it more than average.

    Args:
        df: Review DataFrame
        group_col: Grouping column
        text_col: Column with lemma strings
        weighting: 'tf' or 'tfidf'
        top_n: Terms kept per group

    Returns:
        DataFrame of non-negative weights (terms x groups)
    """
    matrix = group_term_matrix(df, group_col, text_col, weighting)
    totals = matrix.sum(axis=0).replace(0, 1)
    proportions = matrix / totals
    deviations = proportions.sub(proportions.mean(axis=1), axis=0).clip(lower=0)

    keep = set()
    for group in deviations.columns:
        top = deviations[group][deviations[group] > 0].nlargest(top_n)
        keep.update(top.index)
    return deviations.loc[sorted(keep)]


def _make_wordcloud(frequencies, colormap='viridis', max_words=WORDCLOUD_MAX_WORDS,
                    width=WORDCLOUD_WIDTH, height=WORDCLOUD_HEIGHT):
    positive = {term: float(w) for term, w in dict(frequencies).items() if w > 0}
    if not positive:
        return None
    return WordCloud(
        width=width,
        height=height,
        background_color=WORDCLOUD_BACKGROUND,
        colormap=colormap,
        max_words=max_words,
        relative_scaling=0.5,
        min_font_size=10
    ).generate_from_frequencies(positive)


def _save_figure(fig, output_path):
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, bbox_inches='tight', facecolor='white')
    print(f"✓ Saved: {output_path}")


def render_wordcloud(frequencies, title, output_path=None, max_words=WORDCLOUD_MAX_WORDS):
    """
    Draw a word cloud with terms sized by weight.

    Args:
        frequencies: Series or dict term -> weight
        title: Figure title
        output_path: Optional PNG path
        max_words: Maximum number of terms drawn

    Returns:
        matplotlib Figure
    """
    wordcloud = _make_wordcloud(frequencies, max_words=max_words)
    if wordcloud is None:
        raise ValueError(f"No terms with positive weight to draw for '{title}'")

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.imshow(wordcloud, interpolation='bilinear')
    ax.axis('off')
    ax.set_title(title, fontsize=16, fontweight='bold', pad=20)
    fig.tight_layout()

    if output_path:
        _save_figure(fig, output_path)
    plt.close(fig)
    return fig


def render_comparison_cloud(weights, title, output_path=None, max_words=WORDCLOUD_MAX_WORDS):
    """
    Draw one panel per group with the terms distinctive to that group.

    Args:
        weights: DataFrame from comparison_weights() (terms x groups)
        title: Figure title
        output_path: Optional PNG path
        max_words: Maximum number of terms per panel

    Returns:
        matplotlib Figure
    """
    groups = list(weights.columns)
    if not groups:
        raise ValueError(f"No groups to compare for '{title}'")

    colormaps = ['Reds', 'Greens', 'Blues', 'Purples', 'Oranges', 'Greys']
    fig, axes = plt.subplots(1, len(groups), figsize=(6 * len(groups), 6), squeeze=False)
    for i, (group, ax) in enumerate(zip(groups, axes[0])):
        colormap = colormaps[i % len(colormaps)]
        wordcloud = _make_wordcloud(weights[group], colormap=colormap, max_words=max_words,
                                    width=WORDCLOUD_WIDTH // 2, height=WORDCLOUD_HEIGHT)
        if wordcloud is None:
            ax.text(0.5, 0.5, 'no distinctive terms', ha='center', va='center')
        else:
            ax.imshow(wordcloud, interpolation='bilinear')
        ax.axis('off')
        ax.set_title(str(group), fontsize=14, fontweight='bold')

    fig.suptitle(title, fontsize=16, fontweight='bold')
    fig.tight_layout()

    if output_path:
        _save_figure(fig, output_path)
    plt.close(fig)
    return fig
