"""
Review Text Normalization Module
=================================
Cleans raw review text and merges known multi-word expressions into single tokens.

Key Functions:
- clean_text(): Lowercase, strip punctuation and digits, collapse whitespace
- apply_corrections(): Replace compound expressions from the correction table
- normalize_reviews(): Add 'clean_text' and 'normalized_text' columns
- scan_ngrams(): Frequent bigram-4gram candidates not covered by the corrections
"""

import re

import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer

from .config import *

APOSTROPHES = re.compile(r"[’'`´]")
PUNCTUATION = re.compile(r"[^\w\s]|_")
DIGITS = re.compile(r"\d+")
WHITESPACE = re.compile(r"\s+")


def clean_text(text, remove_punctuation=REMOVE_PUNCTUATION):
    """
    Normalize a raw review string.

    Args:
        text: Raw review text
        remove_punctuation: Whether punctuation is stripped

    Returns:
        Cleaned lowercase text; non-string or blank input is returned unchanged
    """
    if not isinstance(text, str) or not text.strip():
        return text

    text = text.lower()
    # l'azienda -> l azienda
    text = APOSTROPHES.sub(' ', text)
    if remove_punctuation:
        text = PUNCTUATION.sub(' ', text)
    text = DIGITS.sub(' ', text)
    return WHITESPACE.sub(' ', text).strip()


def _correction_pattern(phrase):
    return re.compile(r'(?<!\w)' + re.escape(phrase) + r'(?!\w)')


def apply_corrections(text, corrections):
    """
    Replace known compound expressions with their single-token form.

    Args:
        text: Cleaned text
        corrections: DataFrame with 'phrase' and 'replacement' columns

    Returns:
        Text with every whole-word occurrence of each phrase replaced
    """
    if not isinstance(text, str) or not text.strip() or corrections is None or len(corrections) == 0:
        return text

    # Longest phrases first so "servizio clienti business" wins over "servizio clienti"
    ordered = corrections.assign(_len=corrections['phrase'].str.len()).sort_values('_len', ascending=False)
    for phrase, replacement in zip(ordered['phrase'], ordered['replacement']):
        if replacement is None or pd.isna(replacement):
            replacement = phrase.replace(' ', COMPOUND_SEPARATOR)
        text = _correction_pattern(phrase).sub(lambda _: replacement, text)
    return text


def normalize_reviews(df, corrections=None, text_col='text', remove_punctuation=REMOVE_PUNCTUATION):
    """
    Clean review texts and merge compound expressions.

    Args:
        df: Review DataFrame
        corrections: Correction table (phrase -> replacement)
        text_col: Column with the raw review text
        remove_punctuation: Whether punctuation is stripped

    Returns:
        New DataFrame with 'clean_text' and 'normalized_text' columns
    """
    if text_col not in df.columns:
        raise ValueError(f"Review table has no '{text_col}' column")

    df = df.copy()
    df['clean_text'] = df[text_col].apply(clean_text, remove_punctuation=remove_punctuation)
    df['normalized_text'] = df['clean_text'].apply(apply_corrections, corrections=corrections)

    if corrections is not None and len(corrections) > 0:
        changed = (df['clean_text'] != df['normalized_text']).sum()
        print(f"✓ Merged compound expressions in {changed} reviews ({len(corrections)} corrections)")
    print(f"✓ Cleaned {len(df)} review texts")
    return df


def scan_ngrams(texts, ngram_range=NGRAM_RANGE, min_count=NGRAM_MIN_COUNT, top_n=NGRAM_TOP_N,
                known_phrases=None):
    """
    Find frequent n-grams that may be compound expressions worth adding to
    the correction table.

    Args:
        texts: Iterable of normalized texts
        ngram_range: (min_n, max_n) n-gram lengths
        min_count: Minimum total occurrences
        top_n: Maximum number of candidates returned
        known_phrases: Phrases already in the correction table

    Returns:
        DataFrame with 'ngram', 'n' and 'count', most frequent first
    """
    documents = [t for t in texts if isinstance(t, str) and t.strip()]
    columns = ['ngram', 'n', 'count']
    if not documents:
        return pd.DataFrame(columns=columns)

    vectorizer = CountVectorizer(
        ngram_range=ngram_range,
        token_pattern=r"(?u)\b\w+\b",
        lowercase=False
    )
    try:
        counts = vectorizer.fit_transform(documents)
    except ValueError:
        # every document shorter than the smallest n-gram
        return pd.DataFrame(columns=columns)

    candidates = pd.DataFrame({
        'ngram': vectorizer.get_feature_names_out(),
        'count': counts.sum(axis=0).A1,
    })
    candidates['n'] = candidates['ngram'].str.count(' ') + 1

    # n-grams that already contain a merged compound were handled by the corrections
    candidates = candidates[~candidates['ngram'].str.contains(COMPOUND_SEPARATOR, regex=False)]
    if known_phrases is not None:
        candidates = candidates[~candidates['ngram'].isin(set(known_phrases))]

    candidates = candidates[candidates['count'] >= min_count]
    candidates = candidates.sort_values(['count', 'ngram'], ascending=[False, True]).head(top_n)
    return candidates[columns].reset_index(drop=True)
