"""
Dictionary-based Sentiment Scoring
===================================
Scores each lemmatized review against several polarity dictionaries, taking
negators, amplifiers and de-amplifiers around each polarized lemma into
account, then averages the dictionary scores and buckets the result.
"""

import math
from typing import Iterable, List, Sequence

import pandas as pd

from .config import *
from .loader import PolarityDictionary, ValenceShifters


def score_tokens(tokens: Sequence[str], dictionary: PolarityDictionary, shifters: ValenceShifters,
                 window_before: int = SENTIMENT_WINDOW_BEFORE,
                 window_after: int = SENTIMENT_WINDOW_AFTER,
                 amplifier_weight: float = AMPLIFIER_WEIGHT) -> float:
    """
    Polarity of a lemma sequence under one dictionary.

    For every polarized lemma the shifters within the window are counted. An
    odd number of negators flips the polarity, and a negated amplifier
    softens instead of strengthening. The summed polarity is divided by the
    square root of the sequence length.

    Args:
        tokens: Lemmas in document order
        dictionary: Polarity dictionary
        shifters: Valence shifter sets
        window_before: Lemmas looked at before the polarized lemma
        window_after: Lemmas looked at after the polarized lemma
        amplifier_weight: Weight of each amplifier/de-amplifier

    Returns:
        Document polarity (0.0 for an empty sequence)
    """
    if not tokens:
        return 0.0

    total = 0.0
    for i, token in enumerate(tokens):
        weight = dictionary.weights.get(token)
        if not weight:
            continue

        context = list(tokens[max(0, i - window_before):i]) + list(tokens[i + 1:i + 1 + window_after])
        negators = sum(t in shifters.negators for t in context)
        amplifiers = sum(t in shifters.amplifiers for t in context)
        deamplifiers = sum(t in shifters.deamplifiers for t in context)

        if negators % 2 == 1:
            weight = -weight
            deamplifiers += amplifiers
            amplifiers = 0

        modifier = max(0.0, 1.0 + amplifier_weight * (amplifiers - deamplifiers))
        total += weight * modifier

    return total / math.sqrt(len(tokens))


def average_score(scores: Iterable[float]) -> float:
    """Arithmetic mean of the per-dictionary scores."""
    scores = list(scores)
    if not scores:
        raise ValueError("Cannot average zero dictionary scores")
    return sum(scores) / len(scores)


def classify_polarity(score: float, tolerance: float = NEUTRAL_TOLERANCE) -> str:
    """
    Bucket a sentiment score.

    Args:
        score: Averaged sentiment score
        tolerance: Half-width of the Neutral band around zero (0.0 = exact zero only)

    Returns:
        'Negative', 'Neutral' or 'Positive'
    """
    if score is None or pd.isna(score):
        raise ValueError("Cannot classify a missing sentiment score")
    if score < -tolerance:
        return POLARITY_NEGATIVE
    if score > tolerance:
        return POLARITY_POSITIVE
    return POLARITY_NEUTRAL


def score_documents(df: pd.DataFrame, dictionaries: List[PolarityDictionary], shifters: ValenceShifters,
                    text_col: str = 'lemmatized_text', tolerance: float = NEUTRAL_TOLERANCE,
                    **window) -> pd.DataFrame:
    """
    Score every review with every dictionary.

    Args:
        df: Review DataFrame with lemmatized text
        dictionaries: Polarity dictionaries
        shifters: Valence shifter sets
        text_col: Column with space-separated lemmas
        tolerance: Neutral band half-width
        **window: window_before / window_after / amplifier_weight overrides

    Returns:
        New DataFrame with one 'sentiment_<name>' column per dictionary,
        'sentiment_score' (their mean) and 'polarity'
    """
    if not dictionaries:
        raise ValueError("At least one polarity dictionary is required")
    if text_col not in df.columns:
        raise ValueError(f"Review table has no '{text_col}' column")

    df = df.copy()
    token_lists = df[text_col].fillna('').str.split()

    score_cols = []
    for dictionary in dictionaries:
        col = f"sentiment_{dictionary.name}"
        df[col] = token_lists.apply(score_tokens, dictionary=dictionary, shifters=shifters, **window)
        score_cols.append(col)

    df['sentiment_score'] = [average_score(row) for row in df[score_cols].itertuples(index=False)]
    df['polarity'] = df['sentiment_score'].apply(classify_polarity, tolerance=tolerance)

    counts = df['polarity'].value_counts()
    print(f"✓ Scored {len(df)} reviews with {len(dictionaries)} dictionaries "
          f"({counts.get(POLARITY_POSITIVE, 0)} positive, {counts.get(POLARITY_NEUTRAL, 0)} neutral, "
          f"{counts.get(POLARITY_NEGATIVE, 0)} negative)")
    return df
