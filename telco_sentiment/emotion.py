"""
Lexicon Emotion Classifier
===========================
Naive Bayes emotion classifier built from a term -> emotion lexicon.

Each lexicon entry is treated as a one-term training document labelled with its
emotion; a review is then scored from the lexicon terms it contains. Reviews
without any lexicon term get no best-fit label.
"""

import numpy as np
import pandas as pd
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.naive_bayes import MultinomialNB

from .config import *


class EmotionClassifier:
    """
    Best-fit emotion per document from a fixed lexicon.
    """

    def __init__(self, lexicon, alpha=EMOTION_ALPHA):
        """
        Fit the classifier on the lexicon.

        Args:
            lexicon: DataFrame with 'term' and 'emotion' columns
            alpha: Additive smoothing
        """
        missing = {'term', 'emotion'} - set(lexicon.columns)
        if missing:
            raise ValueError(f"Emotion lexicon is missing column(s): {', '.join(sorted(missing))}")

        lexicon = lexicon.dropna(subset=['term', 'emotion'])
        if lexicon.empty:
            raise ValueError("Emotion lexicon is empty")

        terms = lexicon['term'].astype(str).str.lower().str.split().str.join(COMPOUND_SEPARATOR)
        self.vocabulary = sorted(terms.unique())
        self.vectorizer = CountVectorizer(
            vocabulary=self.vocabulary,
            token_pattern=r"(?u)\b\w+\b",
            lowercase=True
        )
        self.model = MultinomialNB(alpha=alpha, fit_prior=False)
        self.model.fit(self.vectorizer.transform(terms), lexicon['emotion'].astype(str))

    @property
    def emotions(self):
        return list(self.model.classes_)

    def score(self, texts):
        """
        Posterior probability of each emotion and the best fit.

        Args:
            texts: Iterable of lemma strings

        Returns:
            DataFrame with one column per emotion plus 'best_fit'
            (None when the text has no lexicon term)
        """
        texts = [t if isinstance(t, str) else '' for t in texts]
        if not texts:
            return pd.DataFrame(columns=self.emotions + ['best_fit'])

        counts = self.vectorizer.transform(texts)
        proba = self.model.predict_proba(counts)

        result = pd.DataFrame(proba, columns=self.emotions)
        hits = np.asarray(counts.sum(axis=1)).ravel()
        best = np.array(self.emotions, dtype=object)[proba.argmax(axis=1)]
        best[hits == 0] = None
        result['best_fit'] = pd.Series(best, dtype=object)
        return result

    def predict(self, texts):
        """Best-fit emotion label per text (None without lexicon terms)."""
        return [label if isinstance(label, str) else None for label in self.score(texts)['best_fit']]


def classify_emotions(df, classifier, text_col='lemmatized_text'):
    """
    Add the best-fit emotion of each review.

    Args:
        df: Review DataFrame
        classifier: EmotionClassifier
        text_col: Column with lemma strings

    Returns:
        New DataFrame with an 'emotion' column
    """
    if text_col not in df.columns:
        raise ValueError(f"Review table has no '{text_col}' column")

    df = df.copy()
    df['emotion'] = pd.Series(classifier.predict(df[text_col].tolist()), index=df.index, dtype=object)

    labelled = df['emotion'].notna().sum()
    print(f"✓ Assigned an emotion to {labelled} of {len(df)} reviews")
    return df
