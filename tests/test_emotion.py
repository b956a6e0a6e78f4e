"""Tests for the lexicon emotion classifier."""

import numpy as np
import pandas as pd
import pytest

from telco_sentiment.emotion import EmotionClassifier, classify_emotions


@pytest.fixture
def classifier(emotion_lexicon):
    return EmotionClassifier(emotion_lexicon)


class TestEmotionClassifier:
    """Test fitting and scoring."""

    def test_emotions_sorted(self, classifier):
        """Classes follow the sorted label order."""
        assert classifier.emotions == ['anger', 'joy', 'sadness', 'trust']

    def test_single_term_documents(self, classifier):
        """A lone lexicon term gets its own emotion."""
        assert classifier.predict(["pessimo", "lento", "gentile"]) == ['anger', 'sadness', 'trust']

    def test_majority_emotion_wins(self, classifier):
        """Several anger terms outweigh one sadness term."""
        assert classifier.predict(["connessione lento prezzo caro assistenza pessimo"]) == ['anger']

    def test_no_lexicon_term_has_no_label(self, classifier):
        """Texts without lexicon terms get None."""
        assert classifier.predict(["linea funzionare offerta normale", "", None]) == [None, None, None]

    def test_probabilities(self, classifier):
        """Every row of posteriors sums to one."""
        scores = classifier.score(["pessimo azienda", "ottimo gentile"])
        assert scores.columns.tolist() == ['anger', 'joy', 'sadness', 'trust', 'best_fit']
        np.testing.assert_allclose(scores[classifier.emotions].sum(axis=1), 1.0)

    def test_tie_goes_to_first_class(self):
        """Equal posteriors resolve to the first emotion in sorted order."""
        lexicon = pd.DataFrame({'term': ['aaa', 'bbb'], 'emotion': ['sadness', 'anger']})
        assert EmotionClassifier(lexicon).predict(["aaa bbb"]) == ['anger']

    def test_compound_terms(self):
        """Multi-word lexicon entries match merged compounds."""
        lexicon = pd.DataFrame({'term': ['servizio clienti', 'ottimo'], 'emotion': ['anger', 'joy']})
        classifier = EmotionClassifier(lexicon)
        assert 'servizio_clienti' in classifier.vocabulary
        assert classifier.predict(["servizio_clienti lento"]) == ['anger']

    def test_empty_input(self, classifier):
        """No texts gives an empty frame."""
        assert classifier.score([]).empty

    def test_missing_columns(self):
        """The lexicon needs term and emotion columns."""
        with pytest.raises(ValueError, match="emotion"):
            EmotionClassifier(pd.DataFrame({'term': ['ottimo']}))

    def test_empty_lexicon(self):
        """An empty lexicon cannot be fitted."""
        with pytest.raises(ValueError, match="empty"):
            EmotionClassifier(pd.DataFrame({'term': [], 'emotion': []}))


class TestClassifyEmotions:
    """Test the review-level emotion step."""

    def test_adds_emotion_column(self, classifier):
        """Each review gets its best-fit emotion."""
        df = pd.DataFrame({'lemmatized_text': ["servizio_clienti pessimo azienda", "linea normale"]})
        result = classify_emotions(df, classifier)

        assert result.loc[0, 'emotion'] == 'anger'
        assert result['emotion'].dtype == object
        assert result.loc[1, 'emotion'] is None
        assert 'emotion' not in df.columns

    def test_missing_text_column(self, classifier):
        """The lemma column must exist."""
        with pytest.raises(ValueError, match="lemmatized_text"):
            classify_emotions(pd.DataFrame({'text': ["ciao"]}), classifier)
