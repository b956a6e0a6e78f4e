"""Shared fixtures: a small Italian review set and a fake tagging model."""

from collections import namedtuple

import pandas as pd
import pytest

from telco_sentiment.loader import PolarityDictionary, ResourceBundle, ValenceShifters

FakeToken = namedtuple('FakeToken', ['text', 'lemma_', 'pos_'])

# word -> (lemma, universal POS)
TAGGER_LEXICON = {
    'il': ('il', 'DET'), 'lo': ('il', 'DET'), 'la': ('il', 'DET'), 'una': ('uno', 'DET'),
    'questa': ('questo', 'DET'),
    'è': ('essere', 'AUX'), 'sono': ('essere', 'AUX'),
    'e': ('e', 'CCONJ'), 'ma': ('ma', 'CCONJ'), 'con': ('con', 'ADP'), 'di': ('di', 'ADP'),
    'mai': ('mai', 'ADV'), 'più': ('più', 'ADV'), 'molto': ('molto', 'ADV'),
    'poco': ('poco', 'ADV'), 'non': ('non', 'ADV'),
    'servizio_clienti': ('servizio_clienti', 'NOUN'), 'azienda': ('azienda', 'NOUN'),
    'operatore': ('operatore', 'NOUN'), 'fibra': ('fibra', 'NOUN'), 'prezzo': ('prezzo', 'NOUN'),
    'connessione': ('connessione', 'NOUN'), 'assistenza': ('assistenza', 'NOUN'),
    'offerta': ('offerta', 'NOUN'), 'rete': ('rete', 'NOUN'), 'linea': ('linea', 'NOUN'),
    'pessimo': ('pessimo', 'ADJ'), 'pessima': ('pessimo', 'ADJ'), 'ottimo': ('ottimo', 'ADJ'),
    'veloce': ('veloce', 'ADJ'), 'conveniente': ('conveniente', 'ADJ'), 'lenta': ('lento', 'ADJ'),
    'caro': ('caro', 'ADJ'), 'gentile': ('gentile', 'ADJ'), 'normale': ('normale', 'ADJ'),
    'buono': ('buono', 'ADJ'),
    'funziona': ('funzionare', 'VERB'),
    'tim': ('tim', 'PROPN'),
}


class FakeTagger:
    """Whitespace tokenizer with a lookup table standing in for a spaCy pipeline."""

    def __init__(self, lexicon=None):
        self.lexicon = lexicon or TAGGER_LEXICON

    def __call__(self, text):
        return [
            FakeToken(word, *self.lexicon.get(word, (word, 'NOUN')))
            for word in text.split()
        ]

    def pipe(self, texts, batch_size=None):
        for text in texts:
            yield self(text)


@pytest.fixture
def tagger():
    return FakeTagger()


@pytest.fixture
def stopwords():
    return {'il', 'uno', 'questo', 'essere', 'e', 'ma', 'con', 'di', 'mai', 'più'}


@pytest.fixture
def corrections():
    return pd.DataFrame({
        'phrase': ['servizio clienti'],
        'replacement': ['servizio_clienti'],
    })


@pytest.fixture
def dictionaries():
    return [
        PolarityDictionary('sentix', {
            'pessimo': -1.0, 'ottimo': 1.0, 'buono': 0.5, 'lento': -0.5, 'veloce': 0.5,
            'gentile': 0.6, 'caro': -0.4, 'conveniente': 0.6,
        }),
        PolarityDictionary('opener', {
            'pessimo': -0.75, 'ottimo': 0.8, 'lento': -0.6, 'veloce': 0.4, 'caro': -0.5,
        }),
        PolarityDictionary('mal', {
            'ottimo': 1.0, 'pessimo': -1.0, 'gentile': 0.5,
        }),
    ]


@pytest.fixture
def shifters():
    return ValenceShifters(negators={'non'}, amplifiers={'molto'}, deamplifiers={'poco'})


@pytest.fixture
def emotion_lexicon():
    return pd.DataFrame({
        'term': ['pessimo', 'lento', 'ottimo', 'gentile', 'caro', 'conveniente'],
        'emotion': ['anger', 'sadness', 'joy', 'trust', 'anger', 'joy'],
    })


@pytest.fixture
def reviews():
    return pd.DataFrame({
        'review_id': [1, 2, 3, 4, 5, 6],
        'company': ['TIM', 'TIM', 'Vodafone', 'Vodafone', 'WindTre', 'WindTre'],
        'date': pd.to_datetime(['2023-01-10', '2023-02-11', '2023-03-12',
                                '2023-04-13', '2023-05-14', '2023-06-15']),
        'author': ['Marco', 'Giulia', 'Luca', 'Sara', 'Paolo', 'Anna'],
        'rating': [1, 5, 2, 4, 3, 5],
        'title': ['Da evitare', 'Soddisfatto', 'Lento', 'Bene', 'Nella media', 'Consigliato'],
        'text': [
            "Il servizio clienti è pessimo, mai più questa azienda",
            "Ottimo operatore, la fibra è veloce e il prezzo è conveniente",
            "La connessione è lenta e il prezzo è caro, assistenza pessima",
            "Assistenza gentile e offerta conveniente, la rete funziona",
            "La linea funziona con una offerta normale",
            "Rete molto veloce, assistenza molto gentile e prezzo conveniente",
        ],
    })


@pytest.fixture
def resources(stopwords, corrections, dictionaries, shifters, emotion_lexicon, tagger):
    return ResourceBundle(
        stopwords=stopwords,
        corrections=corrections,
        dictionaries=dictionaries,
        shifters=shifters,
        emotion_lexicon=emotion_lexicon,
        nlp=tagger,
    )
