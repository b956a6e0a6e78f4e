"""
Configuration file for the Telco Review Sentiment pipeline
===========================================================
Contains column mappings, thresholds, resource names and other configurable parameters.
"""

# ==================== REVIEW TABLE ====================

REQUIRED_COLUMNS = ['company', 'date', 'author', 'rating', 'title', 'text']
ID_COLUMN = 'review_id'

# Italian headers found in exported review tables
COLUMN_ALIASES = {
    'azienda': 'company',
    'compagnia': 'company',
    'operatore': 'company',
    'data': 'date',
    'autore': 'author',
    'utente': 'author',
    'voto': 'rating',
    'valutazione': 'rating',
    'stelle': 'rating',
    'titolo': 'title',
    'testo': 'text',
    'recensione': 'text',
}

RATING_MIN = 1
RATING_MAX = 5


# ==================== TEXT NORMALIZATION ====================

REMOVE_PUNCTUATION = True
COMPOUND_SEPARATOR = '_'

# N-gram scan for compound expressions not yet in the correction table
NGRAM_RANGE = (2, 4)
NGRAM_MIN_COUNT = 5
NGRAM_TOP_N = 50


# ==================== LEMMATIZATION ====================

SPACY_MODEL = 'it_core_news_sm'
STOPWORD_LANGUAGE = 'italian'

# Universal POS tags kept in the lemmatized text
ALLOWED_POS = ('ADJ', 'NOUN', 'PROPN', 'VERB', 'ADV')

PIPE_BATCH_SIZE = 64


# ==================== FREQUENCY ANALYSIS ====================

MIN_DOCUMENT_LEMMAS = 5  # Shorter documents are left out of the term-document matrix
TOP_N_TERMS = 100


# ==================== SENTIMENT ====================

POLARITY_NEGATIVE = 'Negative'
POLARITY_NEUTRAL = 'Neutral'
POLARITY_POSITIVE = 'Positive'
POLARITY_CLASSES = [POLARITY_NEGATIVE, POLARITY_NEUTRAL, POLARITY_POSITIVE]

# Valence shifter window around each polarized lemma
SENTIMENT_WINDOW_BEFORE = 1
SENTIMENT_WINDOW_AFTER = 1
AMPLIFIER_WEIGHT = 0.8

# Scores within +/- tolerance of zero are Neutral (0.0 = exact zero only)
NEUTRAL_TOLERANCE = 0.0

# Rating buckets: [1, 2] -> Negative, (2, 3] -> Neutral, (3, 5] -> Positive
RATING_BINS = [1, 2, 3, 5]
RATING_LABELS = [POLARITY_NEGATIVE, POLARITY_NEUTRAL, POLARITY_POSITIVE]


# ==================== EMOTION ====================

EMOTION_ALPHA = 1.0
UNKNOWN_EMOTION = 'unknown'


# ==================== RESOURCE FILES ====================

DATA_DIR = 'data'
REVIEWS_FILE = 'recensioni.xlsx'

RESOURCE_DIR = 'resources'
STOPWORDS_FILE = 'stopwords.txt'
CORRECTIONS_FILE = 'correzioni.csv'
POLARITY_DICTIONARY_FILES = {
    'sentix': 'polarity_sentix.csv',
    'opener': 'polarity_opener.csv',
    'mal': 'polarity_mal.csv',
}
VALENCE_SHIFTERS_FILE = 'valence_shifters.csv'
EMOTION_LEXICON_FILE = 'emotion_lexicon.csv'


# ==================== VISUALIZATION SETTINGS ====================

COLOR_PALETTE_SENTIMENT = {
    'Positive': '#2ecc71',  # Green
    'Negative': '#e74c3c',  # Red
    'Neutral': '#95a5a6'    # Gray
}

CHART_HEIGHT = 500
CHART_WIDTH = 800

WORDCLOUD_WIDTH = 1200
WORDCLOUD_HEIGHT = 600
WORDCLOUD_MAX_WORDS = 100
WORDCLOUD_BACKGROUND = 'white'


# ==================== OUTPUT ====================

FIGURES_DIR = 'figures'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
