"""
Review and Resource Loader
===========================
Reads the review table and the auxiliary resources the pipeline depends on:
stopwords, compound-expression corrections, polarity dictionaries, valence
shifters, the emotion lexicon and the pre-trained tagging model.

Every loader fails fast with a descriptive message when a file or a column is missing.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

import nltk
import pandas as pd
import spacy

from .config import *
from .text_normalizer import clean_text
from .utils import read_table

logger = logging.getLogger(__name__)


@dataclass
class PolarityDictionary:
    """Term -> polarity weight mapping."""
    name: str
    weights: Dict[str, float]

    def __len__(self):
        return len(self.weights)


@dataclass
class ValenceShifters:
    """Terms that modify the polarity of nearby terms."""
    negators: Set[str] = field(default_factory=set)
    amplifiers: Set[str] = field(default_factory=set)
    deamplifiers: Set[str] = field(default_factory=set)

    @property
    def terms(self):
        return self.negators | self.amplifiers | self.deamplifiers


@dataclass
class ResourceBundle:
    """Everything the pipeline needs besides the review table."""
    stopwords: Set[str]
    corrections: pd.DataFrame
    dictionaries: List[PolarityDictionary]
    shifters: ValenceShifters
    emotion_lexicon: pd.DataFrame
    nlp: object = None


# lexicon-package style codes
SHIFTER_CODES = {
    '1': 'negator',
    '2': 'amplifier',
    '3': 'deamplifier',
}


def _require_file(path, description):
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"{description} not found: {path}")
    return path


def _require_columns(df, columns, source):
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(
            f"{source} is missing required column(s): {', '.join(missing)} "
            f"(found: {', '.join(map(str, df.columns))})"
        )


def _normalize_term(term):
    return COMPOUND_SEPARATOR.join(str(term).lower().split())


def normalize_columns(df):
    """
    Lowercase and strip column names, mapping Italian headers to the English ones.

    Args:
        df: Raw review DataFrame

    Returns:
        DataFrame with renamed columns
    """
    df = df.copy()
    df.columns = [str(col).strip().lower() for col in df.columns]
    renames = {
        col: COLUMN_ALIASES[col]
        for col in df.columns
        if col in COLUMN_ALIASES and COLUMN_ALIASES[col] not in df.columns
    }
    return df.rename(columns=renames)


def validate_reviews(df, source='Review table'):
    """
    Check the review table and coerce ratings and dates.

    Args:
        df: DataFrame with normalized column names
        source: Label used in error messages

    Returns:
        Validated copy with numeric 'rating', datetime 'date' and a 'review_id' column
    """
    _require_columns(df, REQUIRED_COLUMNS, source)
    df = df.copy()

    ratings = pd.to_numeric(df['rating'], errors='coerce')
    bad_rows = df.index[ratings.isna()].tolist()
    if bad_rows:
        raise ValueError(f"{source} has non-numeric ratings in rows: {bad_rows[:10]}")

    out_of_range = df.index[(ratings < RATING_MIN) | (ratings > RATING_MAX)].tolist()
    if out_of_range:
        raise ValueError(
            f"{source} has ratings outside [{RATING_MIN}, {RATING_MAX}] in rows: {out_of_range[:10]}"
        )
    df['rating'] = ratings

    if not pd.api.types.is_datetime64_any_dtype(df['date']):
        dates = pd.to_datetime(df['date'], errors='coerce', dayfirst=True)
        unparsed = int(dates.isna().sum() - df['date'].isna().sum())
        if unparsed > 0:
            logger.warning(f"{unparsed} review dates could not be parsed and were set to NaT")
        df['date'] = dates

    if ID_COLUMN not in df.columns:
        df.insert(0, ID_COLUMN, range(len(df)))
    elif df[ID_COLUMN].duplicated().any():
        raise ValueError(f"{source} has duplicated '{ID_COLUMN}' values")

    return df


def load_reviews(path):
    """
    Load the review table.

    Args:
        path: Path to the review file (.csv, .xlsx, .parquet, .json)

    Returns:
        Validated review DataFrame
    """
    path = _require_file(path, "Review file")
    print(f"Loading reviews from {path}...")

    df = normalize_columns(read_table(path))
    df = validate_reviews(df, source=str(path))

    print(f"✓ Loaded {len(df):,} reviews for {df['company'].nunique()} companies")
    return df


def load_stopwords(path=None, include_base=True, language=STOPWORD_LANGUAGE):
    """
    Build the stopword set from the NLTK list plus user additions.

    Args:
        path: Optional text file with one extra stopword per line
        include_base: Whether to start from the NLTK stopword list
        language: NLTK stopword language

    Returns:
        Set of lowercased stopwords
    """
    words = set()

    if include_base:
        try:
            nltk.data.find('corpora/stopwords')
        except LookupError:
            logger.info("Downloading NLTK stopwords corpus")
            if not nltk.download('stopwords', quiet=True):
                raise FileNotFoundError(
                    "NLTK 'stopwords' corpus not found and could not be downloaded; "
                    "install it with: python -m nltk.downloader stopwords"
                )
        from nltk.corpus import stopwords
        words.update(w.lower() for w in stopwords.words(language))

    if path is not None:
        path = _require_file(path, "Stopword file")
        with open(path, 'r', encoding='utf-8') as f:
            extra = {line.strip().lower() for line in f if line.strip() and not line.startswith('#')}
        words.update(extra)
        logger.info(f"Added {len(extra)} custom stopwords from {path}")

    return words


def load_correction_table(path):
    """
    Load the compound-expression correction table.

    Args:
        path: CSV with 'phrase' and optional 'replacement' columns

    Returns:
        DataFrame with 'phrase' and 'replacement' (missing replacements filled
        with the underscore-joined phrase)
    """
    path = _require_file(path, "Correction table")
    df = pd.read_csv(path)
    df.columns = [str(col).strip().lower() for col in df.columns]
    _require_columns(df, ['phrase'], str(path))

    if 'replacement' not in df.columns:
        df['replacement'] = None

    df = df[['phrase', 'replacement']].dropna(subset=['phrase']).copy()
    # phrases are matched against cleaned text, so clean them the same way
    df['phrase'] = df['phrase'].astype(str).map(clean_text).str.strip()
    empty = df['phrase'].str.len() == 0
    if empty.any():
        logger.warning(f"Ignoring {int(empty.sum())} corrections with no words left after cleaning in {path}")
        df = df[~empty].copy()
    df['replacement'] = df['replacement'].where(
        df['replacement'].notna(),
        df['phrase'].str.replace(' ', COMPOUND_SEPARATOR, regex=False)
    )
    return df.drop_duplicates(subset=['phrase']).reset_index(drop=True)


def load_polarity_dictionary(path, name=None):
    """
    Load a polarity dictionary.

    Args:
        path: CSV with 'term' and 'polarity' columns
        name: Dictionary name (defaults to the file stem)

    Returns:
        PolarityDictionary
    """
    path = _require_file(path, "Polarity dictionary")
    df = pd.read_csv(path)
    df.columns = [str(col).strip().lower() for col in df.columns]
    _require_columns(df, ['term', 'polarity'], str(path))

    df = df.dropna(subset=['term', 'polarity'])
    weights = dict(zip(df['term'].map(_normalize_term), df['polarity'].astype(float)))
    return PolarityDictionary(name=name or path.stem, weights=weights)


def load_valence_shifters(path):
    """
    Load negators, amplifiers and de-amplifiers.

    Args:
        path: CSV with 'term' and 'type' columns; type is one of
              negator/amplifier/deamplifier or the codes 1/2/3

    Returns:
        ValenceShifters
    """
    path = _require_file(path, "Valence shifter table")
    df = pd.read_csv(path, dtype=str)
    df.columns = [str(col).strip().lower() for col in df.columns]
    _require_columns(df, ['term', 'type'], str(path))

    df = df.dropna(subset=['term', 'type'])
    kinds = df['type'].str.strip().str.lower().replace(SHIFTER_CODES)
    terms = df['term'].map(_normalize_term)

    shifters = ValenceShifters(
        negators=set(terms[kinds == 'negator']),
        amplifiers=set(terms[kinds == 'amplifier']),
        deamplifiers=set(terms[kinds == 'deamplifier']),
    )
    ignored = int((~kinds.isin(['negator', 'amplifier', 'deamplifier'])).sum())
    if ignored:
        logger.info(f"Ignored {ignored} valence shifters of other types in {path}")
    return shifters


def load_emotion_lexicon(path):
    """
    Load the term -> emotion lexicon.

    Accepts a long table ('term', 'emotion') or a wide table with one 0/1
    column per emotion (NRC style), which is melted to the long form.

    Args:
        path: CSV lexicon file

    Returns:
        DataFrame with 'term' and 'emotion' columns
    """
    path = _require_file(path, "Emotion lexicon")
    df = pd.read_csv(path)
    df.columns = [str(col).strip().lower() for col in df.columns]
    _require_columns(df, ['term'], str(path))

    if 'emotion' not in df.columns:
        emotion_cols = [col for col in df.columns if col != 'term']
        if not emotion_cols:
            raise ValueError(f"{path} has neither an 'emotion' column nor emotion indicator columns")
        df = df.melt(id_vars='term', value_vars=emotion_cols, var_name='emotion', value_name='flag')
        df = df[pd.to_numeric(df['flag'], errors='coerce').fillna(0) > 0]

    df = df.dropna(subset=['term', 'emotion'])
    lexicon = pd.DataFrame({
        'term': df['term'].map(_normalize_term),
        'emotion': df['emotion'].astype(str).str.strip().str.lower(),
    })
    return lexicon.drop_duplicates().reset_index(drop=True)


def load_language_model(name_or_path=SPACY_MODEL):
    """
    Load the pre-trained tagging/lemmatization model.

    Args:
        name_or_path: Installed spaCy package name or path to a serialized model directory

    Returns:
        spaCy Language object
    """
    candidate = Path(name_or_path)
    if candidate.is_absolute() or len(candidate.parts) > 1:
        _require_file(candidate, "Language model")

    print(f"Loading language model: {name_or_path}")
    try:
        return spacy.load(name_or_path, disable=['parser', 'ner'])
    except OSError as e:
        raise FileNotFoundError(
            f"Language model '{name_or_path}' is not available. "
            f"Install it with: python -m spacy download {SPACY_MODEL}"
        ) from e


def load_resources(resource_dir=RESOURCE_DIR, model=SPACY_MODEL, nlp=None,
                   include_base_stopwords=True):
    """
    Load every auxiliary resource from a directory.

    Args:
        resource_dir: Directory holding the files named in config
        model: spaCy model name or path (ignored when nlp is given)
        nlp: Already loaded tagging model
        include_base_stopwords: Whether to start from the NLTK stopword list

    Returns:
        ResourceBundle
    """
    resource_dir = Path(resource_dir)
    if not resource_dir.is_dir():
        raise FileNotFoundError(f"Resource directory not found: {resource_dir}")

    print(f"Loading resources from {resource_dir}...")

    stopword_path = resource_dir / STOPWORDS_FILE
    stopwords = load_stopwords(
        stopword_path if stopword_path.exists() else None,
        include_base=include_base_stopwords
    )
    corrections = load_correction_table(resource_dir / CORRECTIONS_FILE)
    dictionaries = [
        load_polarity_dictionary(resource_dir / filename, name=name)
        for name, filename in POLARITY_DICTIONARY_FILES.items()
    ]
    shifters = load_valence_shifters(resource_dir / VALENCE_SHIFTERS_FILE)
    emotion_lexicon = load_emotion_lexicon(resource_dir / EMOTION_LEXICON_FILE)

    if nlp is None:
        nlp = load_language_model(model)

    print(f"✓ {len(stopwords)} stopwords, {len(corrections)} corrections, "
          f"{len(dictionaries)} polarity dictionaries, {len(emotion_lexicon)} emotion lexicon entries")

    return ResourceBundle(
        stopwords=stopwords,
        corrections=corrections,
        dictionaries=dictionaries,
        shifters=shifters,
        emotion_lexicon=emotion_lexicon,
        nlp=nlp,
    )
