"""
Lemmatization Module
=====================
Part-of-speech tags and lemmatizes normalized review text with a pre-trained
model, then rebuilds a 'lemmatized_text' field from content-bearing lemmas.
"""

import logging

import pandas as pd

from .config import *

logger = logging.getLogger(__name__)

TOKEN_COLUMNS = [ID_COLUMN, 'position', 'token', 'lemma', 'pos', 'is_stopword']


def tag_documents(texts, review_ids, nlp, stopwords, batch_size=PIPE_BATCH_SIZE):
    """
    Run the tagging model over the documents.

    Args:
        texts: List of normalized texts
        review_ids: Document ids, aligned with texts
        nlp: Model exposing pipe(); tokens need .text, .lemma_ and .pos_
        stopwords: Set of lowercased stopwords
        batch_size: Documents per model batch

    Returns:
        DataFrame with one row per token (review_id, position, token, lemma, pos, is_stopword)
    """
    texts = list(texts)
    review_ids = list(review_ids)
    if len(texts) != len(review_ids):
        raise ValueError(f"Got {len(texts)} texts for {len(review_ids)} review ids")

    rows = []
    docs = nlp.pipe([t if isinstance(t, str) else '' for t in texts], batch_size=batch_size)
    for review_id, doc in zip(review_ids, docs):
        position = 0
        for token in doc:
            if not token.text.strip():
                continue
            lemma = (token.lemma_ or token.text).lower()
            word = token.text.lower()
            rows.append((
                review_id,
                position,
                token.text,
                lemma,
                token.pos_,
                word in stopwords or lemma in stopwords,
            ))
            position += 1

    tokens = pd.DataFrame(rows, columns=TOKEN_COLUMNS)
    print(f"✓ Tagged {len(texts)} documents ({len(tokens)} tokens)")
    return tokens


def filter_content_tokens(tokens, allowed_pos=ALLOWED_POS):
    """
    Keep tokens with an allowed part of speech that are not stopwords.

    Args:
        tokens: Token table from tag_documents()
        allowed_pos: POS tags to keep

    Returns:
        Filtered token table in original order
    """
    mask = tokens['pos'].isin(allowed_pos) & ~tokens['is_stopword'].astype(bool)
    return tokens[mask].sort_values([ID_COLUMN, 'position'], kind='stable')


def reconstruct_lemmatized_text(tokens, review_ids, allowed_pos=ALLOWED_POS, drop_empty=False):
    """
    Concatenate the surviving lemmas of each document.

    Args:
        tokens: Token table from tag_documents()
        review_ids: All document ids, in output order
        allowed_pos: POS tags to keep
        drop_empty: Omit documents with no surviving lemma instead of failing

    Returns:
        Series of lemmatized texts indexed by review id
    """
    kept = filter_content_tokens(tokens, allowed_pos)
    joined = kept.groupby(ID_COLUMN, sort=False)['lemma'].apply(' '.join)
    lemmatized = joined.reindex(list(review_ids))

    empty_ids = lemmatized.index[lemmatized.isna()].tolist()
    if empty_ids:
        if not drop_empty:
            raise ValueError(
                f"{len(empty_ids)} document(s) have zero tokens after POS and stopword "
                f"filtering (review ids: {empty_ids[:10]})"
            )
        logger.warning(f"Dropping {len(empty_ids)} documents with zero tokens after filtering")
        lemmatized = lemmatized.dropna()

    lemmatized.index.name = ID_COLUMN
    lemmatized.name = 'lemmatized_text'
    return lemmatized


def lemmatize_reviews(df, nlp, stopwords, text_col='normalized_text',
                      allowed_pos=ALLOWED_POS, drop_empty=False):
    """
    Lemmatize review texts.

    Args:
        df: Review DataFrame with normalized text
        nlp: Tagging model
        stopwords: Set of lowercased stopwords
        text_col: Column to lemmatize
        allowed_pos: POS tags kept in the lemmatized text
        drop_empty: Drop documents with no surviving lemma instead of failing

    Returns:
        Tuple of (new DataFrame with 'lemmatized_text' and 'n_lemmas', token table)
    """
    if text_col not in df.columns:
        raise ValueError(f"Review table has no '{text_col}' column")

    tokens = tag_documents(df[text_col].tolist(), df[ID_COLUMN].tolist(), nlp, stopwords)
    lemmatized = reconstruct_lemmatized_text(tokens, df[ID_COLUMN], allowed_pos, drop_empty)

    df = df[df[ID_COLUMN].isin(lemmatized.index)].copy()
    df['lemmatized_text'] = df[ID_COLUMN].map(lemmatized)
    df['n_lemmas'] = df['lemmatized_text'].str.split().str.len()

    print(f"✓ Lemmatized {len(df)} reviews (avg {df['n_lemmas'].mean():.1f} lemmas per review)")
    return df, tokens
