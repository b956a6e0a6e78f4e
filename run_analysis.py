#!/usr/bin/env python3
"""
Telco Review Sentiment Analysis - Batch Script

Runs the whole analysis over a table of Italian customer reviews: text cleaning,
compound merging, lemmatization, dictionary sentiment, emotion classification,
word clouds and the comparison report.

Usage:
    python run_analysis.py --reviews data/recensioni.xlsx --resources resources/
    python run_analysis.py --reviews data/recensioni.csv --figures figures/ --output exports/scored.parquet
    python run_analysis.py --help

Requirements:
    - spaCy Italian model: python -m spacy download it_core_news_sm
    - Resource files in --resources (see telco_sentiment/config.py for names)
"""

import argparse
import logging
import os
import sys

from telco_sentiment.config import *
from telco_sentiment.loader import load_resources, load_reviews
from telco_sentiment.pipeline import analysis_pipeline
from telco_sentiment.reporting import print_report
from telco_sentiment.utils import truncate_text


def setup_logging(level):
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT
    )


def print_ngram_candidates(candidates):
    """List n-grams worth adding to the correction table."""
    if candidates is None or candidates.empty:
        print("No frequent n-gram candidates found.")
        return

    print("\n🔎 Frequent n-grams not in the correction table:")
    for _, row in candidates.iterrows():
        print(f"  {row['count']:5d}  ({row['n']}-gram)  {truncate_text(row['ngram'], 60)}")


def main():
    parser = argparse.ArgumentParser(
        description="Sentiment and emotion analysis of Italian telco reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyse the default review file with the default resources
  python run_analysis.py

  # Save charts and the scored table
  python run_analysis.py --reviews data/recensioni.csv --figures figures/ --output exports/scored.xlsx

  # Look for compound expressions to add to the correction table
  python run_analysis.py --scan-ngrams
        """
    )

    parser.add_argument(
        "--reviews",
        type=str,
        default=os.path.join(DATA_DIR, REVIEWS_FILE),
        help=f"Review table (default: {os.path.join(DATA_DIR, REVIEWS_FILE)})"
    )

    parser.add_argument(
        "--resources",
        type=str,
        default=RESOURCE_DIR,
        help=f"Directory with stopwords, corrections, dictionaries and lexicon (default: {RESOURCE_DIR}/)"
    )

    parser.add_argument(
        "--model",
        type=str,
        default=SPACY_MODEL,
        help=f"spaCy model name or path (default: {SPACY_MODEL})"
    )

    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional: save the scored reviews (.csv, .parquet or .xlsx)"
    )

    parser.add_argument(
        "--figures",
        type=str,
        default=None,
        help="Optional: directory for word clouds and charts"
    )

    parser.add_argument(
        "--top-n",
        type=int,
        default=TOP_N_TERMS,
        help=f"Terms per frequency ranking (default: {TOP_N_TERMS})"
    )

    parser.add_argument(
        "--drop-empty",
        action="store_true",
        help="Drop reviews with no content lemma instead of stopping"
    )

    parser.add_argument(
        "--scan-ngrams",
        action="store_true",
        help="List frequent n-grams missing from the correction table"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    args = parser.parse_args()
    setup_logging(args.log_level)

    try:
        df_reviews = load_reviews(args.reviews)
        resources = load_resources(args.resources, model=args.model)

        df, report = analysis_pipeline(
            df_reviews,
            resources,
            drop_empty=args.drop_empty,
            scan=args.scan_ngrams,
            top_n=args.top_n,
            figures_dir=args.figures,
            output_path=args.output
        )

        print_report(report)
        if args.scan_ngrams:
            print_ngram_candidates(report.get('ngram_candidates'))

        print("\n✓ Analysis completed successfully!")

    except Exception as e:
        print(f"\n✗ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
