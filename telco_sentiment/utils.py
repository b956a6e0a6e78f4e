"""
Utility Functions for the Telco Review Sentiment pipeline
==========================================================
Helper functions for table I/O and console formatting.
"""

from pathlib import Path

import pandas as pd


def read_table(path):
    """
    Read a tabular file, picking the reader from the file suffix.

    Args:
        path: Path to a .csv, .xlsx/.xls, .parquet or .json/.jsonl file

    Returns:
        DataFrame with the file contents
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == '.csv':
        return pd.read_csv(path)
    elif suffix in ['.xlsx', '.xls']:
        return pd.read_excel(path)
    elif suffix == '.parquet':
        return pd.read_parquet(path)
    elif suffix == '.jsonl':
        return pd.read_json(path, lines=True)
    elif suffix == '.json':
        return pd.read_json(path)

    raise ValueError(f"Unsupported table format '{suffix}' for {path}")


def save_table(df, output_path):
    """
    Save a DataFrame, picking the writer from the file suffix.

    Args:
        df: DataFrame to save
        output_path: Destination (.csv, .parquet or .xlsx)

    Returns:
        Path the table was written to
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_path.suffix == '.csv':
        df.to_csv(output_path, index=False)
    elif output_path.suffix == '.parquet':
        df.to_parquet(output_path, index=False)
    elif output_path.suffix == '.xlsx':
        export_to_excel(df, output_path)
    else:
        raise ValueError(f"Unsupported output format '{output_path.suffix}'")

    print(f"✓ Saved {len(df)} rows to: {output_path}")
    return output_path


def export_to_excel(df, filepath, sheet_name='Recensioni'):
    """
    Export DataFrame to Excel.

    Args:
        df: DataFrame to export
        filepath: Output file path
        sheet_name: Excel sheet name
    """
    with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)


def format_percentage(value):
    """Format value as percentage with 1 decimal place."""
    return f"{value:.1f}%"


def format_sentiment_score(value):
    """Format sentiment score with 3 decimal places."""
    return f"{value:+.3f}"


def truncate_text(text, max_length=50):
    """Truncate text to max length with ellipsis."""
    if len(text) > max_length:
        return text[:max_length-3] + "..."
    return text
