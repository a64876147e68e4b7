# 1. load_data.py

import os

import pandas as pd

DEFAULT_DATA_PATH = os.environ.get("MXMH_DATA", "mxmh_survey_results.csv")


def _read_file(filepath):
    ext = os.path.splitext(filepath)[1].lower()
    if ext == ".xlsx":
        return pd.read_excel(filepath)
    try:
        return pd.read_csv(filepath)
    except UnicodeDecodeError:
        return pd.read_csv(filepath, encoding="ISO-8859-1")


def load_data(filepath=DEFAULT_DATA_PATH):
    try:
        df = _read_file(filepath)
    except FileNotFoundError:
        print(f"[ERROR] File not found: {filepath}. Please check the path.")
        return None
    except (OSError, ValueError) as e:
        print(f"[ERROR] An error occurred while loading data: {e}")
        return None

    df.columns = [str(col).strip() for col in df.columns]
    print(f"[INFO] Loaded data with shape: {df.shape}")
    return df


def describe_data(df):
    """
    First look at the survey: one row per column.

    Returns:
        pd.DataFrame: dtype, non-null count, missing count and unique count per column.
    """
    return pd.DataFrame({
        'dtype': df.dtypes.astype(str),
        'non_null': df.notna().sum(),
        'missing': df.isna().sum(),
        'unique': df.nunique(),
    })
