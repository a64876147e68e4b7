import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from preprocess import BINARY_COLUMNS, FREQUENCY_COLUMNS, HEALTH_COLUMNS

FREQUENCY_VALUES = ['Never', 'Rarely', 'Sometimes', 'Very frequently']


def make_survey(n=80, seed=0):
    rng = np.random.default_rng(seed)
    data = {
        'Timestamp': pd.date_range('2022-08-27', periods=n, freq='D').astype(str),
        'Age': rng.integers(15, 70, n).astype(float),
        'Primary streaming service': rng.choice(['Spotify', 'YouTube Music', 'Apple Music'], n),
        'Hours per day': np.round(rng.uniform(0.5, 12, n), 1),
    }
    for col in BINARY_COLUMNS:
        data[col] = rng.choice(['Yes', 'No'], n)
    data['Fav genre'] = rng.choice(['Rock', 'Pop', 'Metal', 'Classical', 'Hip hop'], n)
    data['BPM'] = rng.integers(60, 200, n).astype(float)
    for col in FREQUENCY_COLUMNS:
        data[col] = rng.choice(FREQUENCY_VALUES, n)
    for col in HEALTH_COLUMNS:
        data[col] = rng.integers(0, 11, n).astype(float)
    data['Music effects'] = rng.choice(['Improve', 'No effect', 'Worsen'], n, p=[0.7, 0.25, 0.05])
    data['Permissions'] = 'I understand.'
    return pd.DataFrame(data)


@pytest.fixture
def survey_df():
    return make_survey()


@pytest.fixture
def dirty_survey_df():
    df = make_survey()
    bad = make_survey(n=3, seed=1)
    bad.loc[0, 'BPM'] = np.nan
    bad.loc[1, 'BPM'] = 999999999
    bad.loc[2, 'Hours per day'] = 30
    return pd.concat([df, bad], ignore_index=True)


@pytest.fixture
def survey_csv(tmp_path, survey_df):
    path = tmp_path / "survey.csv"
    survey_df.to_csv(path, index=False)
    return str(path)
