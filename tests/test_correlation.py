import numpy as np
import pandas as pd
import pytest

from correlation import (correlation_matrix, habit_health_correlations, health_by_genre,
                         health_by_hours, music_effects_summary, top_correlations)
from preprocess import HEALTH_COLUMNS, clean_data, encode_features


@pytest.fixture
def encoded_df(survey_df):
    return encode_features(clean_data(survey_df))


def test_correlation_matrix_is_square(encoded_df):
    corr = correlation_matrix(encoded_df)
    assert corr.shape[0] == corr.shape[1]
    assert np.allclose(np.diag(corr), 1)
    assert set(HEALTH_COLUMNS) <= set(corr.columns)


def test_habit_health_correlations_shape(encoded_df):
    corr = habit_health_correlations(encoded_df, method="spearman")
    assert list(corr.columns) == HEALTH_COLUMNS
    assert 'Hours per day' in corr.index
    assert 'Frequency [Metal]' in corr.index
    assert not set(HEALTH_COLUMNS) & set(corr.index)


def test_perfect_correlation_is_found(encoded_df):
    encoded_df['Anxiety'] = encoded_df['Hours per day'] * 0.5
    top = top_correlations(encoded_df, n=3)
    assert top.loc[0, 'feature'] == 'Hours per day'
    assert top.loc[0, 'condition'] == 'Anxiety'
    assert top.loc[0, 'correlation'] == pytest.approx(1.0)


def test_top_correlations_sorted_by_magnitude(encoded_df):
    top = top_correlations(encoded_df, n=8)
    assert len(top) == 8
    magnitudes = top['correlation'].abs().tolist()
    assert magnitudes == sorted(magnitudes, reverse=True)


def test_health_by_genre(encoded_df):
    summary = health_by_genre(encoded_df)
    assert summary['Respondents'].sum() == len(encoded_df)
    assert summary['Respondents'].is_monotonic_decreasing
    rock = encoded_df[encoded_df['Fav genre'] == 'Rock']
    assert summary.loc['Rock', 'Depression'] == pytest.approx(rock['Depression'].mean())


def test_music_effects_summary_encoded_and_raw(survey_df, encoded_df):
    raw = music_effects_summary(survey_df)
    encoded = music_effects_summary(encoded_df)
    assert raw.sum() == pytest.approx(1.0)
    assert raw.sort_index().equals(encoded.sort_index())


def test_health_by_hours():
    df = pd.DataFrame({
        'Hours per day': [0.5, 1.5, 3, 6, 12],
        'Anxiety': [1, 2, 3, 4, 5],
        'Depression': [0, 0, 0, 0, 10],
    })
    summary = health_by_hours(df)
    assert len(summary) == 5
    assert summary['Anxiety'].tolist() == [1, 2, 3, 4, 5]
    assert summary.index.name == 'Hours per day'
