# 3. correlation.py

import pandas as pd

from preprocess import BINARY_COLUMNS, FREQUENCY_COLUMNS, HEALTH_COLUMNS

HABIT_COLUMNS = ['Hours per day', 'BPM'] + FREQUENCY_COLUMNS + BINARY_COLUMNS
HOUR_BINS = (0, 1, 2, 4, 8, 24)


def _present(df, columns):
    return [col for col in columns if col in df.columns]


def correlation_matrix(df, columns=None, method="pearson"):
    if columns is None:
        columns = _present(df, ['Age'] + HABIT_COLUMNS + ['Music effects'] + HEALTH_COLUMNS)
    return df[columns].corr(method=method)


def habit_health_correlations(df, method="pearson"):
    """
    Correlation of each listening habit with each mental-health score.

    Returns:
        pd.DataFrame: rows are habits, columns are Anxiety/Depression/Insomnia/OCD.
    """
    habits = _present(df, HABIT_COLUMNS)
    health = _present(df, HEALTH_COLUMNS)
    corr = df[habits + health].corr(method=method)
    return corr.loc[habits, health]


def top_correlations(df, n=10, method="pearson"):
    corr = habit_health_correlations(df, method=method)
    corr.index.name = 'feature'
    long = corr.reset_index().melt(id_vars='feature', var_name='condition', value_name='correlation')
    long = long.dropna(subset=['correlation'])
    order = long['correlation'].abs().sort_values(ascending=False).index
    return long.loc[order].head(n).reset_index(drop=True)


def health_by_genre(df):
    health = _present(df, HEALTH_COLUMNS)
    summary = df.groupby('Fav genre')[health].mean()
    summary['Respondents'] = df.groupby('Fav genre').size()
    return summary.sort_values('Respondents', ascending=False)


def music_effects_summary(df):
    effects = df['Music effects']
    if pd.api.types.is_numeric_dtype(effects):
        effects = effects.map({-1: 'Worsen', 0: 'No effect', 1: 'Improve'})
    return effects.value_counts(normalize=True).rename('Share')


def health_by_hours(df, bins=HOUR_BINS):
    bands = pd.cut(df['Hours per day'], bins=list(bins), include_lowest=True)
    summary = df.groupby(bands, observed=True)[_present(df, HEALTH_COLUMNS)].mean()
    summary.index = summary.index.astype(str)
    summary.index.name = 'Hours per day'
    return summary
