# 2. preprocess.py

import pandas as pd
from sklearn.preprocessing import StandardScaler

GENRES = [
    'Classical', 'Country', 'EDM', 'Folk', 'Gospel', 'Hip hop', 'Jazz', 'K pop',
    'Latin', 'Lofi', 'Metal', 'Pop', 'R&B', 'Rap', 'Rock', 'Video game music'
]
FREQUENCY_COLUMNS = [f'Frequency [{genre}]' for genre in GENRES]
HEALTH_COLUMNS = ['Anxiety', 'Depression', 'Insomnia', 'OCD']
BINARY_COLUMNS = ['While working', 'Instrumentalist', 'Composer', 'Exploratory', 'Foreign languages']
DROP_COLUMNS = ['Timestamp', 'Permissions']

FREQUENCY_SCALE = {'Never': 0, 'Rarely': 1, 'Sometimes': 2, 'Very frequently': 3}
YES_NO = {'Yes': 1, 'No': 0}
MUSIC_EFFECTS = {'Worsen': -1, 'No effect': 0, 'Improve': 1}

BPM_RANGE = (20, 300)
HOURS_RANGE = (0, 24)
SCORE_RANGE = (0, 10)


def clean_data(df):
    df = df.drop(columns=[col for col in DROP_COLUMNS if col in df.columns])
    n_raw = len(df)

    df = df.dropna().drop_duplicates()
    if 'BPM' in df.columns:
        df = df[df['BPM'].between(*BPM_RANGE)]
    if 'Hours per day' in df.columns:
        df = df[df['Hours per day'].between(*HOURS_RANGE)]
    health = [col for col in HEALTH_COLUMNS if col in df.columns]
    if health:
        df = df[df[health].apply(lambda s: s.between(*SCORE_RANGE)).all(axis=1)]

    df = df.reset_index(drop=True)
    if 'Age' in df.columns:
        df['Age'] = df['Age'].astype(int)

    print(f"[INFO] Dropped {n_raw - len(df)} of {n_raw} rows with missing or invalid values")
    return df


def _map_column(df, col, mapping):
    mapped = df[col].map(mapping)
    unknown = df.loc[mapped.isna(), col].unique()
    if len(unknown):
        raise ValueError(f"[ERROR] Unknown values in '{col}': {list(unknown)}")
    return mapped.astype(int)


def encode_features(df):
    df = df.copy()
    for col in FREQUENCY_COLUMNS:
        if col in df.columns:
            df[col] = _map_column(df, col, FREQUENCY_SCALE)
    for col in BINARY_COLUMNS:
        if col in df.columns:
            df[col] = _map_column(df, col, YES_NO)
    if 'Music effects' in df.columns:
        df['Music effects'] = _map_column(df, 'Music effects', MUSIC_EFFECTS)

    if 'Fav genre' in df.columns:
        # keep the original column for grouping, one-hot copies for clustering
        dummies = pd.get_dummies(df['Fav genre'], prefix='Fav', prefix_sep='_').astype(int)
        df = pd.concat([df, dummies], axis=1)
    return df


def select_features(df):
    features = ['Hours per day']
    features += [col for col in FREQUENCY_COLUMNS + BINARY_COLUMNS if col in df.columns]
    features += [col for col in df.columns if col.startswith('Fav_')]
    missing = [col for col in features if col not in df.columns]
    if missing:
        raise ValueError(f"[ERROR] Missing required features: {missing}")
    return features


def scale_features(df, features):
    scaler = StandardScaler()
    X_scaled = scaler.fit_transform(df[features])
    return X_scaled, scaler


def clean_and_preprocess(df):
    encoded = encode_features(clean_data(df))
    features = select_features(encoded)
    X_scaled, scaler = scale_features(encoded, features)
    print(f"[INFO] Prepared {X_scaled.shape[0]} respondents x {X_scaled.shape[1]} features")
    return encoded, X_scaled, scaler, features
