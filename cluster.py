# 4. cluster.py

import pandas as pd
from kneed import KneeLocator
from sklearn.cluster import KMeans
from sklearn.metrics import silhouette_score

from preprocess import FREQUENCY_COLUMNS, HEALTH_COLUMNS

RANDOM_STATE = 42
K_RANGE = range(2, 11)


def train_kmeans(X, k=4):
    model = KMeans(n_clusters=k, random_state=RANDOM_STATE, n_init=10)
    labels = model.fit_predict(X)
    score = silhouette_score(X, labels) if len(set(labels)) > 1 else -1
    return model, labels, score


def elbow_scores(X, k_range=range(1, 11)):
    inertias = {}
    for k in k_range:
        if k < 1 or k > len(X):
            continue
        model = KMeans(n_clusters=k, random_state=RANDOM_STATE, n_init=10)
        model.fit(X)
        inertias[k] = model.inertia_
    return inertias


def find_elbow(inertias):
    if len(inertias) < 3:
        return None
    ks = sorted(inertias)
    knee = KneeLocator(ks, [inertias[k] for k in ks], curve='convex', direction='decreasing')
    return int(knee.elbow) if knee.elbow is not None else None


def silhouette_scores(X, k_range=K_RANGE):
    scores = {}
    for k in k_range:
        # silhouette is only defined for 2 <= k <= n_samples - 1
        if k < 2 or k >= len(X):
            continue
        labels = KMeans(n_clusters=k, random_state=RANDOM_STATE, n_init=10).fit_predict(X)
        scores[k] = silhouette_score(X, labels)
    return scores


def select_k(X, k_range=K_RANGE, method="silhouette"):
    """
    Pick the number of clusters with the elbow or silhouette heuristic.

    Parameters:
        X (np.ndarray): Scaled feature array.
        k_range (iterable): Candidate cluster counts.
        method (str): 'silhouette' (highest score) or 'elbow' (knee of the inertia curve).

    Returns:
        tuple: (best_k, {k: inertia}, {k: silhouette}).
    """
    if method not in ("silhouette", "elbow"):
        raise ValueError(f"[ERROR] Unknown k selection method: {method}")

    sil = silhouette_scores(X, k_range)
    if not sil:
        raise ValueError("[ERROR] Not enough respondents to compare cluster counts")
    elbow = elbow_scores(X, [1] + list(k_range))

    # ties go to the smaller k
    best_k = max(sorted(sil), key=lambda k: sil[k])
    if method == "elbow":
        knee = find_elbow(elbow)
        if knee is not None and knee >= 2:
            best_k = knee
        else:
            print(f"[WARN] No elbow found, falling back to silhouette choice k={best_k}")

    print(f"[INFO] Selected k={best_k} by {method} (silhouette={sil.get(best_k, float('nan')):.3f})")
    return best_k, elbow, sil


def _top_genres(cluster_df, n=3):
    freq = [col for col in FREQUENCY_COLUMNS if col in cluster_df.columns]
    means = cluster_df[freq].mean().sort_values(ascending=False).head(n)
    return [col[len('Frequency ['):-1] for col in means.index]


def cluster_profiles(df, labels):
    df = df.assign(Cluster=labels)
    health = [col for col in HEALTH_COLUMNS if col in df.columns]
    rows = []
    for cluster_id, group in df.groupby('Cluster'):
        row = {
            'Cluster': cluster_id,
            'Respondents': len(group),
            'Share': len(group) / len(df),
            'Age': group['Age'].mean() if 'Age' in group else None,
            'Hours per day': group['Hours per day'].mean(),
        }
        row.update(group[health].mean().to_dict())
        if 'Fav genre' in group:
            row['Top fav genre'] = group['Fav genre'].mode().iloc[0]
        row['Top listened genres'] = ', '.join(_top_genres(group))
        rows.append(row)
    return pd.DataFrame(rows).set_index('Cluster')


def label_profiles(profiles):
    median_hours = profiles['Hours per day'].median()
    names = {}
    for cluster_id, row in profiles.iterrows():
        genres = row['Top listened genres'].split(', ')[:2]
        intensity = 'Heavy' if row['Hours per day'] > median_hours else 'Casual'
        names[cluster_id] = f"{intensity} {'/'.join(genres)} listeners"
    return pd.Series(names, name='Profile')
