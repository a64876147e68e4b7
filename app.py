# 7. app.py

import argparse
import os
import sys

import matplotlib

from load_data import DEFAULT_DATA_PATH, describe_data, load_data
from preprocess import HEALTH_COLUMNS, clean_and_preprocess
from correlation import (correlation_matrix, habit_health_correlations, health_by_genre,
                         health_by_hours, music_effects_summary, top_correlations)
from cluster import cluster_profiles, label_profiles, select_k, train_kmeans
from predict_batch import save_model


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Music & mental health listener profiles.")
    parser.add_argument("--data", default=DEFAULT_DATA_PATH, help="Survey CSV or Excel file")
    parser.add_argument("--k", type=int, default=None, help="Fix the number of clusters instead of selecting it")
    parser.add_argument("--k-method", choices=["silhouette", "elbow"], default="silhouette",
                        help="Heuristic used to select k (default: silhouette)")
    parser.add_argument("--k-min", type=int, default=2)
    parser.add_argument("--k-max", type=int, default=10)
    parser.add_argument("--output-dir", default=None, help="Save plots and tables here instead of showing them")
    parser.add_argument("--no-show", action="store_true", help="Do not open plot windows")
    args = parser.parse_args(argv)
    if args.k is not None and args.k < 1:
        parser.error("--k must be at least 1")
    return args


def run(args):
    # plotting lives in visualize; pick the backend before pyplot is imported
    if args.no_show:
        matplotlib.use("Agg")
    from visualize import (plot_cluster_profiles, plot_clusters, plot_correlation_heatmap,
                           plot_distributions, plot_elbow, plot_health_by_genre, plot_silhouette)

    out = args.output_dir
    if out:
        os.makedirs(out, exist_ok=True)

    def path(name):
        return os.path.join(out, name) if out else None

    df = load_data(args.data)
    if df is None:
        print("[ERROR] Data loading failed. Exiting.")
        return 1

    print(describe_data(df))
    df_clean, X_scaled, scaler, features = clean_and_preprocess(df)

    # correlations
    print("\n[INFO] Strongest habit / mental-health correlations:")
    print(top_correlations(df_clean, n=10, method="spearman"))
    print("\n[INFO] Music effects:")
    print(music_effects_summary(df_clean))
    print("\n[INFO] Mental health by listening hours:")
    print(health_by_hours(df_clean))

    if out or not args.no_show:
        plot_distributions(df_clean, ['Age', 'Hours per day', 'BPM'] + HEALTH_COLUMNS, save_path=path("distributions.png"))
        plot_correlation_heatmap(correlation_matrix(df_clean, method="spearman"), title='Correlation Matrix',
                                 save_path=path("correlation_matrix.png"))
        plot_correlation_heatmap(habit_health_correlations(df_clean, method="spearman"),
                                 save_path=path("habit_health_correlations.png"))
        plot_health_by_genre(health_by_genre(df_clean), save_path=path("health_by_genre.png"))

    # clustering
    k_range = range(args.k_min, args.k_max + 1)
    best_k, elbow, sil = select_k(X_scaled, k_range, method=args.k_method)
    k = args.k if args.k is not None else best_k
    model, labels, score = train_kmeans(X_scaled, k=k)
    print(f"[INFO] KMeans k={k} | Silhouette Score: {score:.3f}")

    profiles = cluster_profiles(df_clean, labels)
    profiles['Profile'] = label_profiles(profiles)
    print("\n[INFO] Listener profiles:")
    print(profiles.round(2).to_string())

    if out or not args.no_show:
        plot_elbow(elbow, best_k=best_k, save_path=path("elbow.png"))
        plot_silhouette(sil, best_k=best_k, save_path=path("silhouette.png"))
        plot_clusters(X_scaled, labels, save_path=path("clusters.png"))
        plot_cluster_profiles(profiles, save_path=path("cluster_profiles.png"))

    if out:
        df_clean.assign(Cluster=labels).to_csv(path("respondents_with_profiles.csv"), index=False)
        profiles.to_csv(path("cluster_profiles.csv"))
        save_model(model, scaler, features, path("listener_profiles.joblib"))
    return 0


def main(argv=None):
    return run(parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
