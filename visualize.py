# 5. visualize.py

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from sklearn.decomposition import PCA
import pandas as pd

from preprocess import HEALTH_COLUMNS


def _finish(save_path):
    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=300)
        plt.close()
        print(f"[INFO] Plot saved to: {save_path}")
    else:
        plt.show()


def plot_distributions(df, columns, save_path=None):
    columns = [col for col in columns if col in df.columns]
    n_rows = max(int(np.ceil(len(columns) / 3)), 1)
    fig, axes = plt.subplots(nrows=n_rows, ncols=3, figsize=(15, 4 * n_rows))
    axes = np.array(axes).reshape(-1)
    for ax, col in zip(axes, columns):
        sns.histplot(df[col], bins=20, kde=True, ax=ax)
        ax.set_title(f'Distribution of {col}')
        ax.set_ylabel('Respondents')
    for ax in axes[len(columns):]:
        ax.axis('off')
    _finish(save_path)


def plot_correlation_heatmap(corr, title='Listening Habits vs Mental Health', save_path=None):
    width = max(8, 0.6 * corr.shape[1] + 4)
    height = max(6, 0.4 * corr.shape[0] + 2)
    plt.figure(figsize=(width, height))
    sns.heatmap(corr, annot=True, fmt='.2f', cmap='coolwarm', center=0, vmin=-1, vmax=1,
                annot_kws={'size': 7})
    plt.title(title)
    _finish(save_path)


def plot_health_by_genre(summary, save_path=None):
    health = [col for col in HEALTH_COLUMNS if col in summary.columns]
    long = summary[health].reset_index().melt(id_vars='Fav genre', var_name='Condition', value_name='Mean score')
    plt.figure(figsize=(12, 6))
    sns.barplot(data=long, x='Fav genre', y='Mean score', hue='Condition', palette='Set2')
    plt.xticks(rotation=45, ha='right')
    plt.title('Mean Mental-Health Scores by Favourite Genre')
    plt.xlabel('Favourite genre')
    _finish(save_path)


def plot_elbow(elbow, best_k=None, save_path=None):
    plt.figure(figsize=(8, 5))
    plt.plot(list(elbow.keys()), list(elbow.values()), marker='o')
    if best_k is not None:
        plt.axvline(x=best_k, color='red', linestyle='--', label=f'k={best_k}')
        plt.legend()
    plt.title('Elbow Method')
    plt.xlabel('Number of Clusters (k)')
    plt.ylabel('Inertia')
    plt.grid(True, alpha=0.3)
    _finish(save_path)


def plot_silhouette(scores, best_k=None, save_path=None):
    plt.figure(figsize=(8, 5))
    plt.plot(list(scores.keys()), list(scores.values()), marker='o', color='green')
    if best_k is not None:
        plt.axvline(x=best_k, color='red', linestyle='--', label=f'Best k={best_k}')
        plt.legend()
    plt.title('Silhouette Score by Number of Clusters')
    plt.xlabel('Number of Clusters (k)')
    plt.ylabel('Silhouette Score')
    plt.grid(True, alpha=0.3)
    _finish(save_path)


def plot_clusters(X_scaled, labels, save_path=None):
    """
    Plot clusters using PCA-reduced 2D representation.

    Parameters:
        X_scaled (np.ndarray): Scaled feature array.
        labels (list or np.ndarray): Cluster labels.
        save_path (str): Optional path to save the plot. If None, displays the plot.
    """
    pca = PCA(n_components=2)
    components = pca.fit_transform(X_scaled)
    df_plot = pd.DataFrame(data=components, columns=['PC1', 'PC2'])
    df_plot['Cluster'] = np.asarray(labels).astype(str)
    explained = pca.explained_variance_ratio_ * 100

    plt.figure(figsize=(8, 6))
    sns.scatterplot(x='PC1', y='PC2', hue='Cluster', data=df_plot, palette='Set2', s=50)
    plt.title('Listener Profiles (KMeans)')
    plt.xlabel(f'Principal Component 1 ({explained[0]:.1f}%)')
    plt.ylabel(f'Principal Component 2 ({explained[1]:.1f}%)')
    _finish(save_path)


def plot_cluster_profiles(profiles, save_path=None):
    health = [col for col in HEALTH_COLUMNS if col in profiles.columns]
    long = profiles[health].reset_index().melt(id_vars='Cluster', var_name='Condition', value_name='Mean score')
    long['Cluster'] = long['Cluster'].astype(str)
    plt.figure(figsize=(9, 5))
    sns.barplot(data=long, x='Cluster', y='Mean score', hue='Condition', palette='Set2')
    plt.title('Mental-Health Scores by Listener Profile')
    _finish(save_path)
