"""K-means over feature rows persisted in the tensor text encoding."""

from __future__ import annotations

from random import Random
from typing import List, Sequence

import numpy as np

import unitensor as ut

CENTERS = np.array(
    [
        [0.0, 0.0, 5.0, 5.0],
        [5.0, 5.0, 0.0, 0.0],
        [5.0, 0.0, 5.0, 0.0],
    ]
)


def make_rows(per_cluster: int = 20, seed: int = 0) -> List[str]:
    """Noisy points around ``CENTERS``, alternately stored dense and sparse."""
    rng = np.random.default_rng(seed)
    rows = []
    for center in CENTERS:
        points = center + rng.normal(scale=0.3, size=(per_cluster, center.shape[0]))
        for i, point in enumerate(points):
            rows.append(ut.from_numpy(point, sparse=bool(i % 2)).serialize())
    return rows


def load_features(rows: Sequence[str]) -> np.ndarray:
    return np.stack([ut.parse(row).to_dense_vector() for row in rows])


def save_centroids(centers: np.ndarray) -> List[str]:
    return [ut.dense(center).serialize() for center in centers]


def load_centroids(rows: Sequence[str]) -> np.ndarray:
    return np.stack([ut.parse(row).to_dense_vector() for row in rows])


def _farthest_point_init(x: np.ndarray, k: int, seed: int) -> np.ndarray:
    order = list(range(x.shape[0]))
    Random(seed).shuffle(order)
    chosen = [order[0]]
    for _ in range(1, k):
        dists = ((x[:, None, :] - x[chosen][None, :, :]) ** 2).sum(axis=2).min(axis=1)
        chosen.append(int(dists.argmax()))
    return x[chosen].copy()


def kmeans(x: np.ndarray, k: int = 3, iters: int = 10, seed: int = 0):
    centers = _farthest_point_init(x, k, seed)
    assignments = np.zeros(x.shape[0], dtype=np.int64)
    for _ in range(iters):
        dist_mat = ((x[:, None, :] - centers[None, :, :]) ** 2).sum(axis=2)
        assignments = dist_mat.argmin(axis=1)
        for j in range(k):
            members = x[assignments == j]
            if members.shape[0]:
                centers[j] = members.mean(axis=0)
    return centers, assignments


def main() -> None:  # pragma: no cover - example script
    x = load_features(make_rows())
    centers, assignments = kmeans(x)
    print("Cluster centers:")
    for row in save_centroids(centers):
        print(row)
    counts = [int((assignments == j).sum()) for j in range(len(centers))]
    print("Cluster counts:", counts)


if __name__ == "__main__":  # pragma: no cover - example script
    main()
