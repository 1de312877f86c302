"""Site generation for Voronoi diagrams."""

from typing import Optional

import numpy as np


def random_sites(count: int, half_width: float, seed: Optional[int] = None) -> np.ndarray:
    """
    Uniformly distributed sites inside the square [-half_width, half_width]^2.

    Args:
        count: Number of sites
        half_width: Half-width of the square
        seed: Random seed for reproducibility

    Returns:
        Array of [x, y] site coordinates
    """
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    rng = np.random.default_rng(seed)
    return rng.uniform(-half_width, half_width, size=(count, 2))


def jittered_grid(half_width: float, spacing: float, seed: Optional[int] = None) -> np.ndarray:
    """
    Generate a jittered square grid covering [-half_width, half_width]^2.

    Creates a regular grid and moves every point by up to 45% of the spacing
    in each axis, which avoids the ties a perfectly regular grid produces.

    Args:
        half_width: Half-width of the square
        spacing: Distance between grid points
        seed: Random seed for reproducibility

    Returns:
        Array of [x, y] site coordinates
    """
    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")
    rng = np.random.default_rng(seed)

    radius = spacing / 2  # square radius
    jittering = radius * 0.9  # max deviation

    axis = np.arange(-half_width + radius, half_width, spacing)
    xs, ys = np.meshgrid(axis, axis)
    points = np.column_stack([xs.ravel(), ys.ravel()])
    points += rng.uniform(-jittering, jittering, size=points.shape)
    return np.clip(np.round(points, 2), -half_width, half_width)
