import math

import numpy as np


def gaussian(r: np.ndarray, sigma: float = 0.5) -> np.ndarray:
    """Normalized 1D Gaussian profile evaluated at distance ``r``."""
    return np.exp(-r * r / (2.0 * sigma * sigma)) / (math.sqrt(2.0 * math.pi) * sigma)


def gaussian_bump(
    grid_size: int,
    sigma: float = 0.5,
    noise_scale: float = 0.0,
    seed: int | None = None,
) -> np.ndarray:
    """
    Initial temperature field: a Gaussian centred on the unit square plus optional noise.

    Returns a flat, row-major float32 array of length ``grid_size**2``; the value of
    grid cell ``(row, col)`` is at index ``row * grid_size + col``.
    """
    if grid_size < 1:
        raise ValueError(f"grid_size must be >= 1, got {grid_size}")

    coords = np.arange(grid_size, dtype=np.float64) / grid_size - 0.5
    y, x = np.meshgrid(coords, coords, indexing="ij")
    field = gaussian(np.sqrt(x * x + y * y), sigma)

    if noise_scale > 0.0:
        rng = np.random.default_rng(seed)
        field = field + noise_scale * rng.uniform(-1.0, 1.0, size=field.shape)

    return field.astype(np.float32).reshape(-1)
