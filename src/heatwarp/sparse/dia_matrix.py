"""
Sparse matrices in diagonal (DIA) storage.

A DIA matrix stores only its non-zero diagonals. For a square matrix with
``num_rows`` rows and ``num_diags`` stored diagonals the layout is:

    data[k * num_rows + i]  ->  A[i, i + offsets[k]]

Entries whose column ``i + offsets[k]`` falls outside ``[0, num_cols)`` are
padding and must be zero. The SpMV kernel relies on this padding so that
boundary rows of a stencil naturally receive fewer contributions.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np
import warp as wp


class DIAMatrix:
    """
    Immutable, GPU-resident sparse matrix in diagonal format.

    The host copies passed to the constructor are uploaded once; afterwards the
    matrix only exposes read-only device arrays to be bound by kernels.
    """

    def __init__(
        self,
        num_rows: int,
        num_cols: int,
        data: np.ndarray | Sequence[float],
        offsets: np.ndarray | Sequence[int],
        device: wp.Device | str | None = None,
    ):
        if num_rows != num_cols:
            raise ValueError(f"DIAMatrix must be square, got {num_rows}x{num_cols}")
        if num_rows <= 0:
            raise ValueError(f"DIAMatrix needs at least one row, got {num_rows}")

        offsets_np = np.asarray(offsets, dtype=np.int32).reshape(-1)
        data_np = np.asarray(data, dtype=np.float32).reshape(-1)
        num_diags = offsets_np.shape[0]

        if data_np.shape[0] != num_diags * num_rows:
            raise ValueError(
                f"DIA data must hold num_diags * num_rows = {num_diags * num_rows} values, "
                f"got {data_np.shape[0]}"
            )
        if len(np.unique(offsets_np)) != num_diags:
            raise ValueError(f"DIA offsets must be unique, got {offsets_np.tolist()}")

        # Padding entries (column outside the matrix) must be zero
        cols = np.arange(num_rows)[None, :] + offsets_np[:, None]
        outside = (cols < 0) | (cols >= num_cols)
        if np.any(data_np.reshape(num_diags, num_rows)[outside] != 0.0):
            raise ValueError("DIA entries outside the matrix must be zero-padded")

        self._num_rows = int(num_rows)
        self._num_cols = int(num_cols)
        self._num_diags = int(num_diags)
        self._device = wp.get_device(device)

        self._data = wp.array(data_np, dtype=wp.float32, device=self._device)
        self._offsets = wp.array(offsets_np, dtype=wp.int32, device=self._device)

    @property
    def num_rows(self) -> int:
        return self._num_rows

    @property
    def num_cols(self) -> int:
        return self._num_cols

    @property
    def num_diags(self) -> int:
        return self._num_diags

    @property
    def shape(self) -> tuple[int, int]:
        return (self._num_rows, self._num_cols)

    @property
    def device(self) -> wp.Device:
        return self._device

    @property
    def data(self) -> wp.array:
        """Flat diagonal values, ``num_diags * num_rows`` entries."""
        return self._data

    @property
    def offsets(self) -> wp.array:
        """Signed diagonal offsets relative to the main diagonal."""
        return self._offsets

    @classmethod
    def from_dense(
        cls,
        dense: np.ndarray,
        offsets: Sequence[int],
        device: wp.Device | str | None = None,
    ) -> "DIAMatrix":
        """
        Reduces a dense square matrix to the given diagonals.

        Non-zero entries lying on diagonals not listed in ``offsets`` are
        rejected, since they would be silently dropped otherwise.
        """
        dense = np.asarray(dense, dtype=np.float32)
        if dense.ndim != 2 or dense.shape[0] != dense.shape[1]:
            raise ValueError(f"Expected a square 2D matrix, got shape {dense.shape}")

        m = dense.shape[0]
        offsets = [int(o) for o in offsets]
        data = np.zeros((len(offsets), m), dtype=np.float32)
        covered = np.zeros_like(dense, dtype=bool)

        rows = np.arange(m)
        for k, offset in enumerate(offsets):
            cols = rows + offset
            valid = (cols >= 0) & (cols < m)
            data[k, valid] = dense[rows[valid], cols[valid]]
            covered[rows[valid], cols[valid]] = True

        if np.any(dense[~covered] != 0.0):
            raise ValueError("Dense matrix has non-zero entries outside the requested diagonals")

        return cls(m, m, data.reshape(-1), offsets, device=device)

    @classmethod
    def from_stencil(
        cls,
        grid_size: int,
        center: float,
        neighbor: float,
        device: wp.Device | str | None = None,
    ) -> "DIAMatrix":
        """
        Builds the 5-point stencil matrix of an ``n x n`` grid in row-major order.

        The unknown ``(row, col)`` has index ``row * n + col``. The diagonals are
        ``[-n, -1, 0, 1, n]``; the ``±1`` couplings are cut where they would wrap
        across a grid row, and the ``±n`` couplings are zero-padded at the top and
        bottom edges.
        """
        n = int(grid_size)
        if n < 2:
            raise ValueError(f"grid_size must be >= 2, got {grid_size}")

        m = n * n
        offsets = [-n, -1, 0, 1, n]
        idx = np.arange(m)
        col_in_row = idx % n

        data = np.zeros((5, m), dtype=np.float32)
        # A[i, i - n]: the neighbour above exists for every row but the first
        data[0, idx >= n] = neighbor
        # A[i, i - 1]: no left neighbour in the first grid column
        data[1, col_in_row != 0] = neighbor
        data[2, :] = center
        # A[i, i + 1]: no right neighbour in the last grid column
        data[3, col_in_row != n - 1] = neighbor
        # A[i, i + n]: the neighbour below exists for every row but the last
        data[4, idx < m - n] = neighbor

        return cls(m, m, data.reshape(-1), offsets, device=device)

    @classmethod
    def identity(
        cls,
        num_rows: int,
        device: wp.Device | str | None = None,
        grid_size: int | None = None,
    ) -> "DIAMatrix":
        """
        A 5-diagonal descriptor whose only non-zero diagonal is the main one (= 1).

        The stencil offsets use ``grid_size`` (defaults to ``isqrt(num_rows)``, at least 2)
        so that the layout matches the heat-equation operators.
        """
        n = max(2, grid_size or int(np.sqrt(num_rows)))
        offsets = [-n, -1, 0, 1, n]
        data = np.zeros((5, num_rows), dtype=np.float32)
        data[2, :] = 1.0
        return cls(num_rows, num_rows, data.reshape(-1), offsets, device=device)

    def data_numpy(self) -> np.ndarray:
        """Host copy of the diagonals as a ``(num_diags, num_rows)`` array."""
        return self._data.numpy().reshape(self._num_diags, self._num_rows)

    def to_dense(self) -> np.ndarray:
        """Expands the matrix to a dense numpy array. Intended for tests and debugging."""
        data = self.data_numpy()
        offsets = self._offsets.numpy()
        dense = np.zeros(self.shape, dtype=np.float32)
        rows = np.arange(self._num_rows)
        for k, offset in enumerate(offsets):
            cols = rows + offset
            valid = (cols >= 0) & (cols < self._num_cols)
            dense[rows[valid], cols[valid]] += data[k, valid]
        return dense

    def __repr__(self) -> str:
        return (
            f"DIAMatrix(shape={self.shape}, num_diags={self._num_diags}, "
            f"offsets={self._offsets.numpy().tolist()})"
        )
