import os
from typing import Any

import h5py
import numpy as np

SNAPSHOT_PREFIX = "step_"


class HDF5Reader:
    """
    Read-only access to heat logs written through :class:`SimulationLogger`.

    Snapshots live in groups named ``step_XXXXXX``; the run parameters are in
    the ``config`` group.
    """

    def __init__(self, filepath: str):
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Log file not found: {filepath}")
        self.filepath = filepath
        self._file = h5py.File(filepath, "r")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def _node(self, path: str) -> h5py.Group | h5py.Dataset:
        if path in ("/", "."):
            return self._file
        if path not in self._file:
            raise KeyError(f"No group or dataset at '{path}' in {self.filepath}")
        return self._file[path]

    def get_dataset(self, path: str) -> np.ndarray:
        return self._node(path)[()]

    def get_scalar(self, path: str) -> int | float | str:
        value = np.asarray(self.get_dataset(path))
        if value.size != 1:
            raise ValueError(f"Dataset at '{path}' holds {value.size} values, not a scalar")
        value = value.item()
        return value.decode() if isinstance(value, bytes) else value

    def get_attribute(self, path: str, attr_name: str) -> Any:
        attrs = self._node(path).attrs
        if attr_name not in attrs:
            raise KeyError(f"'{path}' has no attribute '{attr_name}'")
        return attrs[attr_name]

    def list_groups(self, path: str = "/") -> list[str]:
        return [key for key, val in self._node(path).items() if isinstance(val, h5py.Group)]

    def snapshot_steps(self) -> list[int]:
        """Time-step indices that have a snapshot group, in increasing order."""
        return sorted(
            int(name.removeprefix(SNAPSHOT_PREFIX))
            for name in self.list_groups("/")
            if name.startswith(SNAPSHOT_PREFIX)
        )

    def config(self) -> dict[str, Any]:
        """Run parameters logged under ``config``; empty if none were written."""
        if "config" not in self._file:
            return {}
        return {name: self.get_scalar(f"config/{name}") for name in self._file["config"]}

    def load_fields(self, name: str = "field") -> dict[int, np.ndarray]:
        """Field snapshots keyed by step. Snapshots without ``name`` are skipped."""
        fields = {}
        for step in self.snapshot_steps():
            group = self._file[f"{SNAPSHOT_PREFIX}{step:06d}"]
            if name in group:
                fields[step] = group[name][()]
        return fields

    def load_series(self, name: str) -> tuple[np.ndarray, np.ndarray]:
        """
        A scalar logged with every snapshot as ``(steps, values)``, e.g. the
        decay of ``total_heat`` over time.
        """
        steps, values = [], []
        for step in self.snapshot_steps():
            group = self._file[f"{SNAPSHOT_PREFIX}{step:06d}"]
            if name in group:
                steps.append(step)
                values.append(group[name][()])
        return np.asarray(steps, dtype=np.int64), np.asarray(values)
