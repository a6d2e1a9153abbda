import os
from pathlib import PurePosixPath
from typing import Any
from typing import Dict
from typing import Union

import h5py
import numpy as np
import warp as wp


class HDF5Logger:
    """
    Writes arrays and scalars into a hierarchical HDF5 file.

    Datasets are placed under the group of the innermost active ``scope``:

        with logger.scope("step_000010"):
            logger.log_array("u", heat.current)
    """

    def __init__(self, filepath: str, mode: str = "w"):
        self.filepath = filepath
        self.mode = mode
        self._file: h5py.File | None = None
        self._scope_stack: list[str] = [""]

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def _push_scope(self, name: str):
        self._scope_stack.append(name)

    def _pop_scope(self):
        # The root entry is never popped
        if len(self._scope_stack) > 1:
            self._scope_stack.pop()

    @property
    def _current_scope(self) -> str:
        return str(PurePosixPath(*self._scope_stack))

    def open(self):
        if self._file is not None:
            return

        directory = os.path.dirname(self.filepath)
        if directory:
            os.makedirs(directory, exist_ok=True)

        self._file = h5py.File(self.filepath, self.mode)
        print(f"HDF5Logger: Opened {self.filepath}")

    def close(self):
        if self._file is None:
            return

        self._file.close()
        self._file = None
        print(f"HDF5Logger: Closed {self.filepath}")

    def scope(self, name: str) -> "HDF5Scope":
        """Creates a nested group for everything logged inside the ``with`` block."""
        return HDF5Scope(self, name)

    def _group(self) -> h5py.Group:
        if self._file is None:
            raise IOError(f"HDF5Logger for {self.filepath} is not open")

        path = self._current_scope
        if path and path != ".":
            return self._file.require_group(path)
        return self._file

    def log_array(
        self,
        name: str,
        data: Union[np.ndarray, wp.array],
        attributes: Dict[str, Any] = None,
    ):
        """Logs a numpy or Warp array (copied to the host) as a compressed dataset."""
        if isinstance(data, wp.array):
            data = data.numpy()

        dset = self._group().create_dataset(name, data=np.asarray(data), compression="gzip")
        for key, val in (attributes or {}).items():
            dset.attrs[key] = val

    def log_scalar(self, name: str, data: Union[int, float, str]):
        self._group().create_dataset(name, data=data)

    def log_attribute(self, name: str, value: Any, target_path: str = "."):
        group = self._group()
        target = group if target_path == "." else group[target_path]
        target.attrs[name] = value


class HDF5Scope:
    """Context manager pushing one level onto the logger's group path."""

    def __init__(self, logger: HDF5Logger, name: str):
        self._logger = logger
        self._name = name

    def __enter__(self):
        self._logger._push_scope(self._name)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._logger._pop_scope()
