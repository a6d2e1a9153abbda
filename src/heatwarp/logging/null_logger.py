from contextlib import nullcontext
from typing import Any
from typing import Dict
from typing import Union

import numpy as np
import warp as wp


class NullLogger:
    """
    Drop-in replacement for :class:`HDF5Logger` that discards everything.

    Lets callers log unconditionally instead of checking whether logging is on.
    """

    def __init__(self, *args, **kwargs):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        pass

    @property
    def is_open(self) -> bool:
        return False

    def open(self):
        pass

    def close(self):
        pass

    def scope(self, name: str):
        return nullcontext(self)

    def log_array(
        self,
        name: str,
        data: Union[np.ndarray, wp.array],
        attributes: Dict[str, Any] = None,
    ):
        pass

    def log_scalar(self, name: str, data: Union[int, float, str]):
        pass

    def log_attribute(self, name: str, value: Any, target_path: str = "."):
        pass
