from .config import ExecutionConfig
from .config import HeatConfig
from .config import LoggingConfig
from .config import SolverConfig
from .directional_binding import BufferPair
from .directional_binding import Direction
from .directional_binding import DirectionalBinding
from .heat_equation import HeatEquation
from .initial_field import gaussian_bump

__all__ = [
    "BufferPair",
    "Direction",
    "DirectionalBinding",
    "ExecutionConfig",
    "HeatConfig",
    "HeatEquation",
    "LoggingConfig",
    "SolverConfig",
    "gaussian_bump",
]
