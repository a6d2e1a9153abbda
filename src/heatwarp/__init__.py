from .core import Direction
from .core import DirectionalBinding
from .core import ExecutionConfig
from .core import HeatConfig
from .core import HeatEquation
from .core import LoggingConfig
from .core import SolverConfig
from .logging import HDF5Logger
from .logging import HDF5Reader
from .logging import NullLogger
from .optim import CGScratch
from .optim import CGSolver
from .simulation import HeatSimulator
from .sparse import DIAMatrix

__all__ = [
    "CGScratch",
    "CGSolver",
    "DIAMatrix",
    "Direction",
    "DirectionalBinding",
    "ExecutionConfig",
    "HeatConfig",
    "HeatEquation",
    "HeatSimulator",
    "LoggingConfig",
    "SolverConfig",
    "HDF5Logger",
    "HDF5Reader",
    "NullLogger",
]
