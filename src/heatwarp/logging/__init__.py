from .hdf5_logger import HDF5Logger
from .hdf5_reader import HDF5Reader
from .null_logger import NullLogger
from .simulation_logger import SimulationLogger

__all__ = ["HDF5Logger", "HDF5Reader", "NullLogger", "SimulationLogger"]
