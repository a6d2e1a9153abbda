from .dot import Dot
from .launch_step import ComputePass
from .launch_step import Kernel
from .launch_step import LaunchStep
from .launch_step import num_workgroups
from .saxpy import Operation
from .saxpy import SAXPYUpdate
from .saxpy import SAXPYUpdateDiv
from .spmv import SpMV

__all__ = [
    "ComputePass",
    "Dot",
    "Kernel",
    "LaunchStep",
    "Operation",
    "SAXPYUpdate",
    "SAXPYUpdateDiv",
    "SpMV",
    "num_workgroups",
]
