from .cg import cg
from .cg import residual_norm
from .cg_solver import CGScratch
from .cg_solver import CGSolver

__all__ = [
    "cg",
    "residual_norm",
    "CGScratch",
    "CGSolver",
]
