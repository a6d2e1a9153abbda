import numpy as np
import warp as wp
from heatwarp.kernels import SpMV
from heatwarp.sparse import DIAMatrix

from .cg_solver import CGScratch
from .cg_solver import CGSolver


def cg(a: DIAMatrix, b: wp.array, x: wp.array, max_steps: int = 1000) -> CGSolver:
    """
    Computes an approximate solution of the symmetric, positive-definite system
    A x = b using the Conjugate Gradient method for a **fixed number of iterations**.

    Allocates its own scratch memory, so prefer a persistent :class:`CGSolver`
    when the same system is solved repeatedly.

    Args:
        a: The linear system's left-hand side.
        b: The linear system's right-hand side.
        x: Initial guess and final solution vector (updated in-place).
        max_steps: The fixed number of iterations to perform.

    Returns:
        The solver that was run, so its scratch state can be inspected.
    """
    scratch = CGScratch(a.num_rows, device=a.device)
    solver = CGSolver(a, b, x, scratch, max_steps=max_steps)
    solver.solve()
    return solver


def residual_norm(a: DIAMatrix, b: wp.array, x: wp.array) -> float:
    """
    Returns ||b - A x||_2.

    Reads back to the host and is meant for diagnostics and tests; the solver
    itself never evaluates it.
    """
    ax = wp.zeros(a.num_rows, dtype=wp.float32, device=a.device)
    SpMV(a, x, ax).launch()
    r = b.numpy().astype(np.float64) - ax.numpy().astype(np.float64)
    return float(np.linalg.norm(r))
