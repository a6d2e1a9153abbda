from __future__ import annotations

import warp as wp
from heatwarp.kernels import ComputePass
from heatwarp.kernels import Dot
from heatwarp.kernels import num_workgroups
from heatwarp.kernels import Operation
from heatwarp.kernels import SAXPYUpdate
from heatwarp.kernels import SAXPYUpdateDiv
from heatwarp.kernels import SpMV
from heatwarp.kernels.dot import DOT_WORKGROUP_SIZE
from heatwarp.sparse import DIAMatrix


class CGScratch:
    """
    Device scratch memory of the Conjugate Gradient solver.

    Allocated once and shared by every solver instance with the same number of
    unknowns. Solvers and their kernels only borrow these arrays.
    """

    def __init__(self, num_unknowns: int, device: wp.Device | str | None = None):
        if num_unknowns <= 0:
            raise ValueError(f"num_unknowns must be >= 1, got {num_unknowns}")

        self.num_unknowns = num_unknowns
        self.device = wp.get_device(device)

        n = num_unknowns
        num_groups = num_workgroups(n, DOT_WORKGROUP_SIZE)

        self.r = wp.zeros(n, dtype=wp.float32, device=self.device)  # residual
        self.p = wp.zeros(n, dtype=wp.float32, device=self.device)  # search direction
        self.q = wp.zeros(n, dtype=wp.float32, device=self.device)  # A * p

        # Scalars stored in single-element arrays
        self.sigma = wp.zeros(1, dtype=wp.float32, device=self.device)
        self.sigma_prime = wp.zeros(1, dtype=wp.float32, device=self.device)

        # Reduction scratch: element-wise products and per-block partial sums
        self.tmp0 = wp.zeros(n, dtype=wp.float32, device=self.device)
        self.tmp1 = wp.zeros(num_groups, dtype=wp.float32, device=self.device)


class CGSolver:
    """
    Conjugate Gradient solver for A x = b with a fixed iteration budget.

    Every kernel of the initialization and of one iteration is built once at
    construction for the given ``a``, ``b`` and ``x``. ``solve()`` only submits the
    pre-built passes; it never waits for the device or reads anything back, so
    there is no residual-based early exit. ``x`` holds the initial guess and is
    overwritten with the solution.

    Per iteration, in order:

        sigma  = r . r
        q      = A p
        sigma' = p . q
        x      = x + (sigma / sigma') p
        r      = r - (sigma / sigma') q
        sigma' = r . r
        p      = r + (sigma' / sigma) p
    """

    def __init__(
        self,
        a: DIAMatrix,
        b: wp.array,
        x: wp.array,
        scratch: CGScratch,
        max_steps: int = 1000,
    ):
        n = a.num_rows
        if b.shape[0] != n or x.shape[0] != n:
            raise ValueError(
                f"CGSolver dimension mismatch. Expected ({n},), got b={b.shape}, x={x.shape}"
            )
        if scratch.num_unknowns != n:
            raise ValueError(
                f"CGScratch holds {scratch.num_unknowns} unknowns, the system has {n}"
            )
        if max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {max_steps}")

        self.a = a
        self.b = b
        self.x = x
        self.scratch = scratch
        self.max_steps = max_steps

        s = scratch

        # r = b - A x
        self.init_pass = ComputePass.from_kernels(
            [SpMV(a, x, s.r), SAXPYUpdate(b, s.r)],
            label="cg/init",
        )

        self.iteration_pass = ComputePass.from_kernels(
            [
                Dot(s.r, s.r, s.tmp0, s.tmp1, s.sigma),
                SpMV(a, s.p, s.q),
                Dot(s.p, s.q, s.tmp0, s.tmp1, s.sigma_prime),
                SAXPYUpdateDiv(s.sigma, s.sigma_prime, s.p, x, Operation.ADD),
                SAXPYUpdateDiv(s.sigma, s.sigma_prime, s.q, s.r, Operation.SUB),
                Dot(s.r, s.r, s.tmp0, s.tmp1, s.sigma_prime),
                SAXPYUpdateDiv(s.sigma_prime, s.sigma, s.r, s.p, Operation.AYPX),
            ],
            label="cg/iteration",
        )

    @property
    def num_unknowns(self) -> int:
        return self.a.num_rows

    def solve(self):
        """Submits the initialization and ``max_steps`` iterations."""
        self.init_pass.submit()
        # p = r
        wp.copy(dest=self.scratch.p, src=self.scratch.r)

        for _ in range(self.max_steps):
            self.iteration_pass.submit()
