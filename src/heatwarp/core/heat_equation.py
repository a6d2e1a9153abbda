"""
Crank-Nicolson time stepping of the 2D heat equation u_t = alpha * (u_xx + u_yy).

With gamma = alpha * dt / (2 h^2) and the 5-point Laplacian L, one step solves

    (I - gamma L) u^{k+1} = (I + gamma L) u^k
          A                     B

where A has 1 + 4 gamma on the diagonal and -gamma for each grid neighbour, and
B is the same stencil with the sign of gamma flipped. Grid cells outside the
domain are held at zero (homogeneous Dirichlet boundary).

The field lives in two device buffers that swap roles every step. Both
directions are fully pre-built, so a step only selects which variant to launch.
"""
from __future__ import annotations

from typing import Optional

import numpy as np
import warp as wp
from heatwarp.kernels import SpMV
from heatwarp.optim import CGScratch
from heatwarp.optim import CGSolver
from heatwarp.sparse import DIAMatrix

from .config import HeatConfig
from .config import SolverConfig
from .directional_binding import BufferPair
from .directional_binding import Direction
from .directional_binding import DirectionalBinding


class HeatEquation:
    def __init__(
        self,
        config: HeatConfig,
        solver_config: Optional[SolverConfig] = None,
        initial_field: Optional[np.ndarray] = None,
        device: wp.Device | str | None = None,
        use_cuda_graph: bool = False,
    ):
        self.config = config
        self.solver_config = solver_config or SolverConfig()
        self.device = wp.get_device(device)

        n = config.grid_size
        m = config.num_unknowns
        gamma = config.gamma

        # Implicit and explicit halves of the Crank-Nicolson step
        self.a = DIAMatrix.from_stencil(n, 1.0 + 4.0 * gamma, -gamma, device=self.device)
        self.b = DIAMatrix.from_stencil(n, 1.0 - 4.0 * gamma, gamma, device=self.device)

        # Double-buffered field
        self.u = wp.zeros(m, dtype=wp.float32, device=self.device)
        self.u_ = wp.zeros(m, dtype=wp.float32, device=self.device)

        # Right-hand side B u of the implicit solve and the shared solver scratch
        self.rhs = wp.zeros(m, dtype=wp.float32, device=self.device)
        self.scratch = CGScratch(m, device=self.device)

        self.state: DirectionalBinding[BufferPair] = DirectionalBinding.ping_pong(self.u, self.u_)
        forward = self.state.forward
        backward = self.state.backward

        self.explicit: DirectionalBinding[SpMV] = DirectionalBinding(
            SpMV(self.b, forward.source, self.rhs),
            SpMV(self.b, backward.source, self.rhs),
        )

        max_steps = self.solver_config.max_steps
        self.solver: DirectionalBinding[CGSolver] = DirectionalBinding(
            CGSolver(self.a, self.rhs, forward.destination, self.scratch, max_steps),
            CGSolver(self.a, self.rhs, backward.destination, self.scratch, max_steps),
        )

        self._step_count = 0

        self.use_cuda_graph = use_cuda_graph and self.device.is_cuda
        self._graphs: dict[Direction, wp.Graph] = {}

        if initial_field is not None:
            self.set_field(initial_field)

    @property
    def step_count(self) -> int:
        """Number of completed steps."""
        return self._step_count

    @property
    def direction(self) -> Direction:
        """Direction of the next step."""
        return Direction.for_step(self._step_count)

    @property
    def current(self) -> wp.array:
        """Buffer holding the most recent field."""
        return self.state.select(self.direction).source

    @property
    def next(self) -> wp.array:
        """Buffer the next step writes to."""
        return self.state.select(self.direction).destination

    def step(self):
        """
        Advances the field by one time step.

        Returns as soon as the work is submitted; nothing is read back.
        """
        direction = self.direction

        if self.use_cuda_graph:
            graph = self._graphs.get(direction)
            if graph is None:
                graph = self._capture_step(direction)
            wp.capture_launch(graph)
        else:
            self._encode_step(direction)

        self._step_count += 1

    def run(self, num_steps: int):
        for _ in range(num_steps):
            self.step()

    def _encode_step(self, direction: Direction):
        with wp.ScopedDevice(self.device):
            # rhs = B u^k
            self.explicit.select(direction).launch()
            # A u^{k+1} = rhs, starting from the destination's previous contents
            self.solver.select(direction).solve()

    def _capture_step(self, direction: Direction) -> wp.Graph:
        """Records one step in the given direction into a CUDA graph."""
        print(
            f"INFO: Capturing CUDA Graph (direction={direction.name}, "
            f"cg_steps={self.solver_config.max_steps})..."
        )
        with wp.ScopedCapture(device=self.device) as capture:
            self._encode_step(direction)
        self._graphs[direction] = capture.graph
        return capture.graph

    def set_field(self, values: np.ndarray):
        """Overwrites the current field with a row-major array of ``grid_size**2`` values."""
        values = np.asarray(values, dtype=np.float32).reshape(-1)
        if values.shape[0] != self.config.num_unknowns:
            raise ValueError(
                f"Initial field must have {self.config.num_unknowns} values, got {values.shape[0]}"
            )
        wp.copy(dest=self.current, src=wp.array(values, dtype=wp.float32, device=self.device))

    def field(self) -> np.ndarray:
        """Host copy of the current field as a ``(grid_size, grid_size)`` array."""
        n = self.config.grid_size
        return self.current.numpy().reshape(n, n)

    def total_heat(self) -> float:
        """Integral of the current field over the unit square."""
        h = self.config.h
        return float(np.sum(self.current.numpy(), dtype=np.float64) * h * h)
