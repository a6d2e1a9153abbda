from __future__ import annotations

from typing import Optional

import numpy as np
import warp as wp
from heatwarp.core import ExecutionConfig
from heatwarp.core import gaussian_bump
from heatwarp.core import HeatConfig
from heatwarp.core import HeatEquation
from heatwarp.core import LoggingConfig
from heatwarp.core import SolverConfig
from heatwarp.logging import SimulationLogger
from tqdm import tqdm


class HeatSimulator:
    """
    Runs the heat equation for a configured number of steps.

    Steps are grouped into segments; after each segment the simulator reports
    progress, optional device timings and HDF5 snapshots. Within a segment no
    data is read back to the host.
    """

    def __init__(
        self,
        heat_config: HeatConfig,
        solver_config: SolverConfig,
        execution_config: ExecutionConfig,
        logging_config: LoggingConfig,
        initial_field: Optional[np.ndarray] = None,
        device: wp.Device | str | None = None,
    ):
        self.heat_config = heat_config
        self.solver_config = solver_config
        self.execution_config = execution_config
        self.logging_config = logging_config
        self.device = wp.get_device(device)

        if initial_field is None:
            initial_field = gaussian_bump(heat_config.grid_size)

        self.heat = HeatEquation(
            heat_config,
            solver_config,
            initial_field=initial_field,
            device=self.device,
            use_cuda_graph=execution_config.use_cuda_graph,
        )

        self.logger = SimulationLogger(logging_config)
        self.logger.initialize_events(self.device)

        if execution_config.use_cuda_graph and not self.heat.use_cuda_graph:
            print(
                f"WARNING: CUDA graphs are not available on {self.device}, "
                "launching kernels directly"
            )

    @property
    def num_segments(self) -> int:
        return self.execution_config.num_segments

    def run(self) -> np.ndarray:
        """Runs every segment and returns the final field."""
        self.logger.open()
        self.logger.log_configuration(self.heat)
        self.logger.log_snapshot(self.heat, segment_num=0)

        pbar = tqdm(total=self.num_segments, desc="Simulating")
        try:
            remaining = self.execution_config.num_steps
            for segment_num in range(self.num_segments):
                n_steps = min(self.execution_config.steps_per_segment, remaining)
                self._run_segment(n_steps)
                remaining -= n_steps

                self.logger.log_segment_timing(segment_num, n_steps)
                self.logger.log_snapshot(self.heat, segment_num=segment_num + 1)
                pbar.update(1)
        finally:
            pbar.close()
            self.logger.close()

        return self.heat.field()

    def _run_segment(self, n_steps: int):
        with self.logger.timed_segment():
            self.heat.run(n_steps)
