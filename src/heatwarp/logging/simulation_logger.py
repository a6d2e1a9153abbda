from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

import warp as wp
from heatwarp.core.config import LoggingConfig
from heatwarp.optim import residual_norm

from .hdf5_logger import HDF5Logger
from .null_logger import NullLogger

if TYPE_CHECKING:
    from heatwarp.core import HeatEquation


class SimulationLogger:
    """
    Routes console timing output and HDF5 snapshots according to a LoggingConfig.
    """

    def __init__(self, config: LoggingConfig) -> None:
        self.config = config

        self.hdf5_logger = NullLogger()
        if self.config.enable_hdf5_logging:
            self.hdf5_logger = HDF5Logger(filepath=config.hdf5_log_file)

        self.segment_events: tuple[wp.Event, wp.Event] | None = None

    def initialize_events(self, device: wp.Device):
        if self.config.enable_timing and device.is_cuda:
            self.segment_events = (
                wp.Event(device=device, enable_timing=True),
                wp.Event(device=device, enable_timing=True),
            )

    @contextmanager
    def timed_segment(self):
        """Records start/end events around a segment of steps."""
        if self.segment_events is None:
            yield
            return

        start, end = self.segment_events
        wp.record_event(start)
        yield
        wp.record_event(end)

    def open(self):
        self.hdf5_logger.open()

    def close(self):
        self.hdf5_logger.close()

    def log_configuration(self, heat: HeatEquation):
        if not self.config.enable_hdf5_logging:
            return

        with self.hdf5_logger.scope("config"):
            self.hdf5_logger.log_scalar("grid_size", heat.config.grid_size)
            self.hdf5_logger.log_scalar("diffusivity", heat.config.diffusivity)
            self.hdf5_logger.log_scalar("dt", heat.config.dt)
            self.hdf5_logger.log_scalar("max_steps", heat.solver_config.max_steps)

    def log_snapshot(self, heat: HeatEquation, segment_num: int):
        """Writes the current field (and optionally the solver residual) to HDF5."""
        if not self.config.enable_hdf5_logging:
            return
        if segment_num % self.config.log_every_segment != 0:
            return

        with self.hdf5_logger.scope(f"step_{heat.step_count:06d}"):
            self.hdf5_logger.log_array("field", heat.field())
            self.hdf5_logger.log_scalar("total_heat", heat.total_heat())

            if self.config.log_solver_residual and heat.step_count > 0:
                solver = heat.solver.select(heat.direction.flipped())
                self.hdf5_logger.log_scalar(
                    "cg_residual_norm", residual_norm(solver.a, solver.b, solver.x)
                )

    def log_segment_timing(self, segment_num: int, num_steps: int):
        """Prints the elapsed device time of the last segment."""
        if self.segment_events is None:
            return

        elapsed_ms = wp.get_event_elapsed_time(*self.segment_events)
        print(
            f"\t- SEGMENT {segment_num}: {num_steps} steps took {elapsed_ms:.3f} ms "
            f"({elapsed_ms / max(num_steps, 1):.3f} ms/step)"
        )
