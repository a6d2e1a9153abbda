import numpy as np
import warp as wp
from heatwarp.core import ExecutionConfig
from heatwarp.core import gaussian_bump
from heatwarp.core import HeatConfig
from heatwarp.core import LoggingConfig
from heatwarp.core import SolverConfig
from heatwarp.logging import HDF5Reader
from heatwarp.simulation import HeatSimulator

wp.init()


def test_simulator_runs_all_steps():
    device = "cuda" if wp.is_cuda_available() else "cpu"

    simulator = HeatSimulator(
        heat_config=HeatConfig(grid_size=8, dt=1e-3),
        solver_config=SolverConfig(max_steps=20),
        execution_config=ExecutionConfig(num_steps=7, steps_per_segment=3),
        logging_config=LoggingConfig(enable_timing=True),
        device=device,
    )
    final_field = simulator.run()

    assert simulator.num_segments == 3
    assert simulator.heat.step_count == 7
    assert final_field.shape == (8, 8)
    assert np.all(np.isfinite(final_field))


def test_simulator_uses_given_initial_field():
    device = "cuda" if wp.is_cuda_available() else "cpu"
    u0 = gaussian_bump(8, noise_scale=0.2, seed=1)

    simulator = HeatSimulator(
        heat_config=HeatConfig(grid_size=8),
        solver_config=SolverConfig(max_steps=1),
        execution_config=ExecutionConfig(use_cuda_graph=False, num_steps=0),
        logging_config=LoggingConfig(),
        initial_field=u0,
        device=device,
    )

    assert np.array_equal(simulator.run(), u0.reshape(8, 8))


def test_simulator_writes_snapshots(tmp_path):
    device = "cuda" if wp.is_cuda_available() else "cpu"
    path = str(tmp_path / "heat.h5")

    simulator = HeatSimulator(
        heat_config=HeatConfig(grid_size=8, dt=1e-3),
        solver_config=SolverConfig(max_steps=20),
        execution_config=ExecutionConfig(use_cuda_graph=False, num_steps=5, steps_per_segment=2),
        logging_config=LoggingConfig(
            enable_hdf5_logging=True, hdf5_log_file=path, log_solver_residual=True
        ),
        device=device,
    )
    final_field = simulator.run()

    with HDF5Reader(path) as reader:
        fields = reader.load_fields()
        assert reader.get_scalar("config/grid_size") == 8
        assert reader.get_scalar("step_000005/cg_residual_norm") < 1e-3
        _, totals = reader.load_series("total_heat")

    assert list(fields) == [0, 2, 4, 5]
    assert np.array_equal(fields[5], final_field)
    assert np.all(np.diff(totals) < 0.0)
