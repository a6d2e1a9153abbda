import pathlib

import hydra
import matplotlib.pyplot as plt
import numpy as np
from heatwarp import ExecutionConfig
from heatwarp import HeatConfig
from heatwarp import HeatSimulator
from heatwarp import LoggingConfig
from heatwarp import SolverConfig
from heatwarp.core import gaussian_bump
from omegaconf import DictConfig

CONFIG_PATH = pathlib.Path(__file__).parent.joinpath("conf")


def plot_field(initial: np.ndarray, final: np.ndarray, dt: float, num_steps: int):
    fig, axes = plt.subplots(1, 2, figsize=(10, 4.5))
    vmax = float(np.max(initial))

    for ax, field, title in (
        (axes[0], initial, "t = 0"),
        (axes[1], final, f"t = {dt * num_steps:.4g}"),
    ):
        im = ax.imshow(field, origin="lower", extent=(0, 1, 0, 1), vmin=0.0, vmax=vmax)
        ax.set_title(title)
        ax.set_xlabel("x")
        ax.set_ylabel("y")

    fig.colorbar(im, ax=axes, shrink=0.8, label="u")
    plt.show()


@hydra.main(config_path=str(CONFIG_PATH), config_name="config", version_base=None)
def heat_diffusion_example(cfg: DictConfig):
    heat_config: HeatConfig = hydra.utils.instantiate(cfg.heat)
    solver_config: SolverConfig = hydra.utils.instantiate(cfg.solver)
    exec_config: ExecutionConfig = hydra.utils.instantiate(cfg.execution)
    logging_config: LoggingConfig = hydra.utils.instantiate(cfg.logging)

    n = heat_config.grid_size
    initial_field = gaussian_bump(
        n, sigma=cfg.initial_field.sigma, noise_scale=cfg.initial_field.noise_scale, seed=cfg.seed
    )

    simulator = HeatSimulator(
        heat_config=heat_config,
        solver_config=solver_config,
        execution_config=exec_config,
        logging_config=logging_config,
        initial_field=initial_field,
        device=cfg.device,
    )

    print(f"INFO: Initial total heat: {simulator.heat.total_heat():.6f}")
    final_field = simulator.run()
    print(f"INFO: Final total heat:   {simulator.heat.total_heat():.6f}")

    if cfg.plot:
        plot_field(initial_field.reshape(n, n), final_field, heat_config.dt, exec_config.num_steps)


if __name__ == "__main__":
    heat_diffusion_example()
