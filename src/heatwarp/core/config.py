from dataclasses import dataclass


def _validate_positive_int(value: int, name: str, min_value: int = 1) -> None:
    """Validate that a value is a positive integer >= min_value."""
    if value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")


def _validate_non_negative_int(value: int, name: str) -> None:
    """Validate that a value is a non-negative integer."""
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")


def _validate_positive_float(value: float, name: str) -> None:
    """Validate that a value is a strictly positive float."""
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")


@dataclass(frozen=True)
class HeatConfig:
    """
    Physical and discretization parameters of the 2D heat equation.

    The unit square is covered by ``grid_size x grid_size`` unknowns with spacing
    ``h = 1 / grid_size``; ``dt`` is the Crank-Nicolson time step.
    """

    grid_size: int = 128
    diffusivity: float = 1.0
    dt: float = 1e-4

    def __post_init__(self):
        _validate_positive_int(self.grid_size, "grid_size", min_value=2)
        _validate_positive_float(self.diffusivity, "diffusivity")
        _validate_positive_float(self.dt, "dt")

    @property
    def num_unknowns(self) -> int:
        return self.grid_size * self.grid_size

    @property
    def h(self) -> float:
        return 1.0 / self.grid_size

    @property
    def gamma(self) -> float:
        """Stencil weight alpha * dt / (2 h^2) of each Crank-Nicolson half step."""
        return self.diffusivity * self.dt / (2.0 * self.h * self.h)


@dataclass(frozen=True)
class SolverConfig:
    """
    Conjugate Gradient settings.

    The solver always runs exactly ``max_steps`` iterations; there is no
    residual-based termination.
    """

    max_steps: int = 1000

    def __post_init__(self):
        _validate_non_negative_int(self.max_steps, "max_steps")


@dataclass(frozen=True)
class ExecutionConfig:
    """Parameters controlling the performance and execution strategy."""

    use_cuda_graph: bool = True
    num_steps: int = 100
    steps_per_segment: int = 10

    def __post_init__(self):
        _validate_non_negative_int(self.num_steps, "num_steps")
        _validate_positive_int(self.steps_per_segment, "steps_per_segment")

    @property
    def num_segments(self) -> int:
        return (self.num_steps + self.steps_per_segment - 1) // self.steps_per_segment


@dataclass(frozen=True)
class LoggingConfig:
    enable_timing: bool = False
    enable_hdf5_logging: bool = False
    hdf5_log_file: str = "heat_log.h5"

    # Write a field snapshot every N segments
    log_every_segment: int = 1
    log_solver_residual: bool = False

    def __post_init__(self):
        _validate_positive_int(self.log_every_segment, "log_every_segment")
