from .heat_simulator import HeatSimulator

__all__ = ["HeatSimulator"]
