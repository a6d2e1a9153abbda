from .dia_matrix import DIAMatrix

__all__ = ["DIAMatrix"]
