import warp as wp
from heatwarp.sparse import DIAMatrix

from .launch_step import Kernel
from .launch_step import LaunchStep

SPMV_WORKGROUP_SIZE = 64


@wp.kernel
def dia_spmv_kernel(
    num_rows: wp.int32,
    num_cols: wp.int32,
    num_diags: wp.int32,
    data: wp.array(dtype=wp.float32),
    offsets: wp.array(dtype=wp.int32),
    x: wp.array(dtype=wp.float32),
    # Outputs
    y: wp.array(dtype=wp.float32),
):
    """Computes y = A * x for a DIA matrix, one thread per row."""
    row = wp.tid()

    acc = wp.float32(0.0)
    for k in range(num_diags):
        col = row + offsets[k]
        if col >= 0 and col < num_cols:
            acc += data[k * num_rows + row] * x[col]

    y[row] = acc


class SpMV(Kernel):
    """
    Sparse matrix-vector multiplication y = A * x.

    The matrix and both vectors are bound once at construction; ``y`` is
    overwritten on every launch.
    """

    def __init__(self, a: DIAMatrix, x: wp.array, y: wp.array):
        if x.shape[0] != a.num_cols:
            raise ValueError(f"SpMV input has length {x.shape[0]}, expected {a.num_cols}")
        if y.shape[0] != a.num_rows:
            raise ValueError(f"SpMV output has length {y.shape[0]}, expected {a.num_rows}")

        self.matrix = a
        self.step = LaunchStep.record(
            "spmv",
            dia_spmv_kernel,
            dim=a.num_rows,
            inputs=[a.num_rows, a.num_cols, a.num_diags, a.data, a.offsets, x],
            outputs=[y],
            block_dim=SPMV_WORKGROUP_SIZE,
            device=a.device,
        )
        self.steps = [self.step]
