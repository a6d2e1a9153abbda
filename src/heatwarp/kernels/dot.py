import warp as wp

from .launch_step import Kernel
from .launch_step import LaunchStep
from .launch_step import num_workgroups
from .reduction_kernels import create_block_sum_kernel
from .reduction_kernels import create_final_sum_kernel
from .reduction_kernels import vec_mul_kernel

DOT_WORKGROUP_SIZE = 256


class Dot(Kernel):
    """
    Dot product out[0] = x . y computed on the device by a three-stage reduction tree.

    1. tmp0 = x .* y                          (one thread per element)
    2. tmp1[g] = sum(tmp0[g*256 : (g+1)*256]) (one block per group)
    3. out[0] = sum(tmp1[:num_groups])        (a single block)

    All buffers are borrowed; the caller owns them and must keep them alive. Passing
    the same array as ``x`` and ``y`` computes the squared norm.

    Args:
        x: First input vector of length n.
        y: Second input vector of length n.
        tmp0: Scratch of at least n values. Only the first n are written or read.
        tmp1: Scratch of at least ``ceil(n / 256)`` values. Only the first
              ``ceil(n / 256)`` are written or read.
        out: One-element output buffer.
    """

    def __init__(
        self,
        x: wp.array,
        y: wp.array,
        tmp0: wp.array,
        tmp1: wp.array,
        out: wp.array,
        block_size: int = DOT_WORKGROUP_SIZE,
    ):
        n = x.shape[0]
        if y.shape[0] != n:
            raise ValueError(f"Dot operands differ in length: {n} vs {y.shape[0]}")

        self.work_size = n
        self.block_size = block_size
        self.num_groups = num_workgroups(n, block_size)

        if tmp0.shape[0] < n:
            raise ValueError(f"tmp0 must hold at least {n} values, got {tmp0.shape[0]}")
        if tmp1.shape[0] < self.num_groups:
            raise ValueError(
                f"tmp1 must hold at least {self.num_groups} partial sums, got {tmp1.shape[0]}"
            )
        if out.shape[0] < 1:
            raise ValueError("Dot output buffer must hold one value")

        device = x.device

        # Reductions only see the live prefix of the scratch; loads past the end
        # of a view read as zero.
        self.products = tmp0[:n]
        self.partial_sums = tmp1[: self.num_groups]

        self.vec_mul = LaunchStep.record(
            "dot/vec_mul",
            vec_mul_kernel,
            dim=n,
            inputs=[x, y],
            outputs=[self.products],
            block_dim=block_size,
            device=device,
        )
        self.block_sum_reduce = LaunchStep.record_tiled(
            "dot/block_sum_reduce",
            create_block_sum_kernel(block_size),
            num_blocks=self.num_groups,
            inputs=[self.products],
            outputs=[self.partial_sums],
            block_dim=block_size,
            device=device,
        )
        self.sum_reduce = LaunchStep.record_tiled(
            "dot/sum_reduce",
            create_final_sum_kernel(block_size),
            num_blocks=1,
            inputs=[self.partial_sums, self.num_groups],
            outputs=[out],
            block_dim=block_size,
            device=device,
        )

        self.steps = [self.vec_mul, self.block_sum_reduce, self.sum_reduce]
