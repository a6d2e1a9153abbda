import functools

import warp as wp


@wp.kernel
def vec_mul_kernel(
    x: wp.array(dtype=wp.float32),
    y: wp.array(dtype=wp.float32),
    # Outputs
    out: wp.array(dtype=wp.float32),
):
    """Element-wise product: out = x .* y"""
    i = wp.tid()
    out[i] = x[i] * y[i]


@functools.cache
def create_block_sum_kernel(block_size: int):
    """Reduces each contiguous block of ``block_size`` values to one partial sum."""

    @wp.kernel
    def block_sum_kernel(
        inp: wp.array(dtype=wp.float32),
        # Outputs
        partial_sums: wp.array(dtype=wp.float32),
    ):
        block = wp.tid()
        tile = wp.tile_load(inp, shape=(block_size,), offset=(block * block_size,))
        block_sum = wp.tile_sum(tile)
        wp.tile_store(partial_sums, block_sum, offset=(block,))

    return block_sum_kernel


@functools.cache
def create_final_sum_kernel(block_size: int):
    """
    Sums ``num_partials`` partial sums into ``out[0]`` within a single block.

    The block walks the partial sums in strides of ``block_size``, so the
    number of partials is not bounded by the tile size.
    """

    @wp.kernel
    def final_sum_kernel(
        partial_sums: wp.array(dtype=wp.float32),
        num_partials: wp.int32,
        # Outputs
        out: wp.array(dtype=wp.float32),
    ):
        total = wp.float32(0.0)
        for start in range(0, num_partials, block_size):
            tile = wp.tile_load(partial_sums, shape=(block_size,), offset=(start,))
            chunk_sum = wp.tile_sum(tile)
            total += chunk_sum[0]

        out[0] = total

    return final_sum_kernel
