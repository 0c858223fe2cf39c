"""Frame accumulation into the persistent backbuffer.

After a frame is traced, the samples of each pixel are averaged and blended
into the backbuffer with weight ``frame / (frame + 1)`` for the old contents,
so frame N counts 1 / (N + 1) against all earlier frames combined. Without
progressive accumulation the frame's mean overwrites the pixel.

The backbuffer is a NumPy array of shape (height, width, 4), float32, with
row 0 at the bottom of the image. Channel 3 is reserved and never written.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3


def lerp_factor(frame: int, progressive: bool) -> float:
    """Weight of the existing backbuffer contents when adding ``frame``."""
    if not progressive:
        return 0.0
    return frame / (frame + 1.0)


@ti.kernel
def accumulate_frame(
    samples: ti.template(),
    backbuffer: ti.types.ndarray(dtype=ti.f32, ndim=3),
    width: ti.i32,
    height: ti.i32,
    spp: ti.i32,
    lerp: ti.f32,
):
    """Blend the per-pixel sample mean of a frame into the backbuffer.

    Args:
        samples: Sample field of the render arena, indexed (y*width + x)*spp + s.
        backbuffer: Output image, shape (height, width, 4).
        width: Image width in pixels.
        height: Image height in pixels.
        spp: Samples per pixel.
        lerp: Weight of the previous contents; 0 overwrites.
    """
    for y, x in ti.ndrange(height, width):
        base = (y * width + x) * spp
        total = vec3(0.0, 0.0, 0.0)
        for s in range(spp):
            total += samples[base + s].color
        mean = total / ti.cast(spp, ti.f32)

        for c in ti.static(range(3)):
            value = mean[c]
            if lerp > 0.0:
                value = backbuffer[y, x, c] * lerp + mean[c] * (1.0 - lerp)
            backbuffer[y, x, c] = value
