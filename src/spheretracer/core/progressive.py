"""Progressive renderer and the one-call render entry point.

This module ties the pieces of a render together:
- Uploads the scene and camera once per render invocation
- Owns the per-ray arena and the path tracer
- Blends each traced frame into the backbuffer
- Reports progress through callbacks or a generator

The ProgressiveRenderer keeps no module-level state; every instance owns its
device buffers, so several renders can coexist.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.spheretracer.core.progressive import ProgressiveRenderer, render
    >>> from src.spheretracer.core.settings import RenderSettings
    >>> from src.spheretracer.scene.presets import (
    ...     create_default_camera, create_default_scene
    ... )
    >>>
    >>> settings = RenderSettings(width=160, height=90, frame_count=8)
    >>> result = render(create_default_scene(), create_default_camera(), settings)
    >>> result.image.shape
    (90, 160, 4)
    >>>
    >>> renderer = ProgressiveRenderer(
    ...     create_default_scene(), create_default_camera(), settings
    ... )
    >>> renderer.render(4)  # Four more frames
    >>> image = renderer.get_image_numpy()
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Generator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.spheretracer.camera.thin_lens import CameraFields, ThinLensCamera
from src.spheretracer.core.accumulator import accumulate_frame, lerp_factor
from src.spheretracer.core.arena import RenderArena
from src.spheretracer.core.integrator import PathTracer
from src.spheretracer.core.settings import RenderSettings
from src.spheretracer.scene.buffers import SceneBuffers
from src.spheretracer.scene.model import Scene

logger = logging.getLogger(__name__)

# Callback receives (frames_done, target_frames)
ProgressCallback = Callable[[int, int], None]

# Backbuffer channels; the 4th is reserved and left untouched
BACKBUFFER_CHANNELS = 4


@dataclass(frozen=True)
class RenderResult:
    """Output of a render invocation.

    Attributes:
        image: Backbuffer, float32 of shape (height, width, 4), row 0 at the bottom.
        ray_count: Cumulative (ray, bounce) work units processed.
        frame_count: Number of frames accumulated into the image.
        elapsed: Wall-clock seconds spent rendering.
    """

    image: npt.NDArray[np.float32]
    ray_count: int
    frame_count: int
    elapsed: float = 0.0

    @property
    def rays_per_second(self) -> float:
        if self.elapsed <= 0.0:
            return 0.0
        return self.ray_count / self.elapsed


def allocate_backbuffer(settings: RenderSettings) -> npt.NDArray[np.float32]:
    """Zeroed backbuffer for the given resolution."""
    return np.zeros((settings.height, settings.width, BACKBUFFER_CHANNELS), dtype=np.float32)


def check_backbuffer(backbuffer: npt.NDArray[np.float32], settings: RenderSettings) -> None:
    """Reject a caller-supplied backbuffer of the wrong shape, dtype or layout.

    Raises:
        ValueError: If the buffer cannot be written in place by the accumulator.
    """
    expected = (settings.height, settings.width, BACKBUFFER_CHANNELS)
    if not isinstance(backbuffer, np.ndarray):
        raise ValueError(f"Backbuffer must be a NumPy array, got {type(backbuffer).__name__}")
    if backbuffer.shape != expected:
        raise ValueError(f"Backbuffer shape {backbuffer.shape} does not match {expected}")
    if backbuffer.dtype != np.float32:
        raise ValueError(f"Backbuffer dtype must be float32, got {backbuffer.dtype}")
    if not backbuffer.flags.c_contiguous:
        raise ValueError("Backbuffer must be C-contiguous")


class ProgressiveRenderer:
    """A renderer that accumulates frames into a persistent backbuffer.

    Each call to render_frame() traces one frame with the frame number as
    part of every random seed and blends it into the backbuffer. The scene
    and camera are fixed for the lifetime of the renderer.

    Attributes:
        settings: The render parameters.
    """

    def __init__(
        self,
        scene: Scene,
        camera: ThinLensCamera,
        settings: RenderSettings,
        backbuffer: npt.NDArray[np.float32] | None = None,
    ) -> None:
        """Upload the scene and camera and allocate the arena.

        Args:
            scene: The spheres and materials to render.
            camera: The camera; its frame is derived for the settings' aspect ratio.
            settings: Resolution, sampling, depth and accumulation parameters.
            backbuffer: Optional output array, written in place.

        Raises:
            ValueError: If the backbuffer has the wrong shape or dtype.
        """
        if backbuffer is None:
            backbuffer = allocate_backbuffer(settings)
        else:
            check_backbuffer(backbuffer, settings)

        self.settings = settings
        self._scene = scene
        self._camera = camera
        self._backbuffer = backbuffer

        self._scene_buffers = SceneBuffers(scene)
        self._camera_fields = CameraFields(camera.frame(settings.aspect_ratio))
        self._arena = RenderArena(settings.num_rays)
        self._tracer = PathTracer(self._scene_buffers, self._camera_fields, self._arena, settings)

        self._frame_index = 0
        self._ray_count = 0

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    @property
    def frame_index(self) -> int:
        """Number of frames accumulated since the last reset."""
        return self._frame_index

    @property
    def ray_count(self) -> int:
        """Cumulative (ray, bounce) work units since the last reset."""
        return self._ray_count

    @property
    def backbuffer(self) -> npt.NDArray[np.float32]:
        """The accumulated image, shape (height, width, 4), row 0 at the bottom."""
        return self._backbuffer

    @property
    def arena(self) -> RenderArena:
        """Per-ray buffers of the most recent frame."""
        return self._arena

    @property
    def tracer(self) -> PathTracer:
        return self._tracer

    def reset(self) -> None:
        """Restart accumulation at frame 0 and clear the backbuffer."""
        self._backbuffer.fill(0.0)
        self._frame_index = 0
        self._ray_count = 0

    def render_frame(self) -> int:
        """Trace one frame and blend it into the backbuffer.

        Returns:
            The frame's (ray, bounce) count.
        """
        s = self.settings
        frame = self._frame_index
        rays = self._tracer.trace_frame(frame)
        accumulate_frame(
            self._arena.samples,
            self._backbuffer,
            s.width,
            s.height,
            s.samples_per_pixel,
            lerp_factor(frame, s.progressive),
        )
        self._frame_index += 1
        self._ray_count += rays
        return rays

    def render(
        self,
        num_frames: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> None:
        """Render frames with an optional progress callback.

        Frames add to the existing accumulation; call reset() first to start
        over.

        Args:
            num_frames: Frames to add. Defaults to settings.frame_count.
            callback: Optional callback called after each frame.
                Receives (frames_done, target_frames).

        Example:
            >>> def progress(current, target):
            ...     print(f"Progress: {current}/{target} frames")
            >>> renderer.render(16, callback=progress)
        """
        for current, target in self.render_progressive(num_frames):
            if callback is not None:
                callback(current, target)

    def render_progressive(
        self, num_frames: int | None = None
    ) -> Generator[tuple[int, int], None, None]:
        """Render frames, yielding progress after each one.

        This is a generator-based alternative to render() with callbacks,
        useful when the caller wants to inspect or display intermediate
        images between frames.

        Args:
            num_frames: Frames to add. Defaults to settings.frame_count.

        Yields:
            Tuple of (frames_done, target_frames).
        """
        if num_frames is None:
            num_frames = self.settings.frame_count
        if num_frames <= 0:
            return

        target = self._frame_index + num_frames
        while self._frame_index < target:
            self.render_frame()
            yield (self._frame_index, target)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """The accumulated RGB image, first row at the top.

        Returns:
            Linear float32 array of shape (height, width, 3).
        """
        return np.ascontiguousarray(np.flipud(self._backbuffer[:, :, :3]))

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"spp={self.settings.samples_per_pixel}, frames={self.frame_index})"
        )


def render(
    scene: Scene,
    camera: ThinLensCamera,
    settings: RenderSettings,
    backbuffer: npt.NDArray[np.float32] | None = None,
    callback: ProgressCallback | None = None,
) -> RenderResult:
    """Render ``settings.frame_count`` frames of a scene.

    The scene and camera are uploaded for this invocation only and released
    when it returns.

    Args:
        scene: The spheres and materials to render.
        camera: The camera.
        settings: Render parameters.
        backbuffer: Optional output array of shape (height, width, 4), float32,
            written in place.
        callback: Optional per-frame progress callback.

    Returns:
        The RenderResult holding the backbuffer and the total ray count.
    """
    renderer = ProgressiveRenderer(scene, camera, settings, backbuffer)
    logger.info(
        "Rendering %dx%d, %d spp, max depth %d, %d frame(s), %d spheres",
        settings.width,
        settings.height,
        settings.samples_per_pixel,
        settings.max_depth,
        settings.frame_count,
        len(scene),
    )

    start = time.perf_counter()
    renderer.render(settings.frame_count, callback=callback)
    elapsed = time.perf_counter() - start

    result = RenderResult(
        image=renderer.backbuffer,
        ray_count=renderer.ray_count,
        frame_count=renderer.frame_index,
        elapsed=elapsed,
    )
    logger.info(
        "Rendered %d rays in %.2fs (%.2f Mrays/s)",
        result.ray_count,
        elapsed,
        result.rays_per_second / 1.0e6,
    )
    return result
