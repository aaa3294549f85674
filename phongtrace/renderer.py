"""
Renderer module - drives the per-pixel pipeline.

Implements:
- Multi-threaded tile-based rendering
- Deterministic output: every pixel is computed independently and
  written to its own slot of a pre-sized buffer
- Conversion to 8-bit RGB and image output (plain-text PPM or any
  format Pillow supports)
"""

from __future__ import annotations
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Callable, TextIO, Tuple
import numpy as np

from .scene import Scene
from .shading import Shader

logger = logging.getLogger(__name__)

Tile = Tuple[int, int, int, int]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 800
    height: int = 600
    max_depth: int = 5
    reflection: bool = False
    textures: bool = False
    tile_size: int = 16
    num_threads: int = 0  # 0 = auto-detect
    use_sky_gradient: bool = False
    gamma: float = 1.0
    checker_scale: float = 1.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.gamma <= 0:
            raise ValueError(f"gamma must be positive, got {self.gamma}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


class Renderer:
    """Phong ray tracer with multi-threading support."""

    def __init__(self, settings: Optional[RenderSettings] = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        The callback runs on the calling thread, once per finished tile.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def create_shader(self) -> Shader:
        settings = self.settings
        return Shader(
            max_depth=settings.max_depth,
            reflection=settings.reflection,
            textures=settings.textures,
            checker_scale=settings.checker_scale,
            use_sky_gradient=settings.use_sky_gradient
        )

    def render(self, scene: Scene) -> np.ndarray:
        """Render the scene and return the image as a numpy array.

        Args:
            scene: The scene to render; it is only read

        Returns:
            Image of shape (height, width, 3), row-major with the top-left
            pixel first, every channel in [0, 1]

        Raises:
            SceneError: If the scene has no camera
        """
        scene.validate()

        width = self.settings.width
        height = self.settings.height
        camera = scene.camera
        shader = self.create_shader()

        image = np.zeros((height, width, 3), dtype=np.float64)

        tiles = self._generate_tiles(width, height)
        total_tiles = len(tiles)

        def render_tile(tile: Tile) -> Tile:
            """Render a single tile straight into its slice of the image."""
            x0, y0, x1, y1 = tile
            for y in range(y0, y1):
                for x in range(x0, x1):
                    ray = camera.ray_for_pixel(x, y, width, height)
                    image[y, x] = shader.trace(ray, scene, 0).to_array()
            return tile

        logger.info(
            "Rendering %dx%d (%d objects, %d lights) on %d threads",
            width, height, len(scene.objects), len(scene.lights), self.settings.num_threads
        )
        start_time = time.perf_counter()

        # Tiles are disjoint, so workers never write the same pixel
        if self.settings.num_threads > 1 and total_tiles > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                futures = [executor.submit(render_tile, tile) for tile in tiles]
                for completed, future in enumerate(as_completed(futures), start=1):
                    future.result()
                    self._report_progress(completed, total_tiles)
        else:
            for completed, tile in enumerate(tiles, start=1):
                render_tile(tile)
                self._report_progress(completed, total_tiles)

        logger.debug("Rendered %d tiles in %.3fs", total_tiles, time.perf_counter() - start_time)
        return image

    def render_rgb(self, scene: Scene) -> np.ndarray:
        """Render the scene to an 8-bit RGB array of shape (height, width, 3)."""
        return self.to_ldr(self.render(scene))

    def _report_progress(self, completed: int, total: int) -> None:
        if self._progress_callback:
            self._progress_callback(completed / total)

    def _generate_tiles(self, width: int, height: int) -> list[Tile]:
        """Generate tiles for parallel rendering.

        Tiles cover every pixel exactly once.

        Args:
            width: Image width
            height: Image height

        Returns:
            List of tiles as (x0, y0, x1, y1) tuples in row-major order
        """
        tile_size = self.settings.tile_size
        tiles = []

        for y in range(0, height, tile_size):
            for x in range(0, width, tile_size):
                x1 = min(x + tile_size, width)
                y1 = min(y + tile_size, height)
                tiles.append((x, y, x1, y1))

        return tiles

    def to_ldr(self, image: np.ndarray) -> np.ndarray:
        """Convert a float image to 8-bit.

        Each channel is clamped to [0, 1], gamma corrected when gamma is
        not 1, scaled by 255 and truncated. NaNs become 0.

        Args:
            image: Float image array

        Returns:
            LDR image as uint8 array
        """
        return to_ldr(image, self.settings.gamma)

    def save_image(self, image: np.ndarray, filename: str) -> None:
        save_image(image, filename, self.settings.gamma)


def to_ldr(image: np.ndarray, gamma: float = 1.0) -> np.ndarray:
    """Convert a float image in [0, 1] to 8-bit RGB."""
    clean = np.nan_to_num(image, nan=0.0, posinf=1.0, neginf=0.0)
    clamped = np.clip(clean, 0.0, 1.0)
    if gamma != 1.0:
        clamped = np.power(clamped, 1.0 / gamma)
    return (clamped * 255.0).astype(np.uint8)


def write_ppm(image: np.ndarray, stream: TextIO) -> None:
    """Write an 8-bit RGB image as plain-text PPM (P3).

    Args:
        image: uint8 array of shape (height, width, 3)
        stream: Text stream to write to
    """
    height, width = image.shape[:2]
    stream.write("P3\n")
    stream.write(f"{width} {height}\n")
    stream.write("255\n")
    for row in image:
        for r, g, b in row:
            stream.write(f"{r} {g} {b}\n")


def save_image(image: np.ndarray, filename: str, gamma: float = 1.0) -> None:
    """Save image to file.

    `.ppm` files are written as plain-text P3; every other extension is
    handed to Pillow.

    Args:
        image: Image array (float in [0, 1] or uint8)
        filename: Output filename (extension determines format)
        gamma: Gamma used when converting a float image
    """
    from PIL import Image as PILImage

    if image.dtype != np.uint8:
        image = to_ldr(image, gamma)

    path = Path(filename)
    if path.suffix.lower() == '.ppm':
        with open(path, 'w') as f:
            write_ppm(image, f)
    else:
        PILImage.fromarray(image).save(path)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], path)


def render(
    scene: Scene,
    width: int,
    height: int,
    reflection: bool = False,
    textures: bool = False,
    max_depth: int = 5,
    num_threads: int = 0
) -> np.ndarray:
    """Convenience function to render a scene to an 8-bit RGB grid.

    Args:
        scene: Scene with a camera
        width: Image width in pixels
        height: Image height in pixels
        reflection: Enable mirror reflection
        textures: Enable the flat checker pattern
        max_depth: Maximum reflection bounces
        num_threads: Worker threads (0 = one per CPU)

    Returns:
        uint8 array of shape (height, width, 3), row-major, top-left first
    """
    settings = RenderSettings(
        width=width,
        height=height,
        max_depth=max_depth,
        reflection=reflection,
        textures=textures,
        num_threads=num_threads
    )
    return Renderer(settings).render_rgb(scene)
