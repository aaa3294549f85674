"""
Command line interface.

Renders a preset or a scene file. With the default output `-` the image
is written to stdout as plain-text PPM, so status and progress go to
stderr.
"""

from __future__ import annotations
import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from .errors import PhongTraceError
from .presets import PRESETS, DEFAULT_PRESET, build_preset
from .renderer import Renderer, RenderSettings, write_ppm
from .scene_parser import load_scene

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='phongtrace',
        description='PhongTrace - a Phong ray tracer that renders 3D scenes to images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  phongtrace --scene scene3 > scene3.ppm
  phongtrace -w 1920 --height 1080 --scene scene4 -r --output scene4.png
  phongtrace --scene-file scenes/mirror_box.yaml --output mirror.ppm
        '''
    )

    parser.add_argument('-w', '--width', type=int, default=None, help='Image width (default: 800)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 600)')
    parser.add_argument('-s', '--scene', type=str, default=DEFAULT_PRESET,
                        help=f"Preset scene: {', '.join(PRESETS)} (default: {DEFAULT_PRESET})")
    parser.add_argument('--scene-file', type=str, default=None,
                        help='Render a YAML/JSON scene description instead of a preset')
    parser.add_argument('-r', '--reflection', action='store_true', help='Enable reflections')
    parser.add_argument('-t', '--textures', action='store_true', help='Enable checker textures')
    parser.add_argument('--depth', type=int, default=None, help='Max reflection depth (default: 5)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('-o', '--output', type=str, default='-',
                        help="Output filename, or '-' for PPM on stdout (default: -)")
    parser.add_argument('-q', '--quiet', action='store_true', help='Hide the progress bar')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def _settings_from_args(args: argparse.Namespace, base: Optional[RenderSettings]) -> RenderSettings:
    """Command line flags override the scene file's render section."""
    base = base or RenderSettings()
    return RenderSettings(
        width=args.width if args.width is not None else base.width,
        height=args.height if args.height is not None else base.height,
        max_depth=args.depth if args.depth is not None else base.max_depth,
        reflection=args.reflection or base.reflection,
        textures=args.textures or base.textures,
        tile_size=base.tile_size,
        num_threads=args.threads if args.threads is not None else base.num_threads,
        use_sky_gradient=base.use_sky_gradient,
        gamma=base.gamma,
        checker_scale=base.checker_scale
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr
    )

    try:
        if args.scene_file:
            logger.info("Loading scene file: %s", args.scene_file)
            scene, file_settings = load_scene(args.scene_file)
            settings = _settings_from_args(args, file_settings)
        else:
            settings = _settings_from_args(args, None)
            if args.scene not in PRESETS:
                logger.warning("Unknown scene '%s', using %s", args.scene, DEFAULT_PRESET)
            logger.info("Creating scene: %s", args.scene)
            scene = build_preset(args.scene, settings.aspect_ratio)
    except (PhongTraceError, ValueError) as e:
        logger.error("%s", e)
        return 2

    logger.info(
        "Resolution %dx%d, reflection %s, textures %s, max depth %d, threads %d",
        settings.width, settings.height,
        'on' if settings.reflection else 'off',
        'on' if settings.textures else 'off',
        settings.max_depth, settings.num_threads
    )

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', file=sys.stderr, flush=True)

    if not args.quiet:
        renderer.set_progress_callback(progress_callback)

    start_time = time.time()
    try:
        image = renderer.render_rgb(scene)
    except PhongTraceError as e:
        logger.error("%s", e)
        return 2
    if not args.quiet:
        print(file=sys.stderr)

    elapsed = time.time() - start_time
    logger.info("Render completed in %.2f seconds", elapsed)

    if args.output == '-':
        write_ppm(image, sys.stdout)
        sys.stdout.flush()
    else:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        renderer.save_image(image, str(output_path))

    return 0
