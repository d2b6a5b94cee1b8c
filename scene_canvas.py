"""
Scene Canvas command line.

Runs the edit pipeline and the mask encoder on image files without a UI.

    python scene_canvas.py edit scene.jpg out.png --brightness 120 --vignette 40
    python scene_canvas.py edit scene.jpg preview.png --sharpen 30 --preview
    python scene_canvas.py mask strokes.png mask.png
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from SC_Libs.constants import EDITED_FILE_PREFIX
from SC_Libs.errors import SceneCanvasError
from SC_Libs.ImageEditingLib.edit_pipeline import (
    downscale_for_preview,
    render_full_resolution,
    render_preview,
)
from SC_Libs.ImageEditingLib.image_io import load_image_file, save_image
from SC_Libs.ImageEditingLib.image_models import Edits, PixelBuffer
from SC_Libs.ImageEditingLib.mask_encoder import encode_binary_mask
from SC_Libs.SessionLib.session_config import SessionConfig, load_session_config

logger = logging.getLogger("scene_canvas")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Apply Scene Canvas edits and mask encoding to image files.',
    )
    parser.add_argument(
        '-c', '--config',
        help='Path to a JSON session config.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    edit = sub.add_parser('edit', help='Apply slider edits to a PNG or JPEG.')
    edit.add_argument('input_file', help='Scene image (PNG, JPG or JPEG).')
    edit.add_argument(
        'output_file', nargs='?',
        help='Output path (default: edited-<input name> beside the input).',
    )
    edit.add_argument('--brightness', type=int, default=100, help='0-200, 100 = unchanged.')
    edit.add_argument('--contrast', type=int, default=100, help='0-200, 100 = unchanged.')
    edit.add_argument('--saturation', type=int, default=100, help='0-200, 100 = unchanged.')
    edit.add_argument('--sharpen', type=int, default=0, help='0-100, 0 = off.')
    edit.add_argument('--vignette', type=int, default=0, help='0-100, 0 = off.')
    edit.add_argument(
        '--preview',
        action='store_true',
        help='Render on the down-scaled preview copy instead of full resolution.',
    )

    mask = sub.add_parser('mask', help='Encode a painted RGBA stroke layer as a black/white mask.')
    mask.add_argument('strokes_file', help='PNG stroke layer; any alpha > 0 counts as painted.')
    mask.add_argument('output_file', help='Output PNG path.')

    return parser


def run_edit(args: argparse.Namespace, config: SessionConfig) -> Path:
    source = load_image_file(args.input_file)
    edits = Edits(
        brightness=args.brightness,
        contrast=args.contrast,
        saturation=args.saturation,
        sharpen=args.sharpen,
        vignette=args.vignette,
    )

    if args.preview:
        result = render_preview(downscale_for_preview(source, config.preview_max_dim), edits)
    else:
        result = render_full_resolution(source, edits)

    output = args.output_file
    if output is None:
        input_path = Path(args.input_file)
        output = input_path.with_name(f"{EDITED_FILE_PREFIX}{input_path.stem}.{config.output_format.lower()}")
    return save_image(result, output)


def run_mask(args: argparse.Namespace) -> Path:
    strokes = load_image_file(args.strokes_file)
    mask: PixelBuffer = encode_binary_mask(strokes)
    return save_image(mask, args.output_file, "PNG")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_session_config(args.config) if args.config else SessionConfig()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Logging
    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper())
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        if args.command == 'edit':
            written = run_edit(args, config)
        else:
            written = run_mask(args)
    except (SceneCanvasError, FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {written}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
