import argparse
import logging
import sys
from pathlib import Path

from codeart.converter import generate
from codeart.errors import CodeArtError
from codeart.loader import load_image
from codeart.sampling import TARGET_MAX
from codeart.styles import LEGACY_CONFIG, Style


def main(argv=None):
    parser = argparse.ArgumentParser(description="Turn an image into p5.js drawing code")
    parser.add_argument("image", help="Path to input image (PNG, JPEG, SVG, ...)")
    parser.add_argument(
        "-s", "--style", default=Style.PIXELS.value, choices=[s.value for s in Style], help="Drawing style (default: pixels)"
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
        default=False,
        help="Use the original converter's denser grid and keep any non-transparent pixel",
    )
    parser.add_argument(
        "-m",
        "--max-size",
        type=int,
        default=TARGET_MAX,
        help=f"Longest canvas side in pixels (default: {TARGET_MAX})",
    )
    parser.add_argument("-o", "--output", default=None, help="Write the program to a file instead of stdout")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log progress to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        sys.exit(1)

    try:
        buffer = load_image(image_path)
        code = generate(buffer, args.style, config=LEGACY_CONFIG if args.legacy else None, target_max=args.max_size)
    except CodeArtError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)

    if args.output:
        Path(args.output).write_text(code)
    else:
        sys.stdout.write(code)
