#!/usr/bin/env python3
"""Batch extract gradients for a directory of images."""

import argparse
import re
import sys
import time
from pathlib import Path

from extract_gradient import DEFAULT_DIRECTION, DEFAULT_PALETTE_SIZE, DEFAULT_TRAILING_STOP, run_pipeline


def find_images(directory: Path) -> list[Path]:
    """Find all image files in directory."""
    extensions = {'.jpg', '.jpeg', '.png', '.webp'}
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in extensions)


def css_property_name(image_path: Path) -> str:
    """Custom property name for an image, e.g. `--poster-01-gradient`."""
    slug = re.sub(r'[^a-z0-9]+', '-', image_path.stem.lower()).strip('-') or 'image'
    return f'--{slug}-gradient'


def render_css(gradients: list[tuple[Path, str]]) -> str:
    """Wrap gradients in a :root block of custom properties."""
    lines = [':root {']
    for image_path, gradient in gradients:
        lines.append(f'  {css_property_name(image_path)}: {gradient};')
    lines.append('}')
    return '\n'.join(lines) + '\n'


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Extract a CSS gradient for every image in a directory.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Directory containing images'
    )
    parser.add_argument(
        '--output', '-o',
        default=None,
        help='Write the gradients to this CSS file as custom properties'
    )
    parser.add_argument(
        '--palette-size', '-k',
        type=int,
        default=DEFAULT_PALETTE_SIZE,
        help=f'Number of colours per image (default: {DEFAULT_PALETTE_SIZE})'
    )
    parser.add_argument(
        '--direction', '-d',
        default=DEFAULT_DIRECTION,
        help=f'Gradient direction after "to" (default: {DEFAULT_DIRECTION})'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Seed for centroid initialisation'
    )

    args = parser.parse_args(argv)
    input_dir = Path(args.input)

    # Validate input directory
    if not input_dir.is_dir():
        print(f"Error: Input directory not found: {input_dir}", file=sys.stderr)
        sys.exit(2)

    images = find_images(input_dir)
    if not images:
        print(f"No images found in {input_dir}", file=sys.stderr)
        sys.exit(2)

    total = len(images)
    gradients = []
    failed = []

    batch_start = time.perf_counter()

    for i, image_path in enumerate(images, 1):
        try:
            img_start = time.perf_counter()
            result = run_pipeline(
                str(image_path),
                palette_size=args.palette_size,
                direction=args.direction,
                trailing_stop=DEFAULT_TRAILING_STOP,
                rng=args.seed,
            )
            img_elapsed = time.perf_counter() - img_start

            print(f"[{i}/{total}] {image_path.name} → {result.gradient} ({img_elapsed:.2f}s)")
            gradients.append((image_path, result.gradient))

        except ValueError as e:
            error_msg = f"{type(e).__name__}: {e}"
            print(f"[{i}/{total}] {image_path.name} → ERROR: {error_msg}", file=sys.stderr)
            failed.append((image_path.name, error_msg))

    batch_elapsed = time.perf_counter() - batch_start

    if args.output and gradients:
        output_path = Path(args.output)
        if output_path.exists():
            print(f"  Warning: Overwriting {output_path}", file=sys.stderr)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(render_css(gradients))
        print(f"Wrote: {output_path}")

    # Summary
    print()
    print(f"Completed: {len(gradients)}/{total} succeeded in {batch_elapsed:.2f}s")
    if failed:
        print(f"Failed ({len(failed)}):")
        for name, error in failed:
            print(f"  - {name}: {error}")
        sys.exit(1)


if __name__ == '__main__':
    main()
