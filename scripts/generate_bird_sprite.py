#!/usr/bin/env python3
"""Generate the placeholder bird sprite drawn by the viewer."""
from __future__ import annotations

import argparse
import struct
import zlib
from pathlib import Path


def _inside_arrow(px: float, py: float, size: int) -> bool:
    # arrowhead pointing up: rotation 0 faces -y
    tip = (size / 2.0, 0.0)
    left = (0.0, size - 1.0)
    right = (size - 1.0, size - 1.0)
    notch = (size / 2.0, size * 0.7)

    def side(a: tuple[float, float], b: tuple[float, float]) -> float:
        return (b[0] - a[0]) * (py - a[1]) - (b[1] - a[1]) * (px - a[0])

    in_outer = side(tip, right) >= 0 and side(right, left) >= 0 and side(left, tip) >= 0
    in_notch = side(left, notch) >= 0 and side(notch, right) >= 0 and side(right, left) >= 0
    return in_outer and not in_notch


def build_sprite_png(size: int, color: tuple[int, int, int]) -> bytes:
    r, g, b = color
    rows = []
    for y in range(size):
        row = bytearray(b"\x00")
        for x in range(size):
            alpha = 255 if _inside_arrow(x + 0.5, y + 0.5, size) else 0
            row.extend((r, g, b, alpha))
        rows.append(bytes(row))
    compressed = zlib.compress(b"".join(rows))

    def chunk(chunk_type: bytes, data: bytes) -> bytes:
        return (
            struct.pack(">I", len(data))
            + chunk_type
            + data
            + struct.pack(">I", zlib.crc32(chunk_type + data) & 0xFFFFFFFF)
        )

    ihdr = struct.pack(">IIBBBBB", size, size, 8, 6, 0, 0, 0)
    return b"\x89PNG\r\n\x1a\n" + chunk(b"IHDR", ihdr) + chunk(b"IDAT", compressed) + chunk(
        b"IEND", b""
    )


def write_asset(path: Path, data: bytes, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(f"{path} already exists. Use --overwrite to replace.")
    path.write_bytes(data)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the placeholder bird sprite.")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("assets"),
        help="Directory to write the sprite into.",
    )
    parser.add_argument("--size", type=int, default=16, help="Sprite edge length in pixels.")
    parser.add_argument(
        "--overwrite", action="store_true", help="Overwrite existing files."
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    write_asset(output_dir / "bird.png", build_sprite_png(args.size, (235, 235, 240)), args.overwrite)

    print(f"Generated bird sprite in {output_dir}")


if __name__ == "__main__":
    main()
