#!/usr/bin/env python3
"""
Tray icon provisioning
Draws the placeholder glyph and writes it next to the data file on first run
"""

import logging
from pathlib import Path

from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)

ICON_SIZE = 32


def create_icon_image(size: int = ICON_SIZE) -> Image.Image:
    """Create the to-do glyph: three black bars on a transparent canvas"""
    image = Image.new('RGBA', (size, size), color=(0, 0, 0, 0))
    draw = ImageDraw.Draw(image)

    # Bars at rows 8, 15, 22 spanning columns 8..22 on the 32px grid
    left = size * 8 // ICON_SIZE
    right = size * 22 // ICON_SIZE
    thickness = max(size // ICON_SIZE, 1)
    for row in (8, 15, 22):
        top = size * row // ICON_SIZE
        draw.rectangle(
            [left, top, right, top + thickness - 1],
            fill=(0, 0, 0, 255),
        )

    return image


def ensure_icon(path) -> str:
    """
    Return the absolute path of the tray icon, creating it if missing

    An existing file is returned as-is. On failure an empty string is
    returned and the caller falls back to the in-memory image.
    """
    icon_path = Path(path)
    if icon_path.exists():
        return str(icon_path.resolve())

    try:
        create_icon_image().save(icon_path, format='PNG')
    except (OSError, ValueError) as e:
        logger.error(f"Failed to create icon file {icon_path}: {e}")
        return ""

    logger.info(f"Created tray icon at {icon_path}")
    return str(icon_path.resolve())
