"""Instruction pointer to binary image attribution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .model import BinaryImageInfo


def image_for_address(images: Iterable[BinaryImageInfo], address: int) -> Optional[BinaryImageInfo]:
    """Return the first image whose ``[base, base + size)`` range holds ``address``.

    Images are scanned in the order given; report images never overlap so
    the order only matters for malformed input. The image object itself is
    returned, not a copy.
    """
    for image in images:
        if image.base_address <= address < image.base_address + image.size:
            return image
    return None
