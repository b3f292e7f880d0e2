"""Stable color assignment for chart legends.

Colors are drawn from a fixed palette. When the caller knows the position of
a group in the sorted output, the position selects the slot; otherwise an
FNV-1a hash of the group id does. Either way the same inputs always give the
same color, so repeated renders of a report stay visually stable.

The hash is NOT cryptographic; it only spreads ids over palette slots.
"""

from typing import Optional, Sequence

DEFAULT_PALETTE = (
    "#3b82f6",  # blue
    "#ef4444",  # red
    "#10b981",  # emerald
    "#f59e0b",  # amber
    "#8b5cf6",  # violet
    "#ec4899",  # pink
    "#06b6d4",  # cyan
    "#f97316",  # orange
    "#14b8a6",  # teal
    "#6366f1",  # indigo
)

MIN_PALETTE_SIZE = 10

_FNV32_OFFSET_BASIS = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1a_32(value: str) -> int:
    """Compute the 32-bit FNV-1a hash of a string's UTF-8 bytes.

    Example:
        >>> fnv1a_32("")
        2166136261
        >>> fnv1a_32("a")
        3826002220
    """
    h = _FNV32_OFFSET_BASIS
    for byte in value.encode("utf-8"):
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def validate_palette(palette: Sequence[str]) -> Sequence[str]:
    """Ensure a palette has enough distinct slots.

    Raises:
        ValueError: If the palette has fewer than MIN_PALETTE_SIZE colors
    """
    if len(palette) < MIN_PALETTE_SIZE:
        raise ValueError(
            f"Color palette must have at least {MIN_PALETTE_SIZE} colors, "
            f"got {len(palette)}"
        )
    return palette


def color_for_group(
    group_id: str,
    index: Optional[int] = None,
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> str:
    """Pick the display color for a group.

    Args:
        group_id: Group identifier, hashed when no index is given
        index: Position of the group in sorted order (dominates the hash)
        palette: Colors to choose from

    Returns:
        A palette entry

    Example:
        >>> color_for_group("P1", 0)
        '#3b82f6'
        >>> color_for_group("P2", 11)
        '#ef4444'
    """
    validate_palette(palette)
    if index is not None and index >= 0:
        return palette[index % len(palette)]
    return palette[fnv1a_32(group_id) % len(palette)]
