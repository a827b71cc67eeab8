#!/usr/bin/env python3
"""
Text rendering of `ls` listings.

The engine hands hosts a structured ListingResult; this module turns one
into the text a terminal shows, honouring the -l, -h and -s flags.
"""

from typing import List

from . import paths
from .results import ListingResult
from .vfs import VirtualFileSystem

BLOCK_SIZE = 1024


def format_size(size: int) -> str:
    """Format size in human-readable form (512B, 1.5K, 2.3M)."""
    if size < BLOCK_SIZE:
        return f"{size}B"
    value = size / 1024
    for unit in ['K', 'M']:
        if value < 1024:
            return f"{value:.1f}{unit}"
        value /= 1024
    return f"{value:.1f}G"


def block_count(size: int) -> int:
    """Number of 1K blocks needed for size bytes."""
    return (size + BLOCK_SIZE - 1) // BLOCK_SIZE


def format_listing(listing: ListingResult, fs: VirtualFileSystem) -> str:
    """Render a listing the way `ls` prints it."""
    stats = [fs.stat(paths.join(listing.path, entry.name)) for entry in listing.entries]
    sizes = [stat['size'] if stat is not None else 0 for stat in stats]

    def show_size(size: int) -> str:
        return format_size(size) if listing.human_readable else str(size)

    def show_blocks(size: int) -> str:
        blocks = block_count(size)
        return format_size(blocks * BLOCK_SIZE) if listing.human_readable else str(blocks)

    lines: List[str] = []
    if listing.show_blocks:
        total = sum(block_count(size) for size in sizes)
        lines.append(f"total {format_size(total * BLOCK_SIZE) if listing.human_readable else total}")

    for entry, stat, size in zip(listing.entries, stats, sizes):
        prefix = f"{show_blocks(size):>4} " if listing.show_blocks else ''
        if listing.long_format and stat is not None:
            lines.append(f"{prefix}{stat['permissions']} {show_size(size):>8} "
                         f"{stat['mtime_display']} "
                         f"{entry.display_name}")
        else:
            lines.append(f"{prefix}{entry.display_name}")

    return '\n'.join(lines)
