#!/usr/bin/env python3

# Copyright (c) 2026 Stephen P Smith
# MIT License

"""Display helpers for PennFat blocks, FAT links and dentries"""

import datetime
from typing import Optional

from .directory import (Dentry, iter_dentries, mtime_to_datetime, TYPE_FILE, TYPE_DIRECTORY,
                        TYPE_SYMLINK)

RAW_PLACEHOLDER = '.'

_TYPE_NAMES = {
    TYPE_FILE: 'file',
    TYPE_DIRECTORY: 'directory',
    TYPE_SYMLINK: 'symlink',
}


def decode_name(raw: bytes) -> str:
    """Decode a fixed-width name field, dropping NUL padding and replacing bad UTF-8"""
    return raw.split(b'\x00', 1)[0].decode('utf-8', errors='replace')


def _format_datetime(dt: Optional[datetime.datetime]) -> str:
    if dt is None:
        return "invalid"
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def format_mtime(mtime_ms: int) -> str:
    """Format a millisecond timestamp as YYYY-MM-DD HH:MM:SS (UTC)

    Values past the end of year 9999 are reported as "invalid".
    """
    return _format_datetime(mtime_to_datetime(mtime_ms))


def render_raw(data: bytes) -> str:
    """
    Render block bytes as text for the raw view.

    Bytes below 32 or above 176 become '.', every other byte maps to the
    character with the same code point.

    Args:
        data: The bytes to render.

    Returns:
        A string with exactly one character per input byte.
    """
    return ''.join(RAW_PLACEHOLDER if b < 32 or b > 176 else chr(b) for b in data)


def type_name(type_byte: int) -> str:
    return _TYPE_NAMES.get(type_byte, f"unknown({type_byte})")


def format_dentry(dentry: Dentry) -> str:
    """Format a dentry as a single display line"""
    return (
        f"name: {decode_name(dentry.name)}, size: {dentry.size}, "
        f"first_block: {dentry.first_block}, type: {dentry.type} ({type_name(dentry.type)}), "
        f"perm: {dentry.perm}, mtime: {_format_datetime(dentry.mtime_datetime)},"
    )


def format_fat_link(block_num: int, value: int) -> str:
    # 4 hex digits; indices past 0xffff simply widen
    return f"{block_num:04x} -> {value:04x}"


def format_block(block: bytes, raw_mode: bool) -> str:
    """
    Render a block for the block view.

    Args:
        block: The raw block bytes.
        raw_mode: Render bytes as text instead of decoding dentries.

    Returns:
        The raw rendering, or one formatted dentry per line.
    """
    if raw_mode:
        return render_raw(block)
    return ''.join(f"{format_dentry(d)}\n" for d in iter_dentries(block))
