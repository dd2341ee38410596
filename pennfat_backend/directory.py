#!/usr/bin/env python3

# Copyright (c) 2026 Stephen P Smith
# MIT License

"""
PennFat Directory Records

This module provides the low-level logic for PennFat directory blocks:
- The exception hierarchy shared by the whole backend.
- The 64-byte directory entry (dentry) record.
- Splitting a data block into its packed dentries.

Dentry layout (little-endian):
    name[32] | size:u32 | first_block:u16 | type:u8 | perm:u8 | mtime:u64 | reserved[16]

Nothing here validates fields against each other; a dentry is whatever its
64 bytes say, including free and never-written slots.
"""

import struct
import logging
import datetime
from dataclasses import dataclass
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)

DENTRY_SIZE = 64
DENTRY_NAME_LEN = 32
DENTRY_RESERVED_LEN = 16
DENTRY_FORMAT = '<32sIHBBQ16s'

# Last millisecond of 9999-12-31T23:59:59 UTC. Anything later is garbage.
MAX_VALID_MTIME = 253402300799000

TYPE_FILE = 0
TYPE_DIRECTORY = 1
TYPE_SYMLINK = 2

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


class PennFatError(Exception):
    """Base exception for PennFat image errors"""
    pass


class PennFatSizeMismatchError(PennFatError):
    """Header geometry does not match the size of the image file"""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"File size does not match FAT configuration: expected {expected} bytes, got {actual}"
        )


class InvalidBlockNumberError(PennFatError):
    """Requested block is reserved or past the end of the data region"""

    def __init__(self, block_num: int, max_valid: int):
        self.block_num = block_num
        self.max_valid = max_valid
        super().__init__(f"Invalid block number {block_num}, must be >=1 and <= {max_valid}")


class PennFatCorruptionError(PennFatError):
    """The FAT or a directory describes an impossible structure"""
    pass


class CyclicChainError(PennFatCorruptionError):
    """A FAT chain revisits a block before reaching the terminator"""

    def __init__(self, block_num: int):
        self.block_num = block_num
        super().__init__(f"Loop detected in FAT chain at block {block_num}")


class DentryAlignmentError(PennFatError):
    """Block length cannot be split into whole 64-byte dentries"""
    pass


@dataclass(frozen=True)
class Dentry:
    """A single 64-byte PennFat directory entry"""
    name: bytes
    size: int
    first_block: int
    type: int
    perm: int
    mtime: int
    reserved: bytes = bytes(DENTRY_RESERVED_LEN)

    @classmethod
    def unpack(cls, data: bytes) -> "Dentry":
        """
        Parse one dentry from exactly 64 bytes.

        Args:
            data: The raw record.

        Returns:
            The decoded Dentry. No field is range checked.
        """
        return cls(*struct.unpack(DENTRY_FORMAT, data))

    def pack(self) -> bytes:
        return struct.pack(DENTRY_FORMAT, self.name, self.size, self.first_block,
                           self.type, self.perm, self.mtime, self.reserved)

    @property
    def mtime_datetime(self) -> Optional[datetime.datetime]:
        return mtime_to_datetime(self.mtime)


def mtime_to_datetime(mtime_ms: int) -> Optional[datetime.datetime]:
    """
    Convert a dentry mtime (milliseconds since the Unix epoch) to UTC.

    Returns:
        An aware datetime, or None when the value is past the year 9999 sentinel.
    """
    if mtime_ms > MAX_VALID_MTIME:
        return None
    return _EPOCH + datetime.timedelta(milliseconds=mtime_ms)


def iter_dentries(block: bytes) -> Iterator[Dentry]:
    """
    Iterates through the packed dentries of a block.

    Args:
        block: The raw block bytes.

    Yields:
        One Dentry per 64-byte slot, in order.

    Raises:
        DentryAlignmentError: If the block length is not a multiple of 64.
    """
    if len(block) % DENTRY_SIZE:
        logger.warning(f"Block of {len(block)} bytes is not a whole number of dentries")
        raise DentryAlignmentError(
            f"Block size {len(block)} is not a multiple of {DENTRY_SIZE}"
        )
    for offset in range(0, len(block), DENTRY_SIZE):
        yield Dentry.unpack(block[offset:offset + DENTRY_SIZE])


def decode_dentries(block: bytes) -> List[Dentry]:
    """Decode a whole block into a list of dentries"""
    return list(iter_dentries(block))
