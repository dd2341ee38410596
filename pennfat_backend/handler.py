#!/usr/bin/env python3

# Copyright (c) 2026 Stephen P Smith
# MIT License

"""
PennFat Image Handler
Read-only access to PennFat filesystem images that may be rewritten while open
"""

import os
import mmap
import struct
import logging
import datetime
from typing import Dict, List, Optional, Tuple

from .directory import (
    Dentry, decode_dentries, PennFatError, PennFatSizeMismatchError,
    InvalidBlockNumberError, PennFatCorruptionError, CyclicChainError
)

logger = logging.getLogger(__name__)

HEADER_SIZE = 2
FAT_ENTRY_SIZE = 2
BASE_BLOCK_SIZE = 256
FAT_EOF = 0xFFFF
FAT_FREE = 0x0000
MAX_DATA_BLOCKS = FAT_EOF - 1


class PennFatImage:
    """Handler for PennFat filesystem images"""

    # FAT entry status constants
    ENTRY_FREE = 'FREE'
    ENTRY_EOF = 'EOF'
    ENTRY_USED = 'USED'

    def __init__(self, image_path: str):
        self.image_path = str(image_path)
        self._mmap: Optional[mmap.mmap] = None
        self._mtime_ns = 0
        logger.debug(f"Initializing PennFatImage with {self.image_path}")
        self.load()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def _map_file(self, expected_size: Optional[int] = None) -> mmap.mmap:
        with open(self.image_path, 'rb') as f:
            size = os.fstat(f.fileno()).st_size
            if expected_size is not None and size != expected_size:
                self._size_mismatch(size)
            if size < HEADER_SIZE:
                logger.critical(f"Image file too small: {size} bytes")
                raise PennFatError("Image file too small to contain header")
            # the mapping stays valid after the descriptor is closed
            return mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)

    def load(self):
        """
        Map the image and derive its geometry from the two-byte header.

        Byte 0 is the block size code (block size = 256 << code) and byte 1
        the number of blocks making up the FAT.

        Raises:
            PennFatError: If the header cannot be read.
            PennFatSizeMismatchError: If the file length disagrees with the header.
        """
        self._mtime_ns = os.stat(self.image_path).st_mtime_ns
        data = self._map_file()

        self.block_size_code = data[0]
        self.num_fat_blocks = data[1]
        self.block_size = BASE_BLOCK_SIZE << self.block_size_code
        self.fat_size = self.block_size * self.num_fat_blocks
        self.num_fat_entries = self.fat_size // FAT_ENTRY_SIZE
        # entry 0 is the header, so it never names a data block
        self.data_block_count = max(0, min(self.num_fat_entries - 1, MAX_DATA_BLOCKS))
        self.data_size = self.block_size * self.data_block_count

        self._replace_mapping(data)
        logger.info(
            f"Loaded {self.image_path}: block size {self.block_size}, "
            f"{self.num_fat_blocks} FAT blocks, {self.data_block_count} data blocks"
        )

    def _size_mismatch(self, actual: int):
        logger.critical(
            f"File size mismatch: header expects {self.total_size} bytes, file has {actual}"
        )
        raise PennFatSizeMismatchError(self.total_size, actual)

    def _replace_mapping(self, data: mmap.mmap):
        actual = len(data)
        if actual != self.total_size:
            data.close()
            self._size_mismatch(actual)
        old = self._mmap
        self._mmap = data
        if old is not None:
            old.close()

    def reload(self) -> bool:
        """
        Remap the image if it changed on disk since the last (re)load.

        Cheap enough to call on every refresh tick: when the modification
        time is unchanged nothing is remapped. Geometry is not re-derived;
        a changed file length raises the same error as at load time.

        Returns:
            True if the image was remapped.

        Raises:
            PennFatSizeMismatchError: If the new file length disagrees with the geometry.
        """
        mtime_ns = os.stat(self.image_path).st_mtime_ns
        if mtime_ns == self._mtime_ns:
            return False

        logger.info(f"Image {self.image_path} changed on disk, remapping")
        self._replace_mapping(self._map_file(expected_size=self.total_size))
        self._mtime_ns = mtime_ns
        return True

    def close(self):
        if self._mmap is not None:
            self._mmap.close()
            self._mmap = None

    @property
    def total_size(self) -> int:
        return self.fat_size + self.data_size

    @property
    def last_update_time(self) -> datetime.datetime:
        """Modification time of the image at the last (re)load, in UTC"""
        return datetime.datetime.fromtimestamp(self._mtime_ns / 1e9, tz=datetime.timezone.utc)

    def _bytes(self) -> mmap.mmap:
        if self._mmap is None:
            raise PennFatError("Image is closed")
        return self._mmap

    def classify_entry(self, value: int) -> str:
        """
        Classify a FAT entry value.

        Args:
            value: The 16-bit integer value from the FAT.

        Returns:
            One of the ENTRY_* constants (FREE, EOF, USED).
        """
        if value == FAT_FREE:
            return self.ENTRY_FREE
        elif value == FAT_EOF:
            return self.ENTRY_EOF
        return self.ENTRY_USED

    def get_fat_entry(self, block_num: int) -> int:
        """
        Get the raw FAT entry for a block.

        Args:
            block_num: Index into the FAT. Entry 0 overlaps the header.

        Returns:
            The 16-bit link value.
        """
        if block_num < 0 or block_num >= self.num_fat_entries:
            raise InvalidBlockNumberError(block_num, self.num_fat_entries - 1)
        offset = block_num * FAT_ENTRY_SIZE
        return struct.unpack_from('<H', self._bytes(), offset)[0]

    def get_fat_table(self) -> List[Tuple[int, int]]:
        """
        Get the occupied part of the FAT.

        Returns:
            (block_num, next_block) pairs for every nonzero entry, ascending
            by block number. Links are reported as stored, valid or not.
        """
        fat = self._bytes()[:self.fat_size]
        return [(i, value) for i, (value,) in enumerate(struct.iter_unpack('<H', fat))
                if value != FAT_FREE]

    def get_fat_usage(self) -> Dict[str, int]:
        """
        Count data-block FAT entries by status.

        Returns:
            A mapping from each ENTRY_* constant to the number of entries
            for blocks 1 through data_block_count with that status.
        """
        usage = {self.ENTRY_FREE: 0, self.ENTRY_EOF: 0, self.ENTRY_USED: 0}
        fat = self._bytes()[FAT_ENTRY_SIZE:(self.data_block_count + 1) * FAT_ENTRY_SIZE]
        for (value,) in struct.iter_unpack('<H', fat):
            usage[self.classify_entry(value)] += 1
        return usage

    def get_block(self, block_num: int) -> bytes:
        """
        Read a data block by its 1-based block number.

        Args:
            block_num: Block number, 1 through data_block_count.

        Returns:
            Exactly block_size bytes. The result is a copy and survives reloads.

        Raises:
            InvalidBlockNumberError: If block_num is 0 or past the last data block.
        """
        if block_num < 1 or block_num > self.data_block_count:
            logger.warning(f"Attempted to read invalid block {block_num}")
            raise InvalidBlockNumberError(block_num, self.data_block_count)
        offset = self.fat_size + (block_num - 1) * self.block_size
        return self._bytes()[offset:offset + self.block_size]

    def get_block_chain(self, start_block: int) -> List[int]:
        """
        Follow a FAT chain from start_block to the terminator.

        Returns:
            The block numbers of the chain, in order.

        Raises:
            InvalidBlockNumberError: If the chain links to a non-data block.
            CyclicChainError: If the chain revisits a block.
        """
        chain = []
        visited = set()
        current = start_block

        while True:
            if current < 1 or current > self.data_block_count:
                raise InvalidBlockNumberError(current, self.data_block_count)
            if current in visited:
                logger.warning(f"Loop detected in FAT chain starting at {start_block}")
                raise CyclicChainError(current)
            visited.add(current)
            chain.append(current)

            next_block = self.get_fat_entry(current)
            if next_block == FAT_EOF:
                return chain
            current = next_block

    def read_file(self, start_block: int) -> bytes:
        """
        Read the concatenated blocks of a chain.

        Args:
            start_block: First block of the file.

        Returns:
            Every block of the chain, including the unused tail of the last one.
        """
        logger.debug(f"Reading chain starting at block {start_block}")
        return b''.join(self.get_block(block) for block in self.get_block_chain(start_block))

    def extract_file(self, dentry: Dentry) -> bytes:
        """
        Extract a file's contents using its directory entry.

        Args:
            dentry: The file's directory entry.

        Returns:
            The first dentry.size bytes of the file's chain.

        Raises:
            PennFatCorruptionError: If the chain is shorter than the recorded size.
        """
        if dentry.first_block == 0:
            return b''

        data = self.read_file(dentry.first_block)
        if len(data) < dentry.size:
            raise PennFatCorruptionError(
                f"File truncated: expected {dentry.size} bytes, chain holds {len(data)}"
            )
        return data[:dentry.size]

    def read_directory(self, start_block: int) -> List[Dentry]:
        """
        Decode every block of a directory chain as dentries.

        Args:
            start_block: First block of the directory.

        Returns:
            All dentry slots of the directory in chain order, used or not.
        """
        entries = []
        for block in self.get_block_chain(start_block):
            entries.extend(decode_dentries(self.get_block(block)))
        return entries
