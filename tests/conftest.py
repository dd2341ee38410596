import struct

import pytest

from pennfat_backend.directory import Dentry


def build_image(block_size_code: int = 0, num_fat_blocks: int = 1, fat=None, blocks=None) -> bytearray:
    """Build a PennFat image in memory

    fat maps FAT index -> link value, blocks maps block number -> contents.
    """
    block_size = 256 << block_size_code
    fat_size = block_size * num_fat_blocks
    data_blocks = min(fat_size // 2 - 1, 0xFFFE)
    image = bytearray(fat_size + data_blocks * block_size)
    image[0] = block_size_code
    image[1] = num_fat_blocks

    for index, value in (fat or {}).items():
        struct.pack_into('<H', image, index * 2, value)

    for block_num, data in (blocks or {}).items():
        offset = fat_size + (block_num - 1) * block_size
        image[offset:offset + len(data)] = data

    return image


def make_dentry(name: bytes = b"file.txt", size: int = 0, first_block: int = 0,
                type: int = 0, perm: int = 6, mtime: int = 0) -> Dentry:
    return Dentry(name.ljust(32, b'\x00'), size, first_block, type, perm, mtime)


@pytest.fixture
def write_image(tmp_path):
    """Write an image to disk and return its path"""
    def _write(image: bytes, name: str = "test.pfat") -> str:
        path = tmp_path / name
        path.write_bytes(bytes(image))
        return str(path)
    return _write
