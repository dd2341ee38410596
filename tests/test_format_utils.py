import pytest

from pennfat_backend.format_utils import (
    decode_name, format_mtime, render_raw, type_name, format_dentry,
    format_fat_link, format_block
)
from pennfat_backend.directory import DentryAlignmentError
from conftest import make_dentry


class TestNameDecoding:
    def test_padding_removed(self):
        assert decode_name(b"readme".ljust(32, b"\x00")) == "readme"

    def test_full_width_name(self):
        assert decode_name(b"a" * 32) == "a" * 32

    def test_invalid_utf8_replaced(self):
        assert decode_name(b"ab\xffcd") == "ab�cd"

    def test_utf8_name(self):
        assert decode_name("café".encode("utf-8")) == "café"

    def test_round_trip_through_dentry(self):
        d = make_dentry(name=b"report-2024.txt", size=77, first_block=12, type=0, perm=6)
        assert decode_name(d.name) == "report-2024.txt"


class TestMtimeFormatting:
    def test_epoch(self):
        assert format_mtime(0) == "1970-01-01 00:00:00"

    def test_known_time(self):
        # 2023-11-14 22:13:20 UTC
        assert format_mtime(1_700_000_000_000) == "2023-11-14 22:13:20"

    def test_threshold_formats(self):
        assert format_mtime(253402300799000) == "9999-12-31 23:59:59"

    def test_one_past_threshold_is_invalid(self):
        assert format_mtime(253402300800000) == "invalid"

    def test_garbage_is_invalid(self):
        assert format_mtime(0xFFFFFFFFFFFFFFFF) == "invalid"


class TestRawRendering:
    def test_printable_kept(self):
        assert render_raw(b"Hello, World!") == "Hello, World!"

    def test_control_bytes_replaced(self):
        assert render_raw(b"\x00\x01\x1f\n") == "...."

    def test_boundaries(self):
        assert render_raw(bytes([31, 32, 176, 177, 255])) == ". \xb0.."

    def test_one_char_per_byte(self):
        data = bytes(range(256))
        assert len(render_raw(data)) == 256


class TestLines:
    def test_format_dentry(self):
        d = make_dentry(name=b"a.txt", size=10, first_block=3, type=1, perm=7,
                        mtime=1_700_000_000_000)
        assert format_dentry(d) == (
            "name: a.txt, size: 10, first_block: 3, type: 1 (directory), perm: 7, "
            "mtime: 2023-11-14 22:13:20,"
        )

    def test_format_dentry_invalid_mtime(self):
        d = make_dentry(mtime=253402300800000)
        assert format_dentry(d).endswith("mtime: invalid,")

    def test_format_dentry_unknown_type(self):
        assert "type: 200 (unknown(200))," in format_dentry(make_dentry(type=200))

    def test_format_fat_link(self):
        assert format_fat_link(1, 0xFFFF) == "0001 -> ffff"
        assert format_fat_link(0x2a, 0x2b) == "002a -> 002b"

    @pytest.mark.parametrize("value,expected", [
        (0, "file"), (1, "directory"), (2, "symlink"), (9, "unknown(9)"),
    ])
    def test_type_name(self, value, expected):
        assert type_name(value) == expected


class TestBlockFormatting:
    def test_raw_mode(self):
        assert format_block(b"hi\x00", raw_mode=True) == "hi."

    def test_directory_mode(self):
        block = make_dentry(name=b"one").pack() + make_dentry(name=b"two").pack()
        lines = format_block(block, raw_mode=False).splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("name: one,")
        assert lines[1].startswith("name: two,")

    def test_directory_mode_misaligned(self):
        with pytest.raises(DentryAlignmentError):
            format_block(bytes(10), raw_mode=False)
