"""
Conversion Pipeline Tests
=========================

End-to-end tests from ISX bytes to finished ROM images.
"""

import pytest

from isx2gb import ConvertOptions, ISXFile, convert
from isx2gb.errors import (
    MalformedHeaderError,
    RegionOverflowError,
    UnsupportedRomSizeError,
)
from isx2gb.isx import RecordStatus, Region

from isx_builders import (
    LOGO_ADDRESS,
    NINTENDO_LOGO,
    code_record,
    debug_record,
    make_isx,
    range_record,
    symbol_record,
)


PAYLOAD = bytes([0xDE, 0xAD, 0xBE, 0xEF])


@pytest.fixture
def cartridge_isx() -> bytes:
    """A minimal bootable program: the logo and four bytes of code."""
    return make_isx(
        code_record(0, LOGO_ADDRESS, NINTENDO_LOGO),
        code_record(0, 0x0150, PAYLOAD),
    )


class TestConvert:
    """Tests for whole-file conversion."""

    def test_single_bank_image(self, cartridge_isx: bytes):
        rom = convert(cartridge_isx)

        assert len(rom) == 0x4000
        assert rom[0x0150:0x0154] == PAYLOAD
        assert rom[LOGO_ADDRESS:LOGO_ADDRESS + 48] == NINTENDO_LOGO

        # Header bytes are all zero: 0 - 25 = $E7
        assert rom[0x014D] == 0xE7
        expected = (sum(NINTENDO_LOGO) + sum(PAYLOAD) + 0xE7) & 0xFFFF
        assert rom[0x014E:0x0150] == expected.to_bytes(2, "big")

    def test_conversion_is_deterministic(self, cartridge_isx: bytes):
        assert convert(cartridge_isx) == convert(cartridge_isx)

    def test_skipped_records_do_not_matter(self, cartridge_isx: bytes):
        noisy = cartridge_isx + range_record(3) + debug_record(0x22, bytes(40))
        assert convert(noisy) == convert(cartridge_isx)

    def test_without_logo_checksums_untouched(self):
        rom = convert(make_isx(code_record(0, 0x0150, PAYLOAD)))
        assert rom[0x014D:0x0150] == b"\x00\x00\x00"

    def test_options(self, cartridge_isx: bytes):
        rom = convert(cartridge_isx, ConvertOptions(fill=True, round=True))
        assert len(rom) == 0x8000
        assert rom[0x7FFF] == 0xFF
        assert rom[0x0150:0x0154] == PAYLOAD

    def test_spanning_record_uses_two_banks(self):
        data = make_isx(code_record(0, 0x3FF0, bytes(range(0x20))))
        rom = convert(data)
        assert len(rom) == 0x8000
        assert rom[0x3FF0:0x4010] == bytes(range(0x20))

    def test_sram_and_ram_are_not_written(self):
        data = make_isx(
            code_record(0, 0x0150, PAYLOAD),
            code_record(0, 0xA000, b"\x55" * 0x100),
            code_record(0, 0xC000, b"\x66" * 0x100),
        )
        rom = convert(data)
        assert len(rom) == 0x4000
        assert 0x55 not in rom
        assert 0x66 not in rom


class TestFatalErrors:
    """Tests for errors that stop the build."""

    def test_unsupported_rom_size(self):
        data = make_isx(code_record(0, 0x0150, PAYLOAD), code_record(0x80, 0x4000, PAYLOAD))
        with pytest.raises(UnsupportedRomSizeError):
            convert(data)

    def test_overflow_blocks_assembly(self):
        data = make_isx(code_record(2, 0x7FF0, bytes(0x20)))
        isx = ISXFile.from_bytes(data)

        # The layout is still available for reporting
        layouts = isx.layout()
        assert layouts[Region.ROM].overflows[0].status is RecordStatus.OVERFLOW

        with pytest.raises(RegionOverflowError):
            isx.build_rom()

    def test_ram_overflow_blocks_assembly(self):
        data = make_isx(code_record(0, 0x0150, PAYLOAD), code_record(0, 0xDFFF, b"\x00\x00"))
        with pytest.raises(RegionOverflowError):
            convert(data)

    def test_bad_header(self):
        with pytest.raises(MalformedHeaderError):
            convert(b"NOPE" + bytes(40))


class TestISXFile:
    """Tests for the decoded file object."""

    def test_symbols_are_sorted(self):
        data = make_isx(
            code_record(0, 0x0150, PAYLOAD),
            symbol_record([
                ("bank2", 0x1000, 0x4000, 2),
                ("start", 0x1000, 0x0150, 0),
                ("hidden", 0x0001, 0x0100, 0),
                ("vblank", 0x1000, 0x0040, 0),
            ]),
        )
        isx = ISXFile.from_bytes(data)
        assert [s.name for s in isx.symbols()] == ["vblank", "start", "bank2"]

    def test_patch_rom(self, cartridge_isx: bytes):
        base = bytearray(convert(cartridge_isx))
        fix = ISXFile.from_bytes(make_isx(code_record(0, 0x0150, b"\x00\xC9")))

        image, patches = fix.patch_rom(bytes(base))

        assert patches == [(0x0150, 2)]
        assert image[0x0150:0x0154] == b"\x00\xC9\xBE\xEF"
        # Checksums follow the patched contents
        assert image[0x014E:0x0150] != base[0x014E:0x0150]
        assert image == convert(make_isx(
            code_record(0, LOGO_ADDRESS, NINTENDO_LOGO),
            code_record(0, 0x0150, b"\x00\xC9\xBE\xEF"),
        ))
