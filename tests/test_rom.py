"""
ROM Module Unit Tests
=====================

Tests for image assembly, patching and the cartridge header checksums.
"""

import pytest

from isx2gb.errors import PatchBoundaryError
from isx2gb.isx import PlacementRecord
from isx2gb.rom import (
    LOGO_CRC,
    assemble_rom,
    calculate_global_checksum,
    calculate_header_checksum,
    fill_image,
    has_valid_logo,
    is_cgb_only,
    logo_crc32,
    patch_rom,
    rom_extension,
    round_banks,
    update_checksums,
)

from isx_builders import LOGO_ADDRESS, NINTENDO_LOGO


@pytest.fixture
def logo_rom() -> bytearray:
    """A 32 KiB image carrying the Nintendo logo and a title."""
    rom = bytearray(0x8000)
    rom[LOGO_ADDRESS:LOGO_ADDRESS + len(NINTENDO_LOGO)] = NINTENDO_LOGO
    rom[0x0134:0x0134 + 5] = b"TESTS"
    rom[0x1234] = 0x99
    return rom


# =============================================================================
# Assembler Tests
# =============================================================================

class TestRoundBanks:
    """Tests for power-of-two rounding."""

    @pytest.mark.parametrize("banks,rounded", [
        (1, 2), (2, 2), (3, 4), (4, 4), (5, 8), (8, 8), (9, 16), (33, 64), (128, 128),
    ])
    def test_round_banks(self, banks: int, rounded: int):
        assert round_banks(banks) == rounded


class TestFillImage:
    """Tests for image allocation."""

    def test_zero_fill(self):
        assert fill_image(0x4000, 0x00) == bytearray(0x4000)

    @pytest.mark.parametrize("size", [1, 3, 0x4000, 0x4000 * 3])
    def test_padding_fill(self, size: int):
        image = fill_image(size, 0xFF)
        assert len(image) == size
        assert image == bytearray(b"\xFF" * size)


class TestAssembleRom:
    """Tests for building images from placement records."""

    def test_single_bank(self):
        data = b"\xDE\xAD\xBE\xEF"
        rom = assemble_rom([PlacementRecord(0, 0x0150, 0, 4)], data, banks=1)
        assert len(rom) == 0x4000
        assert rom[0x0150:0x0154] == data

    def test_records_land_at_bank_address(self):
        data = b"\x11\x22\x33"
        records = [PlacementRecord(0, 0x0000, 0, 1), PlacementRecord(2, 0x0010, 1, 2)]
        rom = assemble_rom(records, data, banks=3)
        assert len(rom) == 3 * 0x4000
        assert rom[0] == 0x11
        assert rom[2 * 0x4000 + 0x10:2 * 0x4000 + 0x12] == b"\x22\x33"

    def test_split_record_is_contiguous_in_image(self):
        data = bytes(range(0x20))
        records = [
            PlacementRecord(0, 0x3FF0, 0, 0x10),
            PlacementRecord(1, 0x0000, 0x10, 0x10),
        ]
        rom = assemble_rom(records, data, banks=2)
        assert rom[0x3FF0:0x4010] == data

    def test_fill_and_round(self):
        rom = assemble_rom([PlacementRecord(0, 0, 0, 1)], b"\x00", banks=3,
                           fill_byte=0xFF, round_size=True)
        assert len(rom) == 4 * 0x4000
        assert rom[0] == 0x00
        assert rom[1:] == b"\xFF" * (len(rom) - 1)

    def test_no_records(self):
        assert assemble_rom([], b"", banks=1) == bytearray(0x4000)


class TestPatchRom:
    """Tests for applying records to an existing image."""

    def test_patch_leaves_rest_untouched(self):
        original = bytes(b"\xAA" * 0x8000)
        image, patches = patch_rom(original, [PlacementRecord(1, 0x0100, 0, 2)], b"\x01\x02")

        assert image[0x4100:0x4102] == b"\x01\x02"
        assert image[:0x4100] == original[:0x4100]
        assert image[0x4102:] == original[0x4102:]
        assert patches == [(0x4100, 2)]
        assert original[0x4100] == 0xAA

    def test_patch_past_end_fails(self):
        with pytest.raises(PatchBoundaryError) as exc_info:
            patch_rom(bytes(0x8000), [PlacementRecord(2, 0x0000, 0, 1)], b"\x01")
        assert exc_info.value.address == 0x8000
        assert exc_info.value.rom_size == 0x8000


# =============================================================================
# Checksum Tests
# =============================================================================

class TestLogo:
    """Tests for the logo check."""

    def test_logo_crc(self):
        assert logo_crc32(NINTENDO_LOGO[:47]) == LOGO_CRC

    def test_valid_logo(self, logo_rom: bytearray):
        assert has_valid_logo(logo_rom)

    def test_damaged_logo(self, logo_rom: bytearray):
        logo_rom[LOGO_ADDRESS + 10] ^= 0x01
        assert not has_valid_logo(logo_rom)

    def test_last_logo_byte_is_not_checked(self, logo_rom: bytearray):
        logo_rom[0x0133] = 0x00
        assert has_valid_logo(logo_rom)

    def test_short_image(self):
        assert not has_valid_logo(bytes(0x100))


class TestChecksums:
    """Tests for header and global checksums."""

    def test_header_checksum_of_blank_header(self):
        """25 zero bytes: 0 - 25 * 1 = -25 = $E7."""
        assert calculate_header_checksum(bytes(0x150)) == 0xE7

    def test_header_checksum_formula(self, logo_rom: bytearray):
        expected = 0
        for byte in logo_rom[0x0134:0x014D]:
            expected = (expected - byte - 1) & 0xFF
        assert calculate_header_checksum(logo_rom) == expected

    def test_update_checksums(self, logo_rom: bytearray):
        assert update_checksums(logo_rom)

        assert logo_rom[0x014D] == calculate_header_checksum(logo_rom)
        stored = (logo_rom[0x014E] << 8) | logo_rom[0x014F]
        assert stored == (sum(logo_rom) - logo_rom[0x014E] - logo_rom[0x014F]) & 0xFFFF
        assert calculate_global_checksum(logo_rom) == stored

    def test_stale_global_checksum_is_ignored(self, logo_rom: bytearray):
        clean = bytearray(logo_rom)
        logo_rom[0x014E:0x0150] = b"\x12\x34"
        update_checksums(clean)
        update_checksums(logo_rom)
        assert logo_rom == clean

    def test_idempotent(self, logo_rom: bytearray):
        update_checksums(logo_rom)
        once = bytes(logo_rom)
        update_checksums(logo_rom)
        assert bytes(logo_rom) == once

    def test_no_logo_no_patch(self):
        rom = bytearray(0x8000)
        rom[0x0134:0x0138] = b"GAME"
        before = bytes(rom)
        assert not update_checksums(rom)
        assert bytes(rom) == before


class TestExtension:
    """Tests for output naming by CGB flag."""

    def test_cgb_only(self):
        rom = bytearray(0x8000)
        rom[0x0143] = 0xC0
        assert is_cgb_only(rom)
        assert rom_extension(rom) == ".gbc"

    @pytest.mark.parametrize("flag", [0x00, 0x80])
    def test_monochrome_compatible(self, flag: int):
        rom = bytearray(0x8000)
        rom[0x0143] = flag
        assert rom_extension(rom) == ".gb"
