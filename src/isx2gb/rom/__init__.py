"""
Game Boy ROM Images
===================

Assembly of flat cartridge images from placement records, patching of
existing images, and the cartridge header checksums.
"""

from isx2gb.rom.assembler import (
    assemble_rom,
    fill_image,
    patch_rom,
    round_banks,
)

from isx2gb.rom.checksum import (
    LOGO_CRC,
    LOGO_CRC_POLYNOMIAL,
    logo_crc32,
    has_valid_logo,
    calculate_header_checksum,
    calculate_global_checksum,
    update_checksums,
    is_cgb_only,
    rom_extension,
)

__all__ = [
    # Assembly
    "assemble_rom",
    "fill_image",
    "patch_rom",
    "round_banks",
    # Checksums
    "LOGO_CRC",
    "LOGO_CRC_POLYNOMIAL",
    "logo_crc32",
    "has_valid_logo",
    "calculate_header_checksum",
    "calculate_global_checksum",
    "update_checksums",
    "is_cgb_only",
    "rom_extension",
]
