"""
Game Boy Header Checksums
=========================

This module validates the cartridge logo and recomputes the two checksum
fields of the Game Boy cartridge header.

Header Layout (relevant part)
-----------------------------
    $0104-$0133     Nintendo logo (compared by the boot ROM)
    $0134-$0142     Title
    $0143           CGB flag ($C0 = Game Boy Color only)
    $0144-$014C     Licensee, cartridge type, sizes, version
    $014D           Header checksum
    $014E-$014F     Global checksum (big-endian)

Header Checksum
---------------
Computed by the boot ROM over $0134-$014C; a mismatch locks up the
console:

    x = 0
    for each byte b in $0134..$014C:
        x = x - b - 1

Only the low 8 bits are stored.

Global Checksum
---------------
The 16-bit sum of every byte in the ROM except the two checksum bytes
themselves. Real hardware never checks it, but emulators and flash tools
do. The checksum bytes are zeroed before summing so the result does not
depend on their previous contents.

Logo Check
----------
Checksums are only written when the logo is intact. A CRC32 with
polynomial $D5828281 over $0104-$0132 is compared against the known-good
value; anything else means the image is not a bootable cartridge (or is
deliberately unusual) and is left untouched.
"""

from typing import Final
import logging

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Header Offsets
# =============================================================================

LOGO_START: Final[int] = 0x0104
LOGO_END: Final[int] = 0x0133       # Exclusive, 47 bytes are checked
TITLE_START: Final[int] = 0x0134
CGB_FLAG: Final[int] = 0x0143
HEADER_CHECKSUM: Final[int] = 0x014D
GLOBAL_CHECKSUM: Final[int] = 0x014E

CGB_ONLY: Final[int] = 0xC0

LOGO_CRC_POLYNOMIAL: Final[int] = 0xD5828281
LOGO_CRC: Final[int] = 0x153807CD

# The whole header must exist before any of it can be patched
MIN_HEADER_SIZE: Final[int] = GLOBAL_CHECKSUM + 2


# =============================================================================
# CRC32
# =============================================================================

def _generate_crc_table(polynomial: int) -> tuple[int, ...]:
    """
    Generate the 256-entry lookup table of a reflected CRC32.

    Returns:
        Tuple of 256 CRC values for each possible byte value.
    """
    table = []
    for byte_val in range(256):
        crc = byte_val
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ polynomial
            else:
                crc >>= 1
        table.append(crc)
    return tuple(table)


# Pre-computed table - generated once at import time
CRC_TABLE: Final[tuple[int, ...]] = _generate_crc_table(LOGO_CRC_POLYNOMIAL)


def logo_crc32(data: bytes) -> int:
    """
    Calculate the logo CRC32 of some data.

    Same algorithm as the common CRC32 (reflected, initial value and final
    XOR of $FFFFFFFF), with the $D5828281 polynomial.

    Args:
        data: Input bytes

    Returns:
        32-bit CRC value
    """
    crc = 0xFFFFFFFF
    for byte in data:
        crc = CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def has_valid_logo(rom: bytes) -> bool:
    """Check whether the image carries an intact Nintendo logo."""
    if len(rom) < MIN_HEADER_SIZE:
        return False
    return logo_crc32(rom[LOGO_START:LOGO_END]) == LOGO_CRC


# =============================================================================
# Checksums
# =============================================================================

def calculate_header_checksum(rom: bytes) -> int:
    """
    Calculate the header checksum over $0134-$014C.

    Returns:
        8-bit checksum value
    """
    checksum = 0
    for byte in rom[TITLE_START:HEADER_CHECKSUM]:
        checksum = checksum - byte - 1
    return checksum & 0xFF


def calculate_global_checksum(rom: bytes) -> int:
    """
    Calculate the global checksum, excluding the checksum field itself.

    Returns:
        16-bit checksum value
    """
    stored = rom[GLOBAL_CHECKSUM] + rom[GLOBAL_CHECKSUM + 1]
    return (sum(rom) - stored) & 0xFFFF


def update_checksums(rom: bytearray) -> bool:
    """
    Patch the header and global checksums in place.

    Nothing is written unless the logo is intact. Applying this twice
    gives the same image as applying it once.

    Args:
        rom: The assembled ROM image

    Returns:
        True if the checksums were written, False if the logo check failed
    """
    if not has_valid_logo(rom):
        logger.info("Nintendo logo not found, checksums left untouched")
        return False

    rom[HEADER_CHECKSUM] = calculate_header_checksum(rom)

    rom[GLOBAL_CHECKSUM] = 0
    rom[GLOBAL_CHECKSUM + 1] = 0
    checksum = calculate_global_checksum(rom)
    rom[GLOBAL_CHECKSUM:GLOBAL_CHECKSUM + 2] = checksum.to_bytes(2, "big")

    logger.debug(
        f"Header checksum 0x{rom[HEADER_CHECKSUM]:02X}, global checksum 0x{checksum:04X}"
    )
    return True


def is_cgb_only(rom: bytes) -> bool:
    """Check the CGB flag for a Game Boy Color only cartridge."""
    return len(rom) > CGB_FLAG and rom[CGB_FLAG] == CGB_ONLY


def rom_extension(rom: bytes) -> str:
    """Return the file extension for a ROM image: '.gbc' or '.gb'."""
    return ".gbc" if is_cgb_only(rom) else ".gb"
