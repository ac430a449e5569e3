"""
ROM Assembler
=============

This module builds the flat cartridge image from ROM placement records.

Image Size
----------
The image holds one 16 KiB bank per bank in use, bank 0 included. With
rounding enabled the count goes up to the next power of two, the way
cartridge ROM chips are sized:

    used banks      1   2   3   4   5   9   33
    rounded         2   2   4   4   8   16  64

A single bank still becomes two, the smallest real cartridge being 32 KiB.

Placement
---------
Each record's payload is copied to bank * $4000 + offset. Records have
already passed the overflow gate, so every copy lands inside its bank.

Patching
--------
patch_rom() applies the same records to an existing image instead,
leaving every byte the records do not cover untouched.
"""

from typing import Iterable
import logging

from isx2gb.errors import PatchBoundaryError
from isx2gb.isx.records import BANK_SIZE, PlacementRecord

# Logger for this module
logger = logging.getLogger(__name__)


def round_banks(banks: int) -> int:
    """
    Round a bank count up to a power of two, never below two.

    Args:
        banks: Number of banks in use (at least 1)

    Returns:
        The rounded bank count
    """
    rounded = 2
    while rounded < banks:
        rounded <<= 1
    return rounded


def fill_image(size: int, fill_byte: int) -> bytearray:
    """
    Allocate an image pre-filled with a byte value.

    Zero fill is what bytearray gives for free; any other value is spread
    by doubling the filled prefix until the buffer is full.
    """
    image = bytearray(size)
    if fill_byte and size:
        image[0] = fill_byte
        filled = 1
        while filled < size:
            chunk = min(filled, size - filled)
            image[filled:filled + chunk] = image[:chunk]
            filled += chunk
    return image


def _copy_records(image: bytearray, records: Iterable[PlacementRecord], data: bytes) -> int:
    count = 0
    for record in records:
        address = record.rom_address
        image[address:address + record.length] = record.payload(data)
        count += 1
    return count


def assemble_rom(
    records: Iterable[PlacementRecord],
    data: bytes,
    banks: int,
    fill_byte: int = 0x00,
    round_size: bool = False,
) -> bytearray:
    """
    Build a ROM image from placement records.

    Args:
        records: ROM placement records (already split and overflow-checked)
        data: The record stream the placements point into
        banks: Number of banks in use
        fill_byte: Value of bytes no record covers (0x00 or 0xFF)
        round_size: Round the bank count up to a power of two

    Returns:
        The assembled image, banks * 0x4000 bytes long
    """
    banks = max(banks, 1)
    if round_size:
        banks = round_banks(banks)

    image = fill_image(banks * BANK_SIZE, fill_byte)
    count = _copy_records(image, records, data)

    logger.debug(f"Assembled {banks} banks ({len(image)} bytes) from {count} records")
    return image


def patch_rom(
    rom: bytes,
    records: Iterable[PlacementRecord],
    data: bytes,
) -> tuple[bytearray, list[tuple[int, int]]]:
    """
    Apply placement records to an existing ROM image.

    Args:
        rom: The ROM image to patch (not modified)
        records: ROM placement records
        data: The record stream the placements point into

    Returns:
        Tuple of (patched image, list of (address, length) patches applied)

    Raises:
        PatchBoundaryError: If a patch would run past the end of the ROM
    """
    image = bytearray(rom)
    patches = []

    for record in records:
        address = record.rom_address
        if address + record.length > len(image):
            raise PatchBoundaryError(address, len(image))
        image[address:address + record.length] = record.payload(data)
        patches.append((address, record.length))

    logger.debug(f"Applied {len(patches)} patches to {len(image)} byte ROM")
    return image, patches
