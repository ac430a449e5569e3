"""
ISX to ROM Conversion
=====================

This module ties the stages together:

    decode -> classify -> layout / overflow gate -> assemble -> checksum

ISXFile holds the decoded file: its header text, the record stream and
the classified region sets. Everything else is derived from it on demand.

Usage Examples
--------------
Converting a file:

    >>> from isx2gb import ISXFile, ConvertOptions
    >>> isx = ISXFile.from_file("game.isx")
    >>> rom = isx.build_rom(ConvertOptions(fill=True))
    >>> Path("game" + rom_extension(rom)).write_bytes(rom)

Inspecting the layout without building anything:

    >>> for layout in isx.layout().values():
    ...     print("\\n".join(layout.format()))
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union
import logging

from isx2gb.config import ConvertOptions
from isx2gb.isx.classifier import RegionSets, scan_records
from isx2gb.isx.decoder import read_isx
from isx2gb.isx.layout import RegionLayout, build_layout, check_overflow, sort_symbols
from isx2gb.isx.records import Region, SymbolEntry
from isx2gb.rom.assembler import assemble_rom, patch_rom
from isx2gb.rom.checksum import update_checksums

# Logger for this module
logger = logging.getLogger(__name__)


@dataclass
class ISXFile:
    """
    A decoded and classified ISX file.

    Attributes:
        header: The 32-byte header text
        stream: The record stream placement records point into
        regions: Classified placement records and symbols
    """
    header: str
    stream: bytes = field(repr=False)
    regions: RegionSets = field(default_factory=RegionSets)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ISXFile":
        """
        Decode and classify an ISX file.

        Raises:
            MalformedHeaderError: If the header is missing or the file is too small
            UnknownRecordTypeError: If a record tag is not recognized
            UnsupportedRomSizeError: If the ROM is larger than 16 Mbit
            TruncatedRecordError: If the file ends inside a record
        """
        header, stream = read_isx(data)
        return cls(header=header, stream=stream, regions=scan_records(stream))

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ISXFile":
        """
        Read, decode and classify an ISX file from disk.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ISXError: If the file cannot be decoded
        """
        return cls.from_bytes(Path(filepath).read_bytes())

    @property
    def used_banks(self) -> int:
        return self.regions.used_banks

    def layout(self) -> dict[Region, RegionLayout]:
        """Sorted per-bank layout of every region."""
        return build_layout(self.regions)

    def symbols(self) -> list[SymbolEntry]:
        """Global symbols sorted by (bank, offset)."""
        return sort_symbols(self.regions.symbols)

    def check_overflow(self) -> None:
        """
        Raise RegionOverflowError if any region overflowed.

        Call this after reporting the layout and before building anything.
        """
        check_overflow(self.layout().values())

    def build_rom(self, options: ConvertOptions = ConvertOptions()) -> bytearray:
        """
        Assemble the ROM image and patch its header checksums.

        Args:
            options: Fill and rounding options

        Returns:
            The finished ROM image

        Raises:
            RegionOverflowError: If any region overflowed
        """
        self.check_overflow()
        rom = assemble_rom(
            self.regions.rom,
            self.stream,
            self.used_banks,
            fill_byte=options.fill_byte,
            round_size=options.round,
        )
        update_checksums(rom)
        return rom

    def patch_rom(self, rom: bytes) -> tuple[bytearray, list[tuple[int, int]]]:
        """
        Apply the ROM records to an existing image and fix its checksums.

        Returns:
            Tuple of (patched image, list of (address, length) patches)

        Raises:
            RegionOverflowError: If any region overflowed
            PatchBoundaryError: If a record falls outside the supplied ROM
        """
        self.check_overflow()
        image, patches = patch_rom(rom, self.regions.rom, self.stream)
        update_checksums(image)
        return image, patches


def convert(data: bytes, options: ConvertOptions = ConvertOptions()) -> bytearray:
    """
    Convert ISX file contents to a ROM image in one call.

    Example:
        >>> rom = convert(Path("game.isx").read_bytes())
    """
    return ISXFile.from_bytes(data).build_rom(options)
