"""
isx2gb - Intelligent Systems eXecutable utility for Game Boy (Color)
====================================================================

This package converts ISX files, the debug executables produced by the
Intelligent Systems Game Boy assembler and linker, into flat cartridge ROM
images.

An ISX file is a 32-byte header followed by a stream of tagged records.
Code/data records carry a bank, an address and a payload; the converter
sorts them into ROM, SRAM, RAM or invalid address space, splits records
that straddle the bank 0/1 boundary, rejects anything that overflows its
window, lays the ROM records out into 16 KiB banks and finally fixes the
cartridge header checksums.

Main Components
---------------
- **isx**: ISX decoding, region classification and layout reporting
- **rom**: ROM image assembly, patching and header checksums
- **output**: Symbol file, dump and patched ROM output
- **cli**: The isx2gb command

Quick Start
-----------
Convert a file:
    >>> from isx2gb import ISXFile, ConvertOptions
    >>> isx = ISXFile.from_file("game.isx")
    >>> rom = isx.build_rom(ConvertOptions(fill=True, round=True))

Or use the command-line tool:
    $ isx2gb -f -r -s game.isx

Version History
---------------
1.0.0 - Conversion, dump and patch modes, symbol files
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from isx2gb.config import ConvertOptions
from isx2gb.converter import ISXFile, convert
from isx2gb.errors import (
    ISXError,
    ISXFormatError,
    MalformedHeaderError,
    TruncatedRecordError,
    UnknownRecordTypeError,
    UnsupportedRomSizeError,
    RegionOverflowError,
    PatchBoundaryError,
)
from isx2gb.isx import (
    CodeRecord,
    PlacementRecord,
    RecordStatus,
    RecordTag,
    Region,
    RegionSets,
    SymbolEntry,
)
from isx2gb.rom import (
    assemble_rom,
    patch_rom,
    update_checksums,
    rom_extension,
)

__all__ = [
    # Version info
    "__version__",
    # Conversion
    "ConvertOptions",
    "ISXFile",
    "convert",
    # Exception hierarchy
    "ISXError",
    "ISXFormatError",
    "MalformedHeaderError",
    "TruncatedRecordError",
    "UnknownRecordTypeError",
    "UnsupportedRomSizeError",
    "RegionOverflowError",
    "PatchBoundaryError",
    # ISX records
    "CodeRecord",
    "PlacementRecord",
    "RecordStatus",
    "RecordTag",
    "Region",
    "RegionSets",
    "SymbolEntry",
    # ROM
    "assemble_rom",
    "patch_rom",
    "update_checksums",
    "rom_extension",
]
