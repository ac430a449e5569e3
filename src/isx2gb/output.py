"""
Output Files
============

File naming and writing for everything isx2gb produces besides the ROM
itself: the debugger symbol file, per-record dumps and patched ROMs.

Naming
------
    game.isx            input
    game.gb / game.gbc  ROM (by CGB flag)
    game.sym            symbols, one 'BB:OOOO NAME' line each
    game_01꞉4000.bin    dumped record of bank $01 at $4000

Dump names use U+A789 (modifier letter colon) between bank and offset,
which looks like a colon but is legal in file names everywhere.
"""

from pathlib import Path
from typing import Iterable
import logging

from isx2gb.isx.records import PlacementRecord, SymbolEntry

# Logger for this module
logger = logging.getLogger(__name__)

DUMP_SEPARATOR = "꞉"


def output_base(isx_path: Path) -> Path:
    """Strip a trailing '.isx' from the input path."""
    if isx_path.suffix.lower() == ".isx":
        return isx_path.with_suffix("")
    return isx_path


def with_extension(base: Path, extension: str) -> Path:
    """Append an extension to a base path without replacing any dot in it."""
    return base.with_name(base.name + extension)


def format_symbols(symbols: Iterable[SymbolEntry]) -> str:
    """Render symbols as the contents of a .sym file."""
    return "".join(f"{symbol.to_line()}\n" for symbol in symbols)


def write_symbol_file(path: Path, symbols: list[SymbolEntry]) -> bool:
    """
    Write a debugger symbol file.

    Args:
        path: Destination .sym path
        symbols: Symbols, already sorted

    Returns:
        True if the file was written, False if there were no symbols
    """
    if not symbols:
        logger.info("No symbols to write")
        return False
    path.write_text(format_symbols(symbols), encoding="latin-1")
    logger.debug(f"Wrote {len(symbols)} symbols to {path}")
    return True


def dump_path(base: Path, record: PlacementRecord) -> Path:
    """Return the dump file name of a record."""
    return base.with_name(
        f"{base.name}_{record.bank:02X}{DUMP_SEPARATOR}{record.offset:04X}.bin"
    )


def dump_records(
    base: Path,
    records: Iterable[PlacementRecord],
    data: bytes,
) -> list[Path]:
    """
    Write each record's payload to its own file.

    Returns:
        Paths written, in record order
    """
    written = []
    for record in records:
        path = dump_path(base, record)
        path.write_bytes(record.payload(data))
        written.append(path)
    return written


def patched_path(rom_path: Path) -> Path:
    """Tag a ROM file name: 'game.gb' -> 'game-patched.gb'."""
    return rom_path.with_name(f"{rom_path.stem}-patched{rom_path.suffix}")
