"""
ISX Record Decoder
==================

This module reads the ISX header and walks the record stream one record
at a time.

The stream is only self-describing through sequential decoding: each
record's length is known once its own header has been read, so records
are always decoded left to right from the first byte after the 32-byte
file header.

Usage Examples
--------------
Splitting a file into header text and record stream:

    >>> header, stream = read_isx(Path("game.isx").read_bytes())
    >>> print(header)

Walking the records:

    >>> for record in iter_records(stream):
    ...     if record.code:
    ...         print(f"{record.code.bank:02X}:{record.code.offset:04X}")
"""

from typing import Iterator
import logging
import struct

from isx2gb.errors import (
    MalformedHeaderError,
    TruncatedRecordError,
    UnknownRecordTypeError,
    UnsupportedRomSizeError,
)
from isx2gb.isx.records import (
    GLOBAL_SYMBOL_FLAG,
    UNSUPPORTED_BANK,
    CodeRecord,
    DecodedRecord,
    RecordTag,
    SymbolEntry,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Header
# =============================================================================

HEADER_SIZE = 32
SIGNATURE = b"ISX "

# Sizes of the fixed parts of each record kind (tag byte included)
CODE_HEADER_SIZE = 6        # tag, bank, offset:u16, length:u16
COUNT_HEADER_SIZE = 3       # tag, count:u16
DEBUG_HEADER_SIZE = 5       # tag, length:u32
RANGE_ENTRY_SIZE = 9
SYMBOL_FIXED_SIZE = 7       # namelen, flag:u16, offset:u16, bank, pad


def read_isx(data: bytes) -> tuple[str, bytes]:
    """
    Validate the ISX header and split a file into header text and records.

    Args:
        data: The raw bytes of the ISX file

    Returns:
        Tuple of (header text, record stream)

    Raises:
        MalformedHeaderError: If the file is too small or lacks "ISX "
    """
    if len(data) <= HEADER_SIZE:
        raise MalformedHeaderError(
            f"Dubious file size ({len(data)} bytes), probably invalid"
        )
    if not data.startswith(SIGNATURE):
        raise MalformedHeaderError("Header not found, invalid file")

    header = data[:HEADER_SIZE].decode("latin-1")
    logger.debug(f"ISX header: {header!r}, {len(data) - HEADER_SIZE} bytes of records")
    return header, data[HEADER_SIZE:]


# =============================================================================
# Record Decoding
# =============================================================================

def _require(stream: bytes, offset: int, start: int, needed: int) -> None:
    """Raise TruncatedRecordError unless stream[start:start+needed] exists."""
    available = len(stream) - start
    if needed > available:
        raise TruncatedRecordError(
            offset + HEADER_SIZE, start - offset + needed, len(stream) - offset
        )


def _decode_code(stream: bytes, offset: int) -> DecodedRecord:
    _require(stream, offset, offset, CODE_HEADER_SIZE)
    bank, address, length = struct.unpack_from("<BHH", stream, offset + 1)

    if bank >= UNSUPPORTED_BANK:
        raise UnsupportedRomSizeError(offset + HEADER_SIZE)

    _require(stream, offset, offset + CODE_HEADER_SIZE, length)
    code = CodeRecord(
        bank=bank,
        offset=address,
        length=length,
        source_pointer=offset + CODE_HEADER_SIZE,
    )
    return DecodedRecord(
        tag=RecordTag.CODE,
        offset=offset,
        size=CODE_HEADER_SIZE + length,
        code=code,
    )


def _decode_range(stream: bytes, offset: int) -> DecodedRecord:
    _require(stream, offset, offset, COUNT_HEADER_SIZE)
    (count,) = struct.unpack_from("<H", stream, offset + 1)
    size = COUNT_HEADER_SIZE + count * RANGE_ENTRY_SIZE
    _require(stream, offset, offset, size)
    return DecodedRecord(tag=RecordTag.RANGE, offset=offset, size=size)


def _decode_symbols(stream: bytes, offset: int) -> DecodedRecord:
    """
    Decode a $14 symbol record.

    Entries are variable length (the name comes first), so the cursor is
    advanced entry by entry. Only global symbols are kept.
    """
    _require(stream, offset, offset, COUNT_HEADER_SIZE)
    (count,) = struct.unpack_from("<H", stream, offset + 1)
    pos = offset + COUNT_HEADER_SIZE
    symbols = []

    for _ in range(count):
        _require(stream, offset, pos, 1)
        name_len = stream[pos]
        _require(stream, offset, pos, SYMBOL_FIXED_SIZE + name_len)
        name = stream[pos + 1:pos + 1 + name_len].decode("latin-1")
        flag, address, bank = struct.unpack_from("<HHB", stream, pos + 1 + name_len)
        pos += SYMBOL_FIXED_SIZE + name_len

        if flag == GLOBAL_SYMBOL_FLAG:
            symbols.append(SymbolEntry(bank=bank, offset=address, name=name))

    logger.debug(f"Symbol record: {count} entries, {len(symbols)} global")
    return DecodedRecord(
        tag=RecordTag.SYMBOL,
        offset=offset,
        size=pos - offset,
        symbols=symbols,
    )


def _decode_debug(stream: bytes, offset: int, tag: int) -> DecodedRecord:
    _require(stream, offset, offset, DEBUG_HEADER_SIZE)
    (length,) = struct.unpack_from("<I", stream, offset + 1)
    size = DEBUG_HEADER_SIZE + length
    _require(stream, offset, offset, size)
    return DecodedRecord(tag=RecordTag(tag), offset=offset, size=size)


def decode_record(stream: bytes, offset: int) -> DecodedRecord:
    """
    Decode the record starting at the given offset of the record stream.

    Args:
        stream: The record stream (file contents after the 32-byte header)
        offset: Offset of the record's tag byte

    Returns:
        The decoded record; its next_offset is where the following one starts

    Raises:
        UnknownRecordTypeError: If the tag byte is not recognized
        UnsupportedRomSizeError: If a code record targets bank 0x80 or above
        TruncatedRecordError: If the record runs past the end of the stream
    """
    tag = stream[offset]

    if tag == RecordTag.CODE:
        return _decode_code(stream, offset)
    if tag == RecordTag.RANGE:
        return _decode_range(stream, offset)
    if tag == RecordTag.SYMBOL:
        return _decode_symbols(stream, offset)
    if RecordTag.is_debug(tag):
        return _decode_debug(stream, offset, tag)

    raise UnknownRecordTypeError(tag, offset + HEADER_SIZE)


def iter_records(stream: bytes) -> Iterator[DecodedRecord]:
    """
    Decode every record in the stream, in file order.

    Args:
        stream: The record stream (file contents after the 32-byte header)

    Yields:
        DecodedRecord instances
    """
    offset = 0
    while offset < len(stream):
        record = decode_record(stream, offset)
        yield record
        offset = record.next_offset
