"""
ISX Record Type Definitions
===========================

This module defines the data structures produced while scanning an ISX
(Intelligent Systems eXecutable) file.

File Structure Overview
-----------------------
An ISX file contains:
1. Header (32 bytes): "ISX " followed by descriptive text
2. Record stream (variable): tagged records, little-endian throughout

Record Format
-------------
Every record starts with a one-byte tag:

    Tag         Layout
    $01         bank:u8 offset:u16 length:u16 payload[length]
    $13         count:u16 then 9*count opaque bytes (range info)
    $14         count:u16 then count symbol entries
    $20-$22     length:u32 then length opaque bytes (debug info)

Symbol entries inside a $14 record are:

    namelen:u8 name[namelen] flag:u16 offset:u16 bank:u8 pad:u8

Only the code/data record carries anything that ends up in the ROM. The
other kinds are decoded just far enough to skip them, except for global
symbols which feed the debugger .sym file.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


# =============================================================================
# Address Space Constants
# =============================================================================

BANK_SIZE = 0x4000          # 16 KiB per ROM bank
BANK_MASK = 0x3FFF          # Bank-relative offset mask

ROM_START = 0x0000
ROM_END = 0x7FFF            # Bank 0 + switchable bank window
SRAM_START = 0xA000
SRAM_END = 0xBFFF           # External (cartridge) RAM
RAM_START = 0xC000
RAM_END = 0xDFFF            # Internal work RAM

# Bank byte marking ROMs above 16 Mbit (different record layout)
UNSUPPORTED_BANK = 0x80

# Flag value of symbols exported to the debugger
GLOBAL_SYMBOL_FLAG = 0x1000


# =============================================================================
# Enumeration Types
# =============================================================================

class RecordTag(IntEnum):
    """Record tag bytes found in the ISX record stream."""
    CODE = 0x01             # Code/data placed at bank:offset
    RANGE = 0x13            # Range information (skipped)
    SYMBOL = 0x14           # Symbol information
    DEBUG_A = 0x20          # Debug information (skipped)
    DEBUG_B = 0x21
    DEBUG_C = 0x22

    @classmethod
    def is_debug(cls, tag: int) -> bool:
        """Check if a tag byte is one of the length-prefixed debug records."""
        return tag in (cls.DEBUG_A, cls.DEBUG_B, cls.DEBUG_C)


class Region(Enum):
    """Address space a code/data record is placed into."""
    ROM = "ROM"
    SRAM = "SRAM"
    RAM = "RAM"
    BOGUS = "???"

    @classmethod
    def from_address(cls, address: int) -> "Region":
        """Classify a 16-bit CPU address."""
        if ROM_START <= address <= ROM_END:
            return cls.ROM
        if SRAM_START <= address <= SRAM_END:
            return cls.SRAM
        if RAM_START <= address <= RAM_END:
            return cls.RAM
        return cls.BOGUS


class RecordStatus(Enum):
    """
    Placement state of a record after classification.

    NORMAL records fit their window. A record straddling the bank 0/1
    boundary becomes a SPANNED_FROM half in bank 0 immediately followed by
    its SPANNED_TO half in bank 1. OVERFLOW records run past the end of
    their window and stop the build.
    """
    NORMAL = "normal"
    SPANNED_FROM = "spanned-from"
    SPANNED_TO = "spanned-to"
    OVERFLOW = "overflow"


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class CodeRecord:
    """
    A decoded $01 code/data record, before classification.

    Attributes:
        bank: ROM bank byte as written by the linker
        offset: 16-bit address as written by the linker
        length: Payload length in bytes
        source_pointer: Offset of the payload within the record stream
    """
    bank: int
    offset: int
    length: int
    source_pointer: int


@dataclass
class PlacementRecord:
    """
    A classified code/data record.

    Placement records never own their payload: source_pointer and length
    describe a slice of the record stream which is only copied when the ROM
    is assembled or the record is dumped.

    Attributes:
        bank: ROM bank index (0 = fixed bank); unused for SRAM/RAM
        offset: Address within the bank's local window
        source_pointer: Offset of the payload within the record stream
        length: Payload length in bytes
        status: Placement state (normal, spanned or overflow)
    """
    bank: int
    offset: int
    source_pointer: int
    length: int
    status: RecordStatus = RecordStatus.NORMAL

    @property
    def end(self) -> int:
        """One past the last local address covered by this record."""
        return self.offset + self.length

    @property
    def rom_address(self) -> int:
        """Absolute address of this record inside a ROM image."""
        return self.bank * BANK_SIZE + self.offset

    @property
    def is_overflow(self) -> bool:
        return self.status is RecordStatus.OVERFLOW

    def sort_key(self) -> tuple[int, int]:
        return (self.bank, self.offset)

    def payload(self, data: bytes) -> memoryview:
        """Return a view of this record's payload within the record stream."""
        return memoryview(data)[self.source_pointer:self.source_pointer + self.length]


@dataclass(frozen=True)
class SymbolEntry:
    """A global symbol exported by the linker."""
    bank: int
    offset: int
    name: str

    def sort_key(self) -> tuple[int, int]:
        return (self.bank, self.offset)

    def to_line(self) -> str:
        """Format as a debugger symbol line: 'BB:OOOO NAME'."""
        return f"{self.bank:02X}:{self.offset:04X} {self.name}"


@dataclass
class DecodedRecord:
    """
    Result of decoding one record from the stream.

    Attributes:
        tag: The record tag
        offset: Offset of the tag byte within the record stream
        size: Total record size including the tag byte
        code: The code/data fields for $01 records
        symbols: Global symbols carried by $14 records
    """
    tag: RecordTag
    offset: int
    size: int
    code: Optional[CodeRecord] = None
    symbols: list[SymbolEntry] = field(default_factory=list)

    @property
    def next_offset(self) -> int:
        return self.offset + self.size
