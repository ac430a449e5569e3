"""
isx2gb Error Hierarchy
======================

This module defines the exception hierarchy for the ISX converter.
All exceptions inherit from ISXError, allowing callers to catch every
conversion failure with a single except clause if desired.

Exception Hierarchy
-------------------
ISXError (base)
├── ISXFormatError (malformed input)
│   ├── MalformedHeaderError - missing "ISX " signature or file too small
│   ├── TruncatedRecordError - record runs past the end of the file
│   └── UnknownRecordTypeError - unrecognized record tag byte
├── UnsupportedRomSizeError - bank index signals a ROM above 16 Mbit
├── RegionOverflowError - data does not fit its address window
└── PatchBoundaryError - patch lands outside the supplied ROM

Design Philosophy
-----------------
Every error is fatal. Malformed linker output is rejected outright rather
than turned into a silently corrupt cartridge, so nothing here is retried
or partially recovered. Offsets carried by the exceptions are absolute
file offsets, which is what a user sees in a hex editor.
"""

from typing import Optional, Sequence


# =============================================================================
# Base Exception Class
# =============================================================================

class ISXError(Exception):
    """
    Base exception for all isx2gb errors.

        try:
            result = convert(data, options)
        except ISXError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Format Exceptions
# =============================================================================

class ISXFormatError(ISXError):
    """Base exception for ISX files that cannot be decoded."""
    pass


class MalformedHeaderError(ISXFormatError):
    """
    Invalid ISX file header.

    Raised when:
    - The file is 32 bytes or smaller (nothing but a header, if that)
    - The first four bytes are not the literal "ISX "
    """
    pass


class TruncatedRecordError(ISXFormatError):
    """
    A record declares more bytes than the file contains.

    Attributes:
        offset: Absolute file offset of the record's tag byte
    """

    def __init__(self, offset: int, needed: int, available: int):
        self.offset = offset
        self.needed = needed
        self.available = available
        super().__init__(
            f"Truncated record at 0x{offset:X}: "
            f"needs {needed} bytes, {available} available"
        )


class UnknownRecordTypeError(ISXFormatError):
    """
    Unrecognized record tag byte.

    The record stream is only self-describing through sequential decoding,
    so an unknown tag means nothing after it can be located.

    Attributes:
        tag: The offending tag byte
        offset: Absolute file offset of the tag byte
    """

    def __init__(self, tag: int, offset: int):
        self.tag = tag
        self.offset = offset
        super().__init__(f"Unknown record type {tag:X} at {offset:X} found")


# =============================================================================
# Layout Exceptions
# =============================================================================

class UnsupportedRomSizeError(ISXError):
    """
    ROM larger than 16 Mbit.

    Code records with bank byte 0x80 belong to ROMs above 16 Mbit, which
    use a different record layout and are not supported.
    """

    def __init__(self, offset: Optional[int] = None):
        self.offset = offset
        message = "ROMs above 16Mbits are not supported yet"
        if offset is not None:
            message += f" (record at 0x{offset:X})"
        super().__init__(message)


class RegionOverflowError(ISXError):
    """
    Data overflow detected.

    Raised by the layout gate when at least one placement record runs past
    the end of its ROM bank, SRAM or RAM window.

    Attributes:
        records: The offending placement records
    """

    def __init__(self, records: Sequence = ()):
        self.records = list(records)
        count = len(self.records)
        noun = "record" if count == 1 else "records"
        super().__init__(f"data overflow detected ({count} {noun})")


class PatchBoundaryError(ISXError):
    """
    Patch address outside the ROM being patched.

    Attributes:
        address: Absolute ROM address of the patch
        rom_size: Size of the supplied ROM in bytes
    """

    def __init__(self, address: int, rom_size: int):
        self.address = address
        self.rom_size = rom_size
        super().__init__(
            f"Patching over ROM boundary is not possible: 0x{address:08X}"
        )
