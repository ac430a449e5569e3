"""
isx2gb - Conversion Options
===========================

Options are collected once (normally from the command line) into an
immutable ConvertOptions value which is then passed explicitly to every
stage that needs it.
"""

from dataclasses import dataclass


FILL_DEFAULT = 0x00
FILL_PADDING = 0xFF


@dataclass(frozen=True)
class ConvertOptions:
    """
    Options controlling a conversion run.

    Attributes:
        fill: Pad unused ROM space with 0xFF instead of 0x00
        round: Round the ROM size up to the next power of two
        symbols: Write a .sym file for the debugger
        dump: Write each record to its own file instead of building a ROM
        patch: Apply the records to an existing ROM instead of building one
    """
    fill: bool = False
    round: bool = False
    symbols: bool = False
    dump: bool = False
    patch: bool = False

    @property
    def fill_byte(self) -> int:
        return FILL_PADDING if self.fill else FILL_DEFAULT

    @classmethod
    def from_flags(cls, **flags: bool) -> "ConvertOptions":
        """
        Create options from command-line flags, ignoring unknown names.

        Example:
            >>> ConvertOptions.from_flags(fill=True, verbose=True).fill_byte
            255
        """
        known = {name: bool(value) for name, value in flags.items()
                 if name in cls.__dataclass_fields__}
        return cls(**known)
