"""
Layout Aggregator
=================

This module turns the classified region sets into a deterministic,
per-bank layout report and enforces the overflow gate.

Sorting
-------
Every region (and the symbol list) is sorted by (bank, offset). The sort
is stable, so records with the same address keep their file order.

Bytes Used
----------
Per-bank totals count each covered address once. Walking the sorted
records, a record starting past the end of everything seen so far adds
its full length; a record starting inside it only adds the part that
sticks out:

    $0000-$0009  (10 bytes)   total 10
    $0005-$000E  (10 bytes)   total 15, not 20

Overflow Gate
-------------
The layout is always built (and can be reported) first. Only then does
check_overflow() raise RegionOverflowError if any record ran past its
window, so a user sees exactly which record is at fault.
"""

from dataclasses import dataclass, field
from itertools import groupby
from typing import Iterable, Sequence, TypeVar

from isx2gb.errors import RegionOverflowError
from isx2gb.isx.classifier import RegionSets
from isx2gb.isx.records import (
    BANK_SIZE,
    PlacementRecord,
    RecordStatus,
    Region,
    SymbolEntry,
)

T = TypeVar("T", PlacementRecord, SymbolEntry)


def sort_records(records: Iterable[T]) -> list[T]:
    """Return records sorted by (bank, offset)."""
    return sorted(records, key=lambda r: r.sort_key())


def sort_symbols(symbols: Iterable[SymbolEntry]) -> list[SymbolEntry]:
    """Return symbols sorted by (bank, offset); the name is not a key."""
    return sort_records(symbols)


def used_bytes(records: Sequence[PlacementRecord]) -> int:
    """
    Count the addresses covered by records of one bank.

    Args:
        records: Records of a single bank, sorted by offset

    Returns:
        Number of distinct bytes covered, overlaps counted once
    """
    total = 0
    covered_end = 0

    for record in records:
        if record.offset > covered_end:
            total += record.length
        elif record.end > covered_end:
            total += record.end - covered_end
        covered_end = max(covered_end, record.end)

    return total


# =============================================================================
# Layout Structures
# =============================================================================

@dataclass
class BankLayout:
    """Sorted records of one bank and the bytes they cover."""
    bank: int
    records: list[PlacementRecord]
    used: int


@dataclass
class RegionLayout:
    """
    Sorted, per-bank view of one region.

    Attributes:
        region: The address space
        banks: One BankLayout per bank that has records, ascending
    """
    region: Region
    banks: list[BankLayout] = field(default_factory=list)

    @property
    def overflows(self) -> list[PlacementRecord]:
        return [r for bank in self.banks for r in bank.records if r.is_overflow]

    @property
    def used(self) -> int:
        return sum(bank.used for bank in self.banks)

    def format(self) -> list[str]:
        """Render this region as report lines."""
        lines: list[str] = []
        for bank in self.banks:
            lines.append(f"{self.region.value} Bank ${bank.bank:02x}:")
            for record in bank.records:
                lines.append(_format_record(self.region, record))
            lines.append(f"{'':32}-----")
            lines.append(f"{'':32}{bank.used:5d} bytes")
            lines.append("")
        return lines


def _format_record(region: Region, record: PlacementRecord) -> str:
    start = record.offset
    # Switchable banks are shown at their CPU address
    if region is Region.ROM and record.bank > 0:
        start |= BANK_SIZE
    end = start + record.length - 1

    if record.status is RecordStatus.SPANNED_FROM:
        return f"        ${start:04X} -   >      {record.length:5d}"
    if record.status is RecordStatus.SPANNED_TO:
        return f"          >   - ${end:04X}    {record.length:5d}"
    if record.status is RecordStatus.OVERFLOW:
        return f"        ${start:04X} - ${end:04X}    {record.length:5d}   !"
    return f"        ${start:04X} - ${end:04X}    {record.length:5d}"


# =============================================================================
# Aggregation
# =============================================================================

def build_region_layout(region: Region, records: Iterable[PlacementRecord]) -> RegionLayout:
    """Sort a region's records and compute per-bank totals."""
    layout = RegionLayout(region=region)
    for bank, group in groupby(sort_records(records), key=lambda r: r.bank):
        bank_records = list(group)
        layout.banks.append(BankLayout(bank, bank_records, used_bytes(bank_records)))
    return layout


def build_layout(sets: RegionSets) -> dict[Region, RegionLayout]:
    """Build the layout of every region, in report order."""
    return {region: build_region_layout(region, records) for region, records in sets.items()}


def check_overflow(layouts: Iterable[RegionLayout]) -> None:
    """
    Stop the build if any region overflowed.

    Raises:
        RegionOverflowError: Listing every overflowing record
    """
    overflows = [r for layout in layouts for r in layout.overflows]
    if overflows:
        raise RegionOverflowError(overflows)
