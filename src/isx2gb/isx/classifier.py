"""
Region Classifier
=================

This module sorts decoded code/data records into the Game Boy address
spaces and turns them into placement records.

Address Ranges
--------------
    $0000-$7FFF     ROM (bank 0 at $0000, switchable bank at $4000)
    $A000-$BFFF     SRAM (cartridge RAM)
    $C000-$DFFF     RAM (internal work RAM)
    anything else   bogus, reported but never written

The region is decided once, from the address the linker wrote, and is not
re-evaluated after a record has been split.

Bank 0/1 Boundary
-----------------
The linker treats bank 0 and bank 1 as one contiguous 32 KiB space, so a
bank 0 record may run straight past $3FFF. Such a record is split in two:
the part up to $3FFF stays in bank 0 (SPANNED_FROM) and the remainder
moves to offset 0 of bank 1 (SPANNED_TO). Bank 0 records starting at
$4000 or above are moved to bank 1 wholesale. Records in other banks are
never split; running past the end of their bank is an overflow.
"""

from dataclasses import dataclass, field
from typing import Iterable
import logging

from isx2gb.isx.decoder import iter_records
from isx2gb.isx.records import (
    BANK_MASK,
    BANK_SIZE,
    RAM_END,
    SRAM_END,
    CodeRecord,
    PlacementRecord,
    RecordStatus,
    Region,
    SymbolEntry,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Classification
# =============================================================================

def _classify_rom(code: CodeRecord) -> list[PlacementRecord]:
    """Place a ROM record, splitting or promoting bank 0 records as needed."""
    bank = code.bank
    offset = code.offset

    # Banks 1 and above are addressed through the $4000-$7FFF window
    if bank > 0 and offset >= BANK_SIZE:
        offset &= BANK_MASK

    if bank == 0:
        if offset < BANK_SIZE:
            if offset + code.length < BANK_SIZE:
                return [PlacementRecord(0, offset, code.source_pointer, code.length)]

            head = BANK_SIZE - offset
            first = PlacementRecord(
                bank=0,
                offset=offset,
                source_pointer=code.source_pointer,
                length=head,
                status=RecordStatus.SPANNED_FROM,
            )
            second = PlacementRecord(
                bank=1,
                offset=0,
                source_pointer=code.source_pointer + head,
                length=code.length - head,
                status=RecordStatus.SPANNED_TO,
            )
            # The remainder must itself fit in bank 1
            if second.end > BANK_SIZE:
                second.status = RecordStatus.OVERFLOW
            logger.debug(
                f"Split ${offset:04X}+{code.length} across banks 0/1 "
                f"({first.length}+{second.length})"
            )
            return [first, second]

        # Data located in bank 1 but addressed as bank 0
        bank = 1
        offset &= BANK_MASK

    record = PlacementRecord(bank, offset, code.source_pointer, code.length)
    if record.end > BANK_SIZE:
        record.status = RecordStatus.OVERFLOW
    return [record]


def classify_record(code: CodeRecord) -> list[tuple[Region, PlacementRecord]]:
    """
    Classify one code/data record.

    Args:
        code: The decoded $01 record

    Returns:
        One or two (region, placement record) pairs. Two pairs are only
        returned for a bank 0 record spanning into bank 1, SPANNED_FROM
        half first.
    """
    region = Region.from_address(code.offset)

    if region is Region.ROM:
        return [(region, record) for record in _classify_rom(code)]

    record = PlacementRecord(code.bank, code.offset, code.source_pointer, code.length)
    if region is Region.SRAM and record.end > SRAM_END:
        record.status = RecordStatus.OVERFLOW
    elif region is Region.RAM and record.end > RAM_END:
        record.status = RecordStatus.OVERFLOW
    return [(region, record)]


# =============================================================================
# Region Sets
# =============================================================================

@dataclass
class RegionSets:
    """
    Placement records gathered from one ISX file, grouped by region.

    Attributes:
        rom: ROM placements, in emission order
        sram: SRAM placements
        ram: RAM placements
        bogus: Records outside every known window
        symbols: Global symbols
        max_bank: Highest ROM bank referenced (bank 1 included whenever a
            bank 0 record spilled into it)
    """
    rom: list[PlacementRecord] = field(default_factory=list)
    sram: list[PlacementRecord] = field(default_factory=list)
    ram: list[PlacementRecord] = field(default_factory=list)
    bogus: list[PlacementRecord] = field(default_factory=list)
    symbols: list[SymbolEntry] = field(default_factory=list)
    max_bank: int = 0

    @property
    def used_banks(self) -> int:
        """Number of ROM banks the image needs (bank 0 always counts)."""
        return self.max_bank + 1

    def region(self, region: Region) -> list[PlacementRecord]:
        """Return the record list for a region."""
        return {
            Region.ROM: self.rom,
            Region.SRAM: self.sram,
            Region.RAM: self.ram,
            Region.BOGUS: self.bogus,
        }[region]

    def items(self) -> Iterable[tuple[Region, list[PlacementRecord]]]:
        """Iterate (region, records) pairs in report order."""
        for region in Region:
            yield region, self.region(region)

    def add_code(self, code: CodeRecord) -> None:
        """
        Classify a code/data record and append the result.

        Only ROM placements count towards max_bank. A split or promoted
        bank 0 record yields a bank 1 placement, which pulls bank 1 in.
        """
        for region, record in classify_record(code):
            self.region(region).append(record)
            if region is Region.ROM:
                self.max_bank = max(self.max_bank, record.bank)

    def total_length(self) -> int:
        """Sum of payload lengths over all regions."""
        return sum(r.length for _, records in self.items() for r in records)


def scan_records(stream: bytes) -> RegionSets:
    """
    Decode and classify an entire record stream.

    Args:
        stream: The record stream (file contents after the 32-byte header)

    Returns:
        RegionSets with every code/data record placed and every global
        symbol collected
    """
    sets = RegionSets()
    count = 0

    for record in iter_records(stream):
        count += 1
        if record.code is not None:
            sets.add_code(record.code)
        sets.symbols.extend(record.symbols)

    logger.debug(
        f"Scanned {count} records: {len(sets.rom)} ROM, {len(sets.sram)} SRAM, "
        f"{len(sets.ram)} RAM, {len(sets.bogus)} bogus, "
        f"{len(sets.symbols)} symbols, {sets.used_banks} banks"
    )
    return sets
