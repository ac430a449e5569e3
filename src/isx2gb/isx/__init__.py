"""
ISX File Handling
=================

Decoding, classification and layout of ISX (Intelligent Systems
eXecutable) record streams.

This module provides:
- **Record types**: Tags, regions, placement records and symbols
- **Decoder**: Header validation and sequential record decoding
- **Classifier**: Region assignment, bank 0/1 splitting, overflow marking
- **Layout**: Sorted per-bank reports and the overflow gate
"""

# =============================================================================
# Public API Exports
# =============================================================================

from isx2gb.isx.records import (
    # Constants
    BANK_SIZE,
    GLOBAL_SYMBOL_FLAG,
    UNSUPPORTED_BANK,
    # Enums
    RecordTag,
    Region,
    RecordStatus,
    # Data structures
    CodeRecord,
    PlacementRecord,
    SymbolEntry,
    DecodedRecord,
)

from isx2gb.isx.decoder import (
    HEADER_SIZE,
    read_isx,
    decode_record,
    iter_records,
)

from isx2gb.isx.classifier import (
    RegionSets,
    classify_record,
    scan_records,
)

from isx2gb.isx.layout import (
    BankLayout,
    RegionLayout,
    sort_records,
    sort_symbols,
    used_bytes,
    build_region_layout,
    build_layout,
    check_overflow,
)

__all__ = [
    "BANK_SIZE",
    "GLOBAL_SYMBOL_FLAG",
    "UNSUPPORTED_BANK",
    "RecordTag",
    "Region",
    "RecordStatus",
    "CodeRecord",
    "PlacementRecord",
    "SymbolEntry",
    "DecodedRecord",
    "HEADER_SIZE",
    "read_isx",
    "decode_record",
    "iter_records",
    "RegionSets",
    "classify_record",
    "scan_records",
    "BankLayout",
    "RegionLayout",
    "sort_records",
    "sort_symbols",
    "used_bytes",
    "build_region_layout",
    "build_layout",
    "check_overflow",
]
