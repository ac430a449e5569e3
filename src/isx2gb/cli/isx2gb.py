"""
isx2gb - ISX to Game Boy ROM Command-Line Interface
===================================================

This module implements the command-line interface of the converter.

Modes
-----
- **convert** (default): build <name>.gb or <name>.gbc from <name>.isx
- **dump** (-d): write every ISX record to its own .bin file
- **patch** (-p): apply the ISX records to an existing ROM file

Usage Examples
--------------
Convert, padding unused space with 0xFF and rounding the size:
    $ isx2gb -f -r game.isx

Also write a symbol file for the debugger:
    $ isx2gb -s game.isx

Dump records:
    $ isx2gb -d game.isx

Patch an existing ROM (writes game-patched.gb):
    $ isx2gb -p fix.isx game.gb
"""

import logging
from pathlib import Path
from typing import Optional

import click

from isx2gb import __version__
from isx2gb.cli.errors import handle_cli_exception
from isx2gb.config import ConvertOptions
from isx2gb.converter import ISXFile
from isx2gb.isx.layout import RegionLayout
from isx2gb.isx.records import Region
from isx2gb.output import (
    dump_records,
    output_base,
    patched_path,
    with_extension,
    write_symbol_file,
)
from isx2gb.rom.checksum import has_valid_logo, rom_extension


def _setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _echo_layouts(layouts: dict[Region, RegionLayout], regions: tuple[Region, ...]) -> None:
    """
    Print the layout of the given regions, plus any other overflowing one.

    Overflowing regions are always shown so the error that follows can be
    traced to a record.
    """
    for region, layout in layouts.items():
        if region in regions or layout.overflows:
            for line in layout.format():
                click.echo(line)


def _format_header(isx_file: Path, header: str) -> str:
    return f"{isx_file.name} : {header.replace('    ', '', 1).rstrip()}"


# =============================================================================
# Main Command
# =============================================================================

@click.command()
@click.version_option(__version__, "--version", "-V", prog_name="isx2gb")
@click.argument(
    "isx_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=False,
)
@click.option("-d", "--dump", is_flag=True, help="Dump ISX records into binary file(s)")
@click.option("-f", "--fill", is_flag=True, help="Switch ROM filling pattern from 0x00 to 0xFF")
@click.option("-p", "--patch", is_flag=True, help="Patch supplied ROM file with ISX records")
@click.option("-r", "--round", "round_size", is_flag=True,
              help="Round up ROM size to the next highest power of 2")
@click.option("-s", "--sym", "symbols", is_flag=True, help="Create symbolic file for debugger")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def main(
    isx_file: Path,
    rom_file: Optional[Path],
    dump: bool,
    fill: bool,
    patch: bool,
    round_size: bool,
    symbols: bool,
    verbose: bool,
) -> None:
    """
    Intelligent Systems eXecutable utility for Game Boy (Color).

    Converts ISX_FILE into a Game Boy ROM image. With --patch, the records
    are applied to ROM_FILE instead.

    \b
    Examples:
      isx2gb game.isx
      isx2gb -f -r -s game.isx
      isx2gb -d game.isx
      isx2gb -p fix.isx game.gb
    """
    if patch and rom_file is None:
        raise click.UsageError("--patch requires a ROM_FILE to patch")
    if rom_file is not None and not patch:
        raise click.UsageError("ROM_FILE is only used with --patch")
    if dump and patch:
        raise click.UsageError("--dump and --patch cannot be combined")

    _setup_logging(verbose)
    options = ConvertOptions.from_flags(
        fill=fill, round=round_size, symbols=symbols, dump=dump, patch=patch, verbose=verbose
    )

    try:
        isx = ISXFile.from_file(isx_file)
        base = output_base(isx_file)
        click.echo(_format_header(isx_file, isx.header))
        click.echo()

        layouts = isx.layout()

        if options.dump:
            _echo_layouts(layouts, tuple(Region))
            isx.check_overflow()
            _run_dump(isx, base)
        elif options.patch:
            _echo_layouts(layouts, ())
            _run_patch(isx, rom_file)
        else:
            _echo_layouts(layouts, (Region.ROM,))
            _run_convert(isx, base, options)

        if options.symbols:
            sym_path = with_extension(base, ".sym")
            if write_symbol_file(sym_path, isx.symbols()):
                click.echo(f"{sym_path} has been created!")
            else:
                click.echo(
                    "Warning: File doesn't contain any symbolic information, "
                    "check your config"
                )

    except Exception as e:
        handle_cli_exception(e, verbose)


def _run_convert(isx: ISXFile, base: Path, options: ConvertOptions) -> None:
    rom = isx.build_rom(options)
    if not has_valid_logo(rom):
        click.echo("Warning: Nintendo logo not found, checksums not updated")

    out_path = with_extension(base, rom_extension(rom))
    out_path.write_bytes(rom)
    click.echo(f"{out_path} has been created! ({len(rom) // 1024} KiB)")


def _run_dump(isx: ISXFile, base: Path) -> None:
    click.echo("Dumping...")
    regions = isx.regions
    for records in (regions.rom, regions.sram, regions.ram):
        for path in dump_records(base, records, isx.stream):
            click.echo(str(path))
    click.echo("\nDone!")


def _run_patch(isx: ISXFile, rom_file: Path) -> None:
    image, patches = isx.patch_rom(rom_file.read_bytes())

    click.echo("Patching...")
    for address, length in patches:
        unit = "byte" if length == 1 else "bytes"
        click.echo(f"0x{address:08X}: {length:5d} {unit}")

    out_path = patched_path(rom_file)
    out_path.write_bytes(image)
    click.echo(f"\n{out_path} has been created!")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
