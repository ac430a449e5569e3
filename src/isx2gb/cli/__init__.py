"""
isx2gb Command-Line Interface
=============================

This package provides the isx2gb command, a Click-based CLI that converts
ISX files to Game Boy ROM images, dumps ISX records, patches existing
ROMs and writes debugger symbol files.
"""

__all__ = ["isx2gb"]
