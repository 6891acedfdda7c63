"""Row mapping package."""

from csv2qif.mapping.mapper import map_row

__all__ = ["map_row"]
