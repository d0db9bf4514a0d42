# File decoders for shop exports
# Each loader turns an uploaded file into header -> raw value rows for the core

from .spreadsheet import SpreadsheetLoader, frame_to_rows

__all__ = ["SpreadsheetLoader", "frame_to_rows"]
