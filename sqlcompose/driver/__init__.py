"""Result binding for executed statements."""

from sqlcompose.driver._binding import bind_all, bind_one, row_to_dict, scan_column

__all__ = ("bind_all", "bind_one", "row_to_dict", "scan_column")
