"""
SQL Server stored-procedure generation.
"""

from .generator import (
    PERMISSIONS_FILE,
    SEPARATOR,
    SqlGenerator,
    sql_parameter,
    sql_type_declaration,
)

__all__ = [
    "SqlGenerator",
    "sql_parameter",
    "sql_type_declaration",
    "PERMISSIONS_FILE",
    "SEPARATOR",
]
