"""
Python-specific configuration and type mappings.

Maps SQL Server storage types to the annotations of generated dataclass
fields, the value substituted for a NULL column and the imports each
annotation needs.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ...core.schema import Column


@dataclass(frozen=True)
class PythonType:
    """How a SQL Server type surfaces in generated Python."""

    name: str
    default: str
    import_line: Optional[str] = None


_INT = PythonType("int", "0")
_BOOL = PythonType("bool", "False")
_FLOAT = PythonType("float", "0.0")
_STR = PythonType("str", '""')
_BYTES = PythonType("bytes", 'b""')
_DECIMAL = PythonType("Decimal", 'Decimal("0")', "from decimal import Decimal")
_DATETIME = PythonType("datetime", "datetime.min", "from datetime import datetime")
_DATE = PythonType("date", "date.min", "from datetime import date")
_TIME = PythonType("time", "time.min", "from datetime import time")
_UUID = PythonType("UUID", "UUID(int=0)", "from uuid import UUID")
_ANY = PythonType("Any", "None")

PYTHON_TYPE_MAP = {
    "bigint": _INT,
    "binary": _BYTES,
    "bit": _BOOL,
    "char": _STR,
    "date": _DATE,
    "datetime": _DATETIME,
    "datetime2": _DATETIME,
    "datetimeoffset": _DATETIME,
    "decimal": _DECIMAL,
    "float": _FLOAT,
    "image": _BYTES,
    "int": _INT,
    "money": _DECIMAL,
    "nchar": _STR,
    "ntext": _STR,
    "numeric": _DECIMAL,
    "nvarchar": _STR,
    "real": _FLOAT,
    "rowversion": _BYTES,
    "smalldatetime": _DATETIME,
    "smallint": _INT,
    "smallmoney": _DECIMAL,
    "sql_variant": _ANY,
    "text": _STR,
    "time": _TIME,
    "timestamp": _BYTES,
    "tinyint": _INT,
    "uniqueidentifier": _UUID,
    "varbinary": _BYTES,
    "varchar": _STR,
    "xml": _STR,
}


def get_python_type(column: Column) -> PythonType:
    """Look up the Python representation of a column's storage type."""
    return PYTHON_TYPE_MAP.get(column.type_name, _ANY)


def collect_imports(columns: Sequence[Column]) -> List[str]:
    """Sorted, de-duplicated import lines needed by the columns' annotations."""
    lines = {get_python_type(column).import_line for column in columns}
    lines.discard(None)
    return sorted(lines)


def scalar_conversion(column: Column, expression: str) -> str:
    """Coerce a fetched scalar to the column's Python type.

    scope_identity() is numeric, so drivers hand it back as a Decimal.
    """
    if get_python_type(column) is _INT:
        return f"int({expression})"
    return expression


def typing_names(columns: Sequence[Column]) -> List[str]:
    """Names imported from typing by a transfer module."""
    names = ["Optional"]
    if any(get_python_type(column) is _ANY for column in columns):
        names.insert(0, "Any")
    return names
