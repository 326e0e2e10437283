"""
C#-specific configuration and type mappings.

Maps SQL Server storage types to C# types, SqlDataReader accessors and the
default substituted when a column value is DBNull.
"""

from dataclasses import dataclass
from typing import Optional

from ...core.schema import Column


@dataclass(frozen=True)
class CSharpType:
    """How a SQL Server type surfaces in generated C#."""

    name: str
    reader: Optional[str]  # SqlDataReader typed getter, None -> GetValue + cast
    default: str
    convert: Optional[str] = None  # System.Convert method for scalar results

    @property
    def is_reference(self) -> bool:
        return self.default == "null"


_INT = CSharpType("int", "GetInt32", "0", "Convert.ToInt32")
_LONG = CSharpType("long", "GetInt64", "0", "Convert.ToInt64")
_SHORT = CSharpType("short", "GetInt16", "(short) 0", "Convert.ToInt16")
_BYTE = CSharpType("byte", "GetByte", "(byte) 0", "Convert.ToByte")
_BOOL = CSharpType("bool", "GetBoolean", "false", "Convert.ToBoolean")
_DECIMAL = CSharpType("decimal", "GetDecimal", "0m", "Convert.ToDecimal")
_DOUBLE = CSharpType("double", "GetDouble", "0d", "Convert.ToDouble")
_FLOAT = CSharpType("float", "GetFloat", "0f", "Convert.ToSingle")
_STRING = CSharpType("string", "GetString", "null", "Convert.ToString")
_DATETIME = CSharpType("DateTime", "GetDateTime", "DateTime.MinValue", "Convert.ToDateTime")
_DATETIMEOFFSET = CSharpType("DateTimeOffset", "GetDateTimeOffset", "DateTimeOffset.MinValue")
_TIMESPAN = CSharpType("TimeSpan", "GetTimeSpan", "TimeSpan.Zero")
_GUID = CSharpType("Guid", "GetGuid", "Guid.Empty")
_BYTES = CSharpType("byte[]", None, "null")
_OBJECT = CSharpType("object", "GetValue", "null")

CSHARP_TYPE_MAP = {
    "bigint": _LONG,
    "binary": _BYTES,
    "bit": _BOOL,
    "char": _STRING,
    "date": _DATETIME,
    "datetime": _DATETIME,
    "datetime2": _DATETIME,
    "datetimeoffset": _DATETIMEOFFSET,
    "decimal": _DECIMAL,
    "float": _DOUBLE,
    "image": _BYTES,
    "int": _INT,
    "money": _DECIMAL,
    "nchar": _STRING,
    "ntext": _STRING,
    "numeric": _DECIMAL,
    "nvarchar": _STRING,
    "real": _FLOAT,
    "rowversion": _BYTES,
    "smalldatetime": _DATETIME,
    "smallint": _SHORT,
    "smallmoney": _DECIMAL,
    "sql_variant": _OBJECT,
    "text": _STRING,
    "time": _TIMESPAN,
    "timestamp": _BYTES,
    "tinyint": _BYTE,
    "uniqueidentifier": _GUID,
    "varbinary": _BYTES,
    "varchar": _STRING,
    "xml": _STRING,
}

# Referenced by every generated project
SHARPCORE_ASSEMBLIES = [
    "SharpCore.Data",
    "SharpCore.Extensions",
    "SharpCore.Utilities",
]

SHARPCORE_DIRECTORY = "Lib\\SharpCore"

DEFAULT_TARGET_FRAMEWORK = "netstandard2.0"

SQLCLIENT_PACKAGE = ("System.Data.SqlClient", "4.8.6")


def get_csharp_type(column: Column) -> CSharpType:
    """Look up the C# representation of a column's storage type."""
    return CSHARP_TYPE_MAP.get(column.type_name, _OBJECT)


def reader_expression(column: Column, ordinal: int) -> str:
    """Positional read of one column with its DBNull default."""
    cs_type = get_csharp_type(column)
    if cs_type.reader:
        value = f"dataReader.{cs_type.reader}({ordinal})"
    else:
        value = f"({cs_type.name}) dataReader.GetValue({ordinal})"
    return f"dataReader.IsDBNull({ordinal}) ? {cs_type.default} : {value}"


def scalar_conversion(column: Column, expression: str) -> str:
    """Convert an ExecuteScalar result to the column's C# type."""
    cs_type = get_csharp_type(column)
    if cs_type.convert:
        return f"{cs_type.convert}({expression})"
    return f"({cs_type.name}) {expression}"


def parameter_value(column: Column, expression: str) -> str:
    """Value bound to a SqlParameter.

    ADO.NET treats a null parameter value as not supplied, so nullable
    reference-typed columns send DBNull instead.
    """
    if column.nullable and get_csharp_type(column).is_reference:
        return f"(object) {expression} ?? DBNull.Value"
    return expression
