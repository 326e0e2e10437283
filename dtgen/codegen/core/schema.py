"""
Core schema representation for code generation.

Immutable in-memory description of the tables a generation run works on.
Column order inside a table is significant: it fixes SQL parameter order,
the select projection order and the field order of generated host types.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple


# SQL Server types whose declaration carries a length, e.g. nvarchar(50)
LENGTH_TYPES = {"binary", "char", "nchar", "nvarchar", "varbinary", "varchar"}

# SQL Server types whose declaration carries precision and scale
PRECISION_TYPES = {"decimal", "numeric"}


@dataclass(frozen=True, eq=False)
class Column:
    """A single table column.

    Columns compare by identity: a table's primary keys and foreign-key
    groups refer to the very Column objects held in ``Table.columns``.
    """

    name: str
    sql_type: str
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    is_identity: bool = False
    is_rowguid: bool = False
    nullable: bool = False

    @property
    def type_name(self) -> str:
        """Lower-case storage type name used for type lookups."""
        return self.sql_type.lower()

    @property
    def is_generated(self) -> bool:
        """True when the database assigns the value on insert."""
        return self.is_identity or self.is_rowguid

    def __repr__(self) -> str:
        flags = []
        if self.is_identity:
            flags.append("identity")
        if self.is_rowguid:
            flags.append("rowguid")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"Column({self.name!r}, {self.sql_type!r}{suffix})"


@dataclass(frozen=True, eq=False)
class Table:
    """A table and its key structure."""

    name: str
    columns: Tuple[Column, ...]
    primary_keys: Tuple[Column, ...] = ()
    foreign_keys: Mapping[str, Tuple[Column, ...]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "columns", tuple(self.columns))
        object.__setattr__(self, "primary_keys", tuple(self.primary_keys))
        object.__setattr__(
            self,
            "foreign_keys",
            MappingProxyType(
                {name: tuple(group) for name, group in self.foreign_keys.items()}
            ),
        )

    @property
    def foreign_key_groups(self) -> List[Tuple[Column, ...]]:
        """Foreign-key column groups in declaration order."""
        return list(self.foreign_keys.values())

    def is_primary_key(self, column: Column) -> bool:
        """Check primary-key membership by column identity."""
        return any(key is column for key in self.primary_keys)

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def identity_column(self) -> Optional[Column]:
        """First identity column, if any."""
        for column in self.columns:
            if column.is_identity:
                return column
        return None

    @property
    def rowguid_column(self) -> Optional[Column]:
        """First row-unique-identifier column, if any."""
        for column in self.columns:
            if column.is_rowguid:
                return column
        return None


@dataclass(frozen=True)
class Database:
    """The tables of one generation run and the database they live in."""

    name: str
    tables: Tuple[Table, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tables", tuple(self.tables))

    def get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None


def build_table(
    name: str,
    columns: Sequence[Column],
    primary_keys: Sequence[str] = (),
    foreign_keys: Optional[Dict[str, Sequence[str]]] = None,
) -> Table:
    """
    Build a Table whose keys are given by column name.

    Key names are resolved against ``columns`` so the resulting primary keys
    and foreign-key groups share identity with the table's own columns.
    Unknown names are skipped; the model is trusted, not validated.

    Args:
        name: Table name
        columns: Columns in declaration order
        primary_keys: Primary-key column names in key order
        foreign_keys: Mapping of foreign-key group name to column names

    Returns:
        Table instance
    """
    by_name = {column.name: column for column in columns}

    def resolve(names: Sequence[str]) -> Tuple[Column, ...]:
        return tuple(by_name[n] for n in names if n in by_name)

    groups = {
        group_name: resolve(column_names)
        for group_name, column_names in (foreign_keys or {}).items()
    }

    return Table(
        name=name,
        columns=tuple(columns),
        primary_keys=resolve(primary_keys),
        foreign_keys=groups,
    )
