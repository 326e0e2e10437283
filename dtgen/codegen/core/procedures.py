"""
Procedure decision engine.

Decides which data-access operations a table's key/column shape warrants
and materializes each one as a ``Procedure`` record. The SQL emitter and
every host-language emitter render from the same records, so parameter
order, argument order and projection order cannot drift apart.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from ...logging_config import get_logger
from .naming import composite_key_name, procedure_name
from .schema import Column, Table

logger = get_logger(__name__)


class Operation(Enum):
    """Data-access operations, in emission order."""

    INSERT = "Insert"
    UPDATE = "Update"
    DELETE = "Delete"
    DELETE_ALL_BY = "DeleteAllBy"
    SELECT = "Select"
    SELECT_JSON = "SelectJson"
    SELECT_ALL = "SelectAll"
    SELECT_ALL_JSON = "SelectAllJson"
    SELECT_ALL_BY = "SelectAllBy"
    SELECT_ALL_BY_JSON = "SelectAllByJson"

    @property
    def is_json(self) -> bool:
        return self in _JSON_BASE

    @property
    def base(self) -> "Operation":
        """The operation whose stored procedure this one invokes."""
        return _JSON_BASE.get(self, self)

    @property
    def returns_rows(self) -> bool:
        return self.base in (
            Operation.SELECT,
            Operation.SELECT_ALL,
            Operation.SELECT_ALL_BY,
        )


_JSON_BASE = {
    Operation.SELECT_JSON: Operation.SELECT,
    Operation.SELECT_ALL_JSON: Operation.SELECT_ALL,
    Operation.SELECT_ALL_BY_JSON: Operation.SELECT_ALL_BY,
}

# Operation part of procedure, method and file names; keyed variants add By{Key}
_NAME_TOKENS = {
    Operation.INSERT: "Insert",
    Operation.UPDATE: "Update",
    Operation.DELETE: "Delete",
    Operation.DELETE_ALL_BY: "DeleteAll",
    Operation.SELECT: "Select",
    Operation.SELECT_ALL: "SelectAll",
    Operation.SELECT_ALL_BY: "SelectAll",
}


@dataclass(frozen=True)
class Procedure:
    """Structured description of one generated operation.

    ``parameters`` is the single ordered parameter list shared by the SQL
    declaration and the host-language argument binding.
    """

    operation: Operation
    table: Table
    name: str
    method_name: str
    parameters: Tuple[Column, ...] = ()
    key_columns: Tuple[Column, ...] = ()
    key_name: Optional[str] = None
    projection: Tuple[Column, ...] = ()
    set_columns: Tuple[Column, ...] = ()
    insert_columns: Tuple[Column, ...] = ()
    return_column: Optional[Column] = None

    @property
    def emits_sql(self) -> bool:
        """Json variants reuse the procedure of their base operation."""
        return not self.operation.is_json

    @property
    def sql_file_name(self) -> str:
        token = _NAME_TOKENS[self.operation.base]
        name = f"{token}{self.table.name}"
        if self.key_name:
            name += f"By{self.key_name}"
        return f"{name}.sql"

    @property
    def rowguid_column(self) -> Optional[Column]:
        """Row-unique-identifier column initialized inside an insert."""
        if self.operation is not Operation.INSERT:
            return None
        return self.table.rowguid_column


# Applicability predicates. The foreign-key comparisons use the number of
# groups, not the number of columns they cover.


def can_update(table: Table) -> bool:
    column_count = len(table.columns)
    return (
        len(table.primary_keys) > 0
        and column_count != len(table.primary_keys)
        and column_count != len(table.foreign_keys)
    )


def can_delete(table: Table) -> bool:
    return len(table.primary_keys) > 0


def can_select(table: Table) -> bool:
    return len(table.primary_keys) > 0 and len(table.foreign_keys) != len(
        table.columns
    )


def can_select_all(table: Table) -> bool:
    column_count = len(table.columns)
    return column_count != len(table.primary_keys) and column_count != len(
        table.foreign_keys
    )


def insert_return_column(table: Table) -> Optional[Column]:
    """Identity column if present, otherwise the row-unique-identifier column."""
    identity = table.identity_column
    if identity is not None:
        return identity
    return table.rowguid_column


class ProcedureBuilder:
    """Builds the Procedure records for one table."""

    def __init__(self, table: Table, prefix: str = ""):
        self.table = table
        self.prefix = prefix

    def _make(
        self,
        operation: Operation,
        parameters: Tuple[Column, ...] = (),
        key_columns: Tuple[Column, ...] = (),
        key_name: Optional[str] = None,
        **extra,
    ) -> Procedure:
        token = _NAME_TOKENS[operation.base]
        name = procedure_name(self.prefix, self.table.name, token, key_name)

        method_name = token
        if key_name:
            method_name += f"By{key_name}"
        if operation.is_json:
            method_name += "Json"

        projection = self.table.columns if operation.returns_rows else ()

        return Procedure(
            operation=operation,
            table=self.table,
            name=name,
            method_name=method_name,
            parameters=tuple(parameters),
            key_columns=tuple(key_columns),
            key_name=key_name,
            projection=projection,
            **extra,
        )

    def insert(self) -> Procedure:
        table = self.table
        return self._make(
            Operation.INSERT,
            parameters=tuple(c for c in table.columns if not c.is_generated),
            insert_columns=tuple(c for c in table.columns if not c.is_identity),
            return_column=insert_return_column(table),
        )

    def update(self) -> Procedure:
        table = self.table
        return self._make(
            Operation.UPDATE,
            parameters=table.columns,
            key_columns=table.primary_keys,
            set_columns=tuple(c for c in table.columns if not table.is_primary_key(c)),
        )

    def by_primary_key(self, operation: Operation) -> Procedure:
        keys = self.table.primary_keys
        return self._make(operation, parameters=keys, key_columns=keys)

    def by_group(self, operation: Operation, group: Tuple[Column, ...]) -> Procedure:
        return self._make(
            operation,
            parameters=group,
            key_columns=group,
            key_name=composite_key_name(group),
        )

    def select_all(self, operation: Operation) -> Procedure:
        return self._make(operation)


def decide_procedures(table: Table, prefix: str = "") -> List[Procedure]:
    """
    Decide the operations applicable to a table.

    Pure function: the same table always yields the same ordered list.

    Args:
        table: Table to generate for
        prefix: Stored-procedure name prefix

    Returns:
        Procedures in emission order: Insert, Update, Delete, DeleteAllBy*,
        Select, SelectJson, SelectAll, SelectAllJson, SelectAllBy*,
        SelectAllByJson*
    """
    builder = ProcedureBuilder(table, prefix)
    groups = table.foreign_key_groups
    procedures = [builder.insert()]

    if can_update(table):
        procedures.append(builder.update())

    if can_delete(table):
        procedures.append(builder.by_primary_key(Operation.DELETE))

    for group in groups:
        procedures.append(builder.by_group(Operation.DELETE_ALL_BY, group))

    if can_select(table):
        procedures.append(builder.by_primary_key(Operation.SELECT))
        procedures.append(builder.by_primary_key(Operation.SELECT_JSON))

    if can_select_all(table):
        procedures.append(builder.select_all(Operation.SELECT_ALL))
        procedures.append(builder.select_all(Operation.SELECT_ALL_JSON))

    for group in groups:
        procedures.append(builder.by_group(Operation.SELECT_ALL_BY, group))

    for group in groups:
        procedures.append(builder.by_group(Operation.SELECT_ALL_BY_JSON, group))

    logger.debug(
        "Table %s: %s",
        table.name,
        ", ".join(procedure.method_name for procedure in procedures),
    )
    return procedures


def operation_set(table: Table) -> List[str]:
    """Method names of the decided operations, for reporting."""
    return [procedure.method_name for procedure in decide_procedures(table)]
