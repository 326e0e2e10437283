"""
Python code generator implementation.

Generates a dataclass transfer type and a DB-API access class per table,
plus the package ``__init__`` modules that export them.
"""

from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.generator import ACCESS_DIRECTORY, CodeGenerator
from ...core.naming import NamingCase, format_snake
from ...core.procedures import Operation, Procedure
from ...core.schema import Column, Database, Table
from ...core.sink import Artifact, ArtifactKind
from .config import collect_imports, get_python_type, scalar_conversion, typing_names
from .naming import create_python_sanitizer

logger = get_logger(__name__)

# Python packages are lower case
ACCESS_PACKAGE = ACCESS_DIRECTORY.lower()

_SUMMARIES = {
    Operation.INSERT: "Save a record to the {table} table.",
    Operation.UPDATE: "Update a record in the {table} table.",
    Operation.DELETE: "Delete a record from the {table} table by its primary key.",
    Operation.DELETE_ALL_BY: "Delete records from the {table} table by a foreign key.",
    Operation.SELECT: "Select a single record from the {table} table.",
    Operation.SELECT_JSON: "Select a single record from the {table} table as JSON.",
    Operation.SELECT_ALL: "Select all records from the {table} table.",
    Operation.SELECT_ALL_JSON: "Select all records from the {table} table as JSON.",
    Operation.SELECT_ALL_BY: "Select all records from the {table} table by a foreign key.",
    Operation.SELECT_ALL_BY_JSON: "Select all records from the {table} table by a foreign key as JSON.",
}


def odbc_call(procedure: Procedure) -> str:
    """ODBC call escape invoking a stored procedure with positional markers."""
    target = f"[dbo].[{procedure.name}]"
    if not procedure.parameters:
        return "{CALL " + target + "}"
    markers = ", ".join("?" for _ in procedure.parameters)
    return "{CALL " + target + " (" + markers + ")}"


class PythonGenerator(CodeGenerator):
    """Code generator for Python dataclasses and DB-API access classes."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Python generator with configuration."""
        super().__init__(config)
        self.sanitizer = create_python_sanitizer()

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    def get_template_directory(self) -> Optional[Path]:
        """Return the Python templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def register_filters(self, engine):
        engine.add_filter("py_name", self.attribute_name)
        engine.add_filter("py_type", lambda column: get_python_type(column).name)
        engine.add_filter("py_default", lambda column: get_python_type(column).default)

    # Naming and paths

    def attribute_name(self, value) -> str:
        """snake_case attribute or argument name, escaped when reserved."""
        name = value.name if isinstance(value, Column) else value
        return self.sanitizer.sanitize_name(name, NamingCase.SNAKE_CASE)

    def transfer_module(self, table: Table) -> str:
        return format_snake(self.transfer_class_name(table))

    def access_module(self, table: Table) -> str:
        return format_snake(self.access_class_name(table))

    def transfer_path(self, table: Table) -> str:
        return f"{self.transfer_module(table)}{self.file_extension}"

    def access_path(self, table: Table) -> str:
        name = f"{self.access_module(table)}{self.file_extension}"
        return str(PurePosixPath(ACCESS_PACKAGE, name))

    # Transfer type

    def generate_transfer(self, table: Table, procedures: List[Procedure]) -> str:
        """Generate the dataclass of a table."""
        columns = list(table.columns)
        partial_columns = [column for column in columns if not column.is_generated]
        if len(partial_columns) == len(columns):
            partial_columns = []

        context = {
            "class_name": self.transfer_class_name(table),
            "table": table,
            "columns": columns,
            "partial_columns": partial_columns,
            "imports": sorted(
                collect_imports(columns)
                + [
                    "from dataclasses import dataclass",
                    f"from typing import {', '.join(typing_names(columns))}",
                ]
            ),
        }
        return self.render_template("transfer.py.j2", context)

    # Access type

    def generate_access(self, table: Table, procedures: List[Procedure]) -> str:
        """Generate the access class of a table."""
        transfer_class = self.transfer_class_name(table)
        transfer_variable = self.attribute_name(table.name)

        context = {
            "class_name": self.access_class_name(table),
            "transfer_class": transfer_class,
            "transfer_module": self.transfer_module(table),
            "transfer_variable": transfer_variable,
            "table": table,
            "columns": list(table.columns),
            "imports": sorted(
                collect_imports(table.columns)
                + [
                    "from contextlib import closing",
                    "from typing import "
                    + ", ".join(sorted(set(typing_names(table.columns)) | {"List"})),
                ]
            ),
            "methods": [
                self._method_data(table, procedure, transfer_class, transfer_variable)
                for procedure in procedures
            ],
        }
        return self.render_template("access.py.j2", context)

    def _method_data(
        self,
        table: Table,
        procedure: Procedure,
        transfer_class: str,
        transfer_variable: str,
    ) -> Dict[str, Any]:
        """Build the template context of one access method."""
        operation = procedure.operation
        takes_object = operation in (Operation.INSERT, Operation.UPDATE)

        if takes_object:
            arguments = [f"{transfer_variable}: {transfer_class}"]
            bindings = [
                f"{transfer_variable}.{self.attribute_name(column)}"
                for column in procedure.parameters
            ]
        else:
            arguments = [
                f"{self.attribute_name(column)}: {get_python_type(column).name}"
                for column in procedure.parameters
            ]
            bindings = [self.attribute_name(column) for column in procedure.parameters]

        if operation.is_json:
            return_type = "str"
        elif operation.base == Operation.SELECT:
            return_type = f"Optional[{transfer_class}]"
        elif operation.returns_rows:
            return_type = f"List[{transfer_class}]"
        else:
            return_type = "None"

        call = odbc_call(procedure)
        return_assignment = None
        if procedure.return_column is not None:
            column = procedure.return_column
            scalar = scalar_conversion(column, f'self._scalar("{call}", parameters)')
            return_assignment = (
                f"{transfer_variable}.{self.attribute_name(column)} = {scalar}"
            )

        return {
            "kind": operation.name,
            "is_json": operation.is_json,
            "name": format_snake(procedure.method_name),
            "summary": _SUMMARIES[operation].format(table=table.name),
            "signature": ", ".join(["self"] + arguments),
            "return_type": return_type,
            "bindings": bindings,
            "call": call,
            "return_assignment": return_assignment,
        }

    # Package manifest

    def generate_manifest(self, database: Database) -> List[Artifact]:
        """Generate the package modules exporting every generated class."""
        transfer_exports = [
            (self.transfer_module(table), self.transfer_class_name(table))
            for table in database.tables
        ]
        access_exports = [
            (self.access_module(table), self.access_class_name(table))
            for table in database.tables
        ]

        artifacts = []
        for path, exports, description in (
            ("__init__.py", transfer_exports, "Transfer types"),
            (f"{ACCESS_PACKAGE}/__init__.py", access_exports, "Data access types"),
        ):
            content = self.render_template(
                "package_init.py.j2",
                {
                    "description": f"{description} of the {database.name} database.",
                    "exports": exports,
                },
            )
            artifacts.append(
                Artifact(ArtifactKind.MANIFEST, path, self.format_code(content))
            )

        logger.debug(f"Package manifests export {len(transfer_exports)} tables")
        return artifacts
