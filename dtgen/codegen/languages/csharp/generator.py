"""
C# code generator implementation.

Generates a transfer class, a SharpCore-based access class per table and a
.csproj enumerating the generated files.
"""

from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.generator import ACCESS_DIRECTORY, CodeGenerator
from ...core.naming import NamingCase, format_pascal
from ...core.procedures import Operation, Procedure
from ...core.schema import Column, Database, Table
from ...core.sink import Artifact, ArtifactKind
from .config import (
    DEFAULT_TARGET_FRAMEWORK,
    SHARPCORE_ASSEMBLIES,
    SHARPCORE_DIRECTORY,
    SQLCLIENT_PACKAGE,
    get_csharp_type,
    parameter_value,
    reader_expression,
    scalar_conversion,
)
from .naming import create_csharp_sanitizer

logger = get_logger(__name__)

_SUMMARIES = {
    Operation.INSERT: "Saves a record to the {table} table.",
    Operation.UPDATE: "Updates a record in the {table} table.",
    Operation.DELETE: "Deletes a record from the {table} table by its primary key.",
    Operation.DELETE_ALL_BY: "Deletes records from the {table} table by a foreign key.",
    Operation.SELECT: "Selects a single record from the {table} table.",
    Operation.SELECT_JSON: "Selects a single record from the {table} table as JSON.",
    Operation.SELECT_ALL: "Selects all records from the {table} table.",
    Operation.SELECT_ALL_JSON: "Selects all records from the {table} table as JSON.",
    Operation.SELECT_ALL_BY: "Selects all records from the {table} table by a foreign key.",
    Operation.SELECT_ALL_BY_JSON: "Selects all records from the {table} table by a foreign key as JSON.",
}


class CSharpGenerator(CodeGenerator):
    """Code generator for C# transfer and SharpCore access classes."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize C# generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_csharp_sanitizer()
        self.namespace = self.config.namespace
        self.access_namespace = f"{self.namespace}.{ACCESS_DIRECTORY}"
        self.target_framework = self.config.custom.get(
            "target_framework", DEFAULT_TARGET_FRAMEWORK
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "csharp"

    @property
    def file_extension(self) -> str:
        """Return C# file extension."""
        return ".cs"

    def get_template_directory(self) -> Optional[Path]:
        """Return the C# templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def register_filters(self, engine):
        engine.add_filter("cs_type", lambda column: get_csharp_type(column).name)
        engine.add_filter("cs_property", self.property_name)
        engine.add_filter("cs_variable", self.variable_name)
        engine.add_filter("cs_parameter", self.parameter_declaration)

    # Naming

    def property_name(self, column: Column) -> str:
        return format_pascal(column.name)

    def variable_name(self, value) -> str:
        """camelCase local or argument name, escaped when reserved."""
        name = value.name if isinstance(value, Column) else value
        return self.sanitizer.sanitize_name(name, NamingCase.CAMEL_CASE)

    def parameter_declaration(self, column: Column) -> str:
        return f"{get_csharp_type(column).name} {self.variable_name(column)}"

    # Transfer class

    def generate_transfer(self, table: Table, procedures: List[Procedure]) -> str:
        """Generate the transfer class of a table."""
        columns = list(table.columns)
        partial_columns = [column for column in columns if not column.is_generated]

        # The partial constructor would duplicate another overload
        if len(partial_columns) in (0, len(columns)):
            partial_columns = []

        context = {
            "namespace": self.namespace,
            "class_name": self.transfer_class_name(table),
            "table": table,
            "columns": columns,
            "partial_columns": partial_columns,
        }
        return self.render_template("transfer.cs.j2", context)

    # Access class

    def generate_access(self, table: Table, procedures: List[Procedure]) -> str:
        """Generate the access class of a table."""
        transfer_class = self.transfer_class_name(table)
        transfer_variable = self.variable_name(table.name)
        methods = [
            self._method_data(table, procedure, transfer_class, transfer_variable)
            for procedure in procedures
        ]

        context = {
            "namespace": self.namespace,
            "access_namespace": self.access_namespace,
            "class_name": self.access_class_name(table),
            "transfer_class": transfer_class,
            "transfer_variable": transfer_variable,
            "list_variable": self.variable_name(transfer_class + "List"),
            "map_variable": self.variable_name(transfer_class),
            "table": table,
            "methods": methods,
            "readers": [
                (self.property_name(column), reader_expression(column, ordinal))
                for ordinal, column in enumerate(table.columns)
            ],
        }
        return self.render_template("access.cs.j2", context)

    def _binding(self, column: Column, expression: str) -> str:
        value = parameter_value(column, expression)
        return f'new SqlParameter("@{column.name}", {value})'

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
            signature = f"{transfer_class} {transfer_variable}"
            bindings = [
                self._binding(column, f"{transfer_variable}.{self.property_name(column)}")
                for column in procedure.parameters
            ]
        else:
            signature = ", ".join(
                self.parameter_declaration(column) for column in procedure.parameters
            )
            bindings = [
                self._binding(column, self.variable_name(column))
                for column in procedure.parameters
            ]

        arguments = ", parameters" if bindings else ""
        call = (
            f'connectionStringName, CommandType.StoredProcedure, "{procedure.name}"'
            f"{arguments}"
        )

        if operation.is_json:
            return_type = "string"
        elif operation.base == Operation.SELECT:
            return_type = transfer_class
        elif operation.returns_rows:
            return_type = f"List<{transfer_class}>"
        else:
            return_type = "void"

        return_assignment = None
        if procedure.return_column is not None:
            column = procedure.return_column
            scalar = scalar_conversion(column, f"SqlClientUtility.ExecuteScalar({call})")
            return_assignment = (
                f"{transfer_variable}.{self.property_name(column)} = {scalar};"
            )

        return {
            "kind": operation.name,
            "is_json": operation.is_json,
            "name": procedure.method_name,
            "summary": _SUMMARIES[operation].format(table=table.name),
            "signature": signature,
            "return_type": return_type,
            "validate": transfer_variable if takes_object else None,
            "bindings": bindings,
            "call": call,
            "return_assignment": return_assignment,
        }

    # Project manifest

    def manifest_paths(self, database: Database) -> List[str]:
        """Compile items use Windows separators."""
        return [
            str(PurePosixPath(path)).replace("/", "\\")
            for path in super().manifest_paths(database)
        ]

    def generate_manifest(self, database: Database) -> List[Artifact]:
        """Generate the .csproj referencing every generated source file."""
        package, version = SQLCLIENT_PACKAGE
        context = {
            "namespace": self.namespace,
            "project_name": self.config.project_name,
            "target_framework": self.target_framework,
            "package": package,
            "package_version": version,
            "references": [
                (assembly, f"{SHARPCORE_DIRECTORY}\\{assembly}.dll")
                for assembly in SHARPCORE_ASSEMBLIES
            ],
            "paths": self.manifest_paths(database),
        }
        content = self.format_code(self.render_template("project.csproj.j2", context))
        path = f"{self.config.project_name}.csproj"
        logger.debug(f"Project manifest {path} lists {len(context['paths'])} files")
        return [Artifact(ArtifactKind.MANIFEST, path, content)]
