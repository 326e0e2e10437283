"""
SQL Server stored-procedure generator.

Renders one drop/create pair per decided procedure, the database
selection header and the optional login/user permission script.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from ...logging_config import get_logger
from ..core.config import GeneratorConfig, OutputMode
from ..core.procedures import Procedure, decide_procedures
from ..core.schema import LENGTH_TYPES, PRECISION_TYPES, Column, Database, Table
from ..core.sink import SHARED_SQL_FILE, Artifact, ArtifactKind
from ..core.templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)

PERMISSIONS_FILE = "GrantUserPermissions.sql"

SEPARATOR = (
    "\n"
    "/******************************************************************************\n"
    "******************************************************************************/\n"
)


def sql_type_declaration(column: Column) -> str:
    """Declared type of a column, e.g. ``nvarchar(50)`` or ``decimal(10, 2)``."""
    type_name = column.type_name

    if type_name in LENGTH_TYPES and column.length is not None:
        length = "max" if column.length == -1 else str(column.length)
        return f"{column.sql_type}({length})"

    if type_name in PRECISION_TYPES and column.precision is not None:
        return f"{column.sql_type}({column.precision}, {column.scale or 0})"

    return column.sql_type


def sql_parameter(column: Column) -> str:
    """Parameter declaration for a procedure signature."""
    return f"@{column.name} {sql_type_declaration(column)}"


class SqlGenerator:
    """Renders stored-procedure scripts from Procedure records."""

    def __init__(self, config: GeneratorConfig, database_name: str):
        self.config = config
        self.database_name = database_name
        self._template_engine: Optional[TemplateEngine] = None

    @property
    def template_engine(self) -> TemplateEngine:
        if self._template_engine is None:
            engine = create_template_engine(Path(__file__).parent / "templates")
            engine.add_filter("sql_parameter", sql_parameter)
            engine.add_filter("sql_type", sql_type_declaration)
            self._template_engine = engine
        return self._template_engine

    @property
    def grant_principal(self) -> str:
        return self.config.grant_principal or ""

    def use_statement(self) -> str:
        return f"use [{self.database_name}]\ngo\n\n"

    def _block_header(self) -> str:
        """Leading text of each procedure block."""
        if self.config.output_mode == OutputMode.MULTI_FILE:
            return self.use_statement()
        return SEPARATOR

    def render_procedure(self, procedure: Procedure) -> str:
        """Render the drop/create script of one procedure."""
        context = {
            "header": self._block_header(),
            "procedure": procedure,
            "table": procedure.table,
            "kind": procedure.operation.base.name,
            "grant_principal": self.grant_principal,
        }
        return self.template_engine.render_template("procedure.sql.j2", context)

    def render_permissions(self) -> str:
        """Render the login/user script for the configured principal."""
        context = {
            "header": SEPARATOR if self.config.single_file else "",
            "grant_principal": self.grant_principal,
            "database_name": self.database_name,
        }
        return self.template_engine.render_template("permissions.sql.j2", context)

    def generate_preamble(self) -> List[Artifact]:
        """Artifacts written before any table's procedures."""
        artifacts = []

        if self.config.single_file:
            artifacts.append(
                Artifact(ArtifactKind.SQL, SHARED_SQL_FILE, self.use_statement())
            )

        if self.config.has_grant:
            artifacts.append(
                Artifact(ArtifactKind.SQL, PERMISSIONS_FILE, self.render_permissions())
            )

        return artifacts

    def generate_table(
        self, table: Table, procedures: Optional[Iterable[Procedure]] = None
    ) -> List[Artifact]:
        """Render every SQL-bearing procedure of a table, in decision order."""
        if procedures is None:
            procedures = decide_procedures(table, self.config.procedure_prefix)

        artifacts = []
        for procedure in procedures:
            if not procedure.emits_sql:
                continue
            artifacts.append(
                Artifact(
                    ArtifactKind.SQL,
                    procedure.sql_file_name,
                    self.render_procedure(procedure),
                )
            )

        logger.debug("Rendered %d procedures for %s", len(artifacts), table.name)
        return artifacts

    def generate(self, database: Database) -> List[Artifact]:
        """Render all SQL for a database in table-then-operation order."""
        artifacts = self.generate_preamble()
        for table in database.tables:
            artifacts.extend(self.generate_table(table))
        return artifacts
