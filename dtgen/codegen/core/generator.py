"""
Base generator interface for all host-language targets.

Defines the contract that every language generator implements: a transfer
type and an access type per table, plus a project manifest enumerating the
generated files.
"""

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .config import GeneratorConfig
from .naming import format_pascal
from .procedures import Procedure, decide_procedures
from .schema import Database, Table
from .sink import Artifact, ArtifactKind
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)

# Access types live below this sub-path of the output directory
ACCESS_DIRECTORY = "Repositories"


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all host-language generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())
        self.register_filters(self._template_engine)

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'csharp', 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.cs', '.py')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    def register_filters(self, engine: TemplateEngine):
        """Hook for language-specific template filters."""
        pass

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    # Naming shared by file paths, manifests and generated code

    def transfer_class_name(self, table: Table) -> str:
        return format_pascal(table.name) + self.config.transfer_suffix

    def access_class_name(self, table: Table) -> str:
        return format_pascal(table.name) + self.config.access_suffix

    def transfer_path(self, table: Table) -> str:
        """Path of the transfer file, relative to the output directory."""
        return f"{self.transfer_class_name(table)}{self.file_extension}"

    def access_path(self, table: Table) -> str:
        """Path of the access file, relative to the output directory."""
        name = f"{self.access_class_name(table)}{self.file_extension}"
        return str(PurePosixPath(ACCESS_DIRECTORY, name))

    def manifest_paths(self, database: Database) -> List[str]:
        """Every generated source path, transfer before access, per table."""
        paths = []
        for table in database.tables:
            paths.append(self.transfer_path(table))
            paths.append(self.access_path(table))
        return paths

    # Rendering

    @abstractmethod
    def generate_transfer(self, table: Table, procedures: List[Procedure]) -> str:
        """Render the transfer type of a table."""
        pass

    @abstractmethod
    def generate_access(self, table: Table, procedures: List[Procedure]) -> str:
        """Render the access type of a table."""
        pass

    @abstractmethod
    def generate_manifest(self, database: Database) -> List[Artifact]:
        """Render the project manifest artifact(s) for a run."""
        pass

    def generate_table(
        self, table: Table, procedures: Optional[List[Procedure]] = None
    ) -> List[Artifact]:
        """Render both host artifacts of one table."""
        if procedures is None:
            procedures = decide_procedures(table, self.config.procedure_prefix)

        transfer = self.format_code(self.generate_transfer(table, procedures))
        access = self.format_code(self.generate_access(table, procedures))

        return [
            Artifact(ArtifactKind.TRANSFER, self.transfer_path(table), transfer),
            Artifact(ArtifactKind.ACCESS, self.access_path(table), access),
        ]

    def generate(self, database: Database) -> List[Artifact]:
        """Render the host artifacts of every table and the manifest."""
        artifacts = []
        for table in database.tables:
            artifacts.extend(self.generate_table(table))
        artifacts.extend(self.generate_manifest(database))
        return artifacts

    def validate_tables(self, database: Database) -> List[str]:
        """
        Report table shapes that limit what can be generated.

        The model itself is trusted; these are informational warnings.
        """
        warnings = []

        for table in database.tables:
            if not table.columns:
                warnings.append(f"Table '{table.name}' has no columns")
            if not table.primary_keys:
                warnings.append(
                    f"Table '{table.name}' has no primary key; "
                    "no Update, Delete or Select will be generated"
                )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply basic formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Code without trailing whitespace or runs of blank lines
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with context.

        Args:
            template_name: Template file name
            context: Template variables

        Returns:
            Rendered content
        """
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        artifacts: List[Artifact] = None,
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            artifacts: Generated artifacts in write order
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.artifacts = artifacts or []
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = None
        self.exception = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls()
        result.success = False
        result.error_message = message
        result.exception = exception
        return result

    def artifacts_of(self, kind: ArtifactKind) -> List[Artifact]:
        return [artifact for artifact in self.artifacts if artifact.kind == kind]

    def get(self, path: str) -> Optional[Artifact]:
        """First artifact with the given path."""
        for artifact in self.artifacts:
            if artifact.path == path:
                return artifact
        return None
