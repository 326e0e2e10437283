"""
Core code generation components.

Provides the schema model, naming rules, decision engine, output sink and
the base classes used by the SQL and host-language generators.
"""

from .generator import (
    ACCESS_DIRECTORY,
    CodeGenerator,
    GenerationResult,
    GeneratorError,
)
from .schema import Column, Database, Table, build_table
from .naming import (
    NameSanitizer,
    NamingCase,
    composite_key_name,
    format_camel,
    format_pascal,
    format_snake,
    procedure_name,
)
from .procedures import Operation, Procedure, decide_procedures
from .config import (
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    OutputMode,
    load_config,
)
from .sink import (
    SHARED_SQL_FILE,
    Artifact,
    ArtifactKind,
    OutputError,
    OutputSink,
    write_artifacts,
)
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "ACCESS_DIRECTORY",
    # Schema model
    "Column",
    "Table",
    "Database",
    "build_table",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    "format_pascal",
    "format_camel",
    "format_snake",
    "composite_key_name",
    "procedure_name",
    # Decision engine
    "Operation",
    "Procedure",
    "decide_procedures",
    # Configuration system
    "GeneratorConfig",
    "OutputMode",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Output
    "Artifact",
    "ArtifactKind",
    "OutputSink",
    "OutputError",
    "SHARED_SQL_FILE",
    "write_artifacts",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
