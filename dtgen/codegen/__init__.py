"""
Data Tier Generator Code Generation Module

Generates stored procedures, transfer types and access types from a
database schema.
"""

from pathlib import Path
from typing import List, Optional, Union

from ..logging_config import get_logger
from .core.config import ConfigManager, GeneratorConfig, OutputMode, load_config
from .core.generator import CodeGenerator, GenerationResult, GeneratorError
from .core.procedures import decide_procedures
from .core.schema import Column, Database, Table, build_table
from .core.sink import Artifact, ArtifactKind, OutputSink
from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    list_supported_languages,
)
from .sql import SqlGenerator

logger = get_logger(__name__)


def generate_data_tier(
    database: Database,
    config: Optional[GeneratorConfig] = None,
    sql_only: bool = False,
    code_only: bool = False,
) -> GenerationResult:
    """
    Generate every artifact of a data tier.

    SQL artifacts come first (preamble, then each table's procedures), then
    each table's transfer and access types, then the project manifest.

    Args:
        database: Schema model to generate from
        config: Generator configuration, defaults when omitted
        sql_only: Skip host-language artifacts
        code_only: Skip SQL artifacts

    Returns:
        GenerationResult with artifacts, warnings, and metadata
    """
    config = config or load_config()

    try:
        if sql_only and code_only:
            raise GeneratorError("sql_only and code_only are mutually exclusive")

        generator = get_generator(config.language, config)
        database_name = config.database_name or database.name
        sql_generator = SqlGenerator(config, database_name)

        warnings = generator.validate_tables(database)
        artifacts: List[Artifact] = []

        if not code_only:
            artifacts.extend(sql_generator.generate_preamble())

        for table in database.tables:
            procedures = decide_procedures(table, config.procedure_prefix)
            logger.info(
                f"Table {table.name}: {len(procedures)} operations "
                f"({', '.join(p.method_name for p in procedures)})"
            )
            if not code_only:
                artifacts.extend(sql_generator.generate_table(table, procedures))

        if not sql_only:
            for table in database.tables:
                procedures = decide_procedures(table, config.procedure_prefix)
                artifacts.extend(generator.generate_table(table, procedures))
            artifacts.extend(generator.generate_manifest(database))

        metadata = {
            "language": generator.language_name,
            "file_extension": generator.file_extension,
            "database": database_name,
            "table_count": len(database.tables),
            "procedure_count": sum(
                1 for artifact in artifacts if artifact.kind == ArtifactKind.SQL
            ),
            "output_mode": config.output_mode.value,
        }

        return GenerationResult(artifacts, warnings, metadata)

    except Exception as e:
        logger.error(f"Data tier generation failed: {e}")
        return GenerationResult.error(str(e), e)


def write_data_tier(
    result: GenerationResult,
    config: Optional[GeneratorConfig] = None,
    output_path: Optional[Union[str, Path]] = None,
) -> List[Path]:
    """
    Write a successful generation result to disk.

    Raises:
        GeneratorError: If the result is a failed generation
        OutputError: If a file cannot be written
    """
    if not result.success:
        raise GeneratorError(f"Nothing to write: {result.error_message}")

    config = config or load_config()
    root = Path(output_path or config.output_path)

    with OutputSink(root, config.output_mode) as sink:
        sink.write_all(result.artifacts)
        written = list(sink.written)

    logger.info(f"Wrote {len(written)} files to {root}")
    return written


__version__ = "0.1.0"

__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "GeneratorConfig",
    "ConfigManager",
    "OutputMode",
    "Column",
    "Table",
    "Database",
    "build_table",
    "SqlGenerator",
    "generate_data_tier",
    "write_data_tier",
    "get_generator",
    "list_supported_languages",
    "load_config",
]
