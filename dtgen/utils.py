"""Utility functions for loading database schemas.

This module loads the JSON schema description of a database from a local
file or a URL and turns it into the immutable schema model.
"""

import json
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import requests

from .codegen.core.schema import Column, Database, Table, build_table
from .logging_config import get_logger

logger = get_logger(__name__)


class SchemaLoadError(Exception):
    """Custom exception for schema loading errors."""

    pass


def load_json_from_file(file_path: str | Path) -> Any:
    """Load JSON data from a local file.

    Raises:
        FileNotFoundError: If file doesn't exist.
        SchemaLoadError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load schema from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"File does not have .json extension: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}", exc_info=True)
        raise SchemaLoadError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}", exc_info=True)
        raise SchemaLoadError(f"Error reading file {file_path}: {e}") from e


def load_json_from_url(url: str, timeout: int = 30) -> Any:
    """Load JSON data from a URL.

    Raises:
        SchemaLoadError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug(f"Attempting to load schema from URL: {url}")

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        logger.error(f"Invalid URL format: {url}")
        raise SchemaLoadError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise SchemaLoadError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise SchemaLoadError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}", exc_info=True)
        raise SchemaLoadError(f"Request error for URL {url}: {e}") from e
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON response from URL {url}: {e}", exc_info=True)
        raise SchemaLoadError(f"Invalid JSON response from URL {url}: {e}") from e


def _column_from_dict(data: dict) -> Column:
    return Column(
        name=data["name"],
        sql_type=data["type"],
        length=data.get("length"),
        precision=data.get("precision"),
        scale=data.get("scale"),
        is_identity=bool(data.get("identity", False)),
        is_rowguid=bool(data.get("rowguid", False)),
        nullable=bool(data.get("nullable", False)),
    )


def _table_from_dict(data: dict) -> Table:
    columns = [_column_from_dict(column) for column in data.get("columns", [])]
    return build_table(
        data["name"],
        columns,
        primary_keys=data.get("primary_keys", []),
        foreign_keys=data.get("foreign_keys", {}),
    )


def schema_from_dict(data: Any) -> Database:
    """Build the schema model from parsed schema JSON.

    Raises:
        SchemaLoadError: If required keys are missing or have the wrong shape.
    """
    if not isinstance(data, dict):
        raise SchemaLoadError("Schema must be a JSON object")

    try:
        tables = tuple(_table_from_dict(table) for table in data.get("tables", []))
        database = Database(name=data["database"], tables=tables)
    except (KeyError, TypeError, AttributeError) as e:
        raise SchemaLoadError(f"Malformed schema: {e!r}") from e

    logger.info(f"Loaded schema {database.name} with {len(tables)} tables")
    return database


def load_schema(source: str | Path, timeout: int = 30) -> Database:
    """Load a database schema from a file path or an http(s) URL.

    Args:
        source: Path to a local schema file, or URL serving one.
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        The schema model.

    Raises:
        SchemaLoadError: If loading or parsing fails.
        FileNotFoundError: If a local file doesn't exist.
    """
    source_text = str(source)
    if urlparse(source_text).scheme in ("http", "https"):
        data = load_json_from_url(source_text, timeout)
    else:
        data = load_json_from_file(source)
    return schema_from_dict(data)
