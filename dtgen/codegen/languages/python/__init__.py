"""
Python code generator module.

Generates dataclass transfer types and DB-API access classes from a
database schema.
"""

from ...core.config import GeneratorConfig
from .config import PYTHON_TYPE_MAP, PythonType, get_python_type
from .generator import PythonGenerator
from .naming import create_python_sanitizer

__all__ = [
    "PythonGenerator",
    "PythonType",
    "PYTHON_TYPE_MAP",
    "get_python_type",
    "create_python_sanitizer",
    "create_generator",
]


def create_generator(config: GeneratorConfig = None, **kwargs) -> PythonGenerator:
    """
    Create a Python generator.

    Args:
        config: Base configuration, defaults when omitted
        **kwargs: Overrides for individual GeneratorConfig fields

    Returns:
        Configured PythonGenerator instance
    """
    config = config or GeneratorConfig(language="python")
    if kwargs:
        values = config.to_dict()
        values.update(kwargs)
        values["language"] = "python"
        config = GeneratorConfig(**values)
    return PythonGenerator(config)
