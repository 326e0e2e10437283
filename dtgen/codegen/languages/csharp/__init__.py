"""
C# code generator module.

Generates transfer classes, SharpCore-based access classes and a .csproj
project manifest from a database schema.
"""

from ...core.config import GeneratorConfig
from .config import CSHARP_TYPE_MAP, CSharpType, get_csharp_type
from .generator import CSharpGenerator
from .naming import create_csharp_sanitizer

__all__ = [
    "CSharpGenerator",
    "CSharpType",
    "CSHARP_TYPE_MAP",
    "get_csharp_type",
    "create_csharp_sanitizer",
    "create_generator",
]


def create_generator(config: GeneratorConfig = None, **kwargs) -> CSharpGenerator:
    """
    Create a C# generator.

    Args:
        config: Base configuration, defaults when omitted
        **kwargs: Overrides for individual GeneratorConfig fields

    Returns:
        Configured CSharpGenerator instance
    """
    config = config or GeneratorConfig(language="csharp")
    if kwargs:
        values = config.to_dict()
        values.update(kwargs)
        values["language"] = "csharp"
        config = GeneratorConfig(**values)
    return CSharpGenerator(config)
