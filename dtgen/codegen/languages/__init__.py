"""
Language-specific code generators.

This module contains generators for the supported host languages.
"""

from .csharp import CSharpGenerator
from .python import PythonGenerator

__all__ = ["CSharpGenerator", "PythonGenerator"]
