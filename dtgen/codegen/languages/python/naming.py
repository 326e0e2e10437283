"""
Python-specific naming utilities and sanitization.

Handles Python reserved words and the names generated code already binds.
"""

import keyword

from ...core.naming import NameSanitizer


# Python reserved keywords
PYTHON_RESERVED_WORDS = set(keyword.kwlist)

# Bound by the generated methods themselves
PYTHON_GENERATED_NAMES = {"self", "cls", "connection", "cursor", "row", "parameters"}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(PYTHON_RESERVED_WORDS | PYTHON_GENERATED_NAMES)
