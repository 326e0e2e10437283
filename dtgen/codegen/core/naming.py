"""
Naming utilities for safe code generation.

Case conversions shared by the SQL and host-language emitters, composition
of compound procedure and method names, and reserved-word handling for
generated identifiers.
"""

import re
from enum import Enum
from typing import Dict, Optional, Sequence, Set

from .schema import Column


class NamingCase(Enum):
    """Different naming case styles."""

    SNAKE_CASE = "snake"  # user_name
    CAMEL_CASE = "camel"  # userName
    PASCAL_CASE = "pascal"  # UserName


# Anything that cannot appear in an identifier splits words
_WORD_SPLIT = re.compile(r"[^0-9A-Za-z_]+")


def _words(name: str) -> list:
    return [word for word in _WORD_SPLIT.split(name) if word]


def format_pascal(name: str) -> str:
    """Upper-case the first character of every word and join the words.

    Spelling is otherwise kept verbatim: ``customer_id`` stays
    ``Customer_id`` and ``OrderID`` stays ``OrderID``.
    """
    return "".join(word[0].upper() + word[1:] for word in _words(name))


def format_camel(name: str) -> str:
    """Pascal form with its leading upper-case run lowered.

    ``CustomerID`` -> ``customerID``, ``ID`` -> ``id``, ``URLPath`` -> ``urlPath``.
    """
    pascal = format_pascal(name)
    if not pascal:
        return pascal

    run = 0
    while run < len(pascal) and pascal[run].isupper():
        run += 1

    if run <= 1 or run == len(pascal):
        return pascal[:run].lower() + pascal[run:]
    # Keep the last capital of the run: it starts the next word
    return pascal[: run - 1].lower() + pascal[run - 1 :]


def format_snake(name: str) -> str:
    """Convert to snake_case."""
    name = "_".join(_words(name))
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"_+", "_", name.lower())
    return name.strip("_")


def convert_case(name: str, target_case: NamingCase) -> str:
    """Convert name to target case style."""
    if target_case == NamingCase.PASCAL_CASE:
        return format_pascal(name)
    elif target_case == NamingCase.CAMEL_CASE:
        return format_camel(name)
    elif target_case == NamingCase.SNAKE_CASE:
        return format_snake(name)
    return name


def composite_key_name(columns: Sequence[Column]) -> str:
    """Join the pascal form of each key column with ``_``."""
    return "_".join(format_pascal(column.name) for column in columns)


def procedure_name(
    prefix: str, table_name: str, operation: str, key_name: Optional[str] = None
) -> str:
    """Compose ``{prefix}{Table}{Operation}[By{KeyName}]``."""
    name = f"{prefix}{table_name}{operation}"
    if key_name:
        name += f"By{key_name}"
    return name


class NameSanitizer:
    """Converts names to a target case and escapes reserved words."""

    def __init__(
        self,
        reserved_words: Set[str] = None,
        escape_prefix: str = "",
        escape_suffix: str = "_",
        case_sensitive: bool = True,
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            escape_prefix: Prepended to a name that collides with a reserved word
            escape_suffix: Appended to a name that collides with a reserved word
            case_sensitive: Whether reserved-word matching is case sensitive
        """
        self.case_sensitive = case_sensitive
        words = reserved_words or set()
        self.reserved_words = words if case_sensitive else {w.lower() for w in words}
        self.escape_prefix = escape_prefix
        self.escape_suffix = escape_suffix if not escape_prefix else ""
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(
        self, name: str, target_case: NamingCase = NamingCase.CAMEL_CASE
    ) -> str:
        """
        Sanitize a name for safe use in the target language.

        Args:
            name: Original name to sanitize
            target_case: Desired case style

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}_{target_case.value}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        converted = convert_case(name, target_case) or "value"
        if converted[0].isdigit():
            converted = f"_{converted}"

        if self.is_reserved(converted):
            converted = f"{self.escape_prefix}{converted}{self.escape_suffix}"

        self._name_cache[cache_key] = converted
        return converted

    def is_reserved(self, name: str) -> bool:
        key = name if self.case_sensitive else name.lower()
        return key in self.reserved_words
