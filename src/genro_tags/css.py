# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CSS class-name parsing and validation.

A class string is either a JSON literal (an object or array, kept as one
opaque token) or a whitespace-separated list of class names. Each class
name must start with an optional '-', then a letter, '_' or an escaped
character, followed by letters, digits, '-', '_' or escaped characters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ClassNamePattern:
    """Regex constraint for class-name tokens."""

    pattern: str = r"-?(?:[_a-zA-Z]|\\.)(?:[_a-zA-Z0-9-]|\\.)*"

    def __call__(self, token: str) -> bool:
        return re.fullmatch(self.pattern, token) is not None


CLASS_NAME = ClassNamePattern()


def is_json_class_name(class_name: str) -> bool:
    """True if class_name looks like a JSON object or array literal."""
    text = class_name.strip()
    return (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    )


def is_valid_class_name(class_name: str, allow_invalid: bool = False) -> bool:
    """Check a single class token.

    Args:
        class_name: The token to check.
        allow_invalid: If True, every token is accepted.
    """
    return allow_invalid or is_json_class_name(class_name) or CLASS_NAME(class_name)


def parse_class_names(class_name: str) -> list[str]:
    """Split a class string into tokens.

    JSON literals are returned whole; anything else is split on runs of
    whitespace, dropping empty tokens.
    """
    if is_json_class_name(class_name):
        return [class_name]
    return [token for token in _WHITESPACE.split(class_name) if token]
