# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised while building tag trees."""

from __future__ import annotations

from typing import Any


class TagsError(Exception):
    """Base exception for genro-tags errors."""

    pass


class KeyNotFoundError(TagsError, KeyError):
    """Raised when a lookup misses and no value can be produced for the key."""

    def __init__(self, key: Any, message: str | None = None) -> None:
        self.key = key
        self.message = message or f"Key '{key}' could not be found"
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InvalidClassNameError(TagsError, ValueError):
    """Raised when a CSS class token does not satisfy the class-name syntax.

    Attributes:
        class_name: The full string passed to add_class().
        token: The token that failed validation.
        param: Name of the offending parameter.
    """

    def __init__(self, class_name: str, token: str, param: str = "class_name") -> None:
        self.class_name = class_name
        self.token = token
        self.param = param
        super().__init__(
            f"CSS class names is not valid. Problem class was '{class_name}' "
            f"(token '{token}', parameter '{param}')"
        )


class InvalidTagOperationError(TagsError, RuntimeError):
    """Raised when an operation is not allowed for the tag's element kind."""

    pass
