# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Process-wide configuration for tag building and rendering.

The configuration is an immutable TagsConfig value. The current value is
read by the renderer when no explicit config is passed, and by mutation
methods that need to recognize the reserved metadata attribute or decide
whether CSS class names are validated.

Fields:
    - metadata_suffix: suffix of the metadata attribute ('data-' + suffix)
    - indent: indentation unit used by pretty rendering
    - newline: line separator used by pretty rendering
    - allow_invalid_css_class_names: skip class-name syntax validation

Example:
    >>> from genro_tags.config import get_config, override_config
    >>> get_config().metadata_attribute
    'data-__'
    >>> with override_config(metadata_suffix='meta'):
    ...     get_config().metadata_attribute
    'data-meta'
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any

DATA_PREFIX = "data-"


@dataclass(frozen=True)
class TagsConfig:
    """Immutable configuration value."""

    metadata_suffix: str = "__"
    indent: str = "  "
    newline: str = os.linesep
    allow_invalid_css_class_names: bool = False

    @property
    def metadata_attribute(self) -> str:
        """Name of the attribute holding the aggregate metadata JSON."""
        return DATA_PREFIX + self.metadata_suffix


_current: TagsConfig = TagsConfig()


def get_config() -> TagsConfig:
    """Return the current process-wide configuration."""
    return _current


def set_config(config: TagsConfig) -> TagsConfig:
    """Replace the process-wide configuration. Returns the previous one."""
    global _current
    previous = _current
    _current = config
    return previous


def configure(**changes: Any) -> TagsConfig:
    """Update selected fields of the process-wide configuration.

    Args:
        **changes: TagsConfig field names and their new values.

    Returns:
        The new current configuration.
    """
    set_config(replace(_current, **changes))
    return _current


def use_metadata_suffix(suffix: str) -> None:
    """Change the metadata attribute suffix for all subsequent renders."""
    configure(metadata_suffix=suffix)


@contextmanager
def override_config(**changes: Any) -> Iterator[TagsConfig]:
    """Temporarily update the configuration, restoring it on exit."""
    previous = set_config(replace(_current, **changes))
    try:
        yield _current
    finally:
        set_config(previous)
