# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Genro-Tags - Fluent HTML tag trees.

Build a tree of TagNode objects with a chainable API, then render it to
HTML markup, compact or pretty-printed.

Example:
    >>> from genro_tags import TagNode
    >>> form = TagNode('form').attr('method', 'post')
    >>> label = form.add('div/label').text('Name')
    >>> str(form)
    '<form method="post"><div><label>Name</label></div></form>'
"""

__version__ = "0.1.0"

from .builders import HtmlTagFactory, action_link, div, span, tags
from .cache import KeyedCache
from .config import (
    TagsConfig,
    configure,
    get_config,
    override_config,
    set_config,
    use_metadata_suffix,
)
from .exceptions import (
    InvalidClassNameError,
    InvalidTagOperationError,
    KeyNotFoundError,
    TagsError,
)
from .renderer import HtmlWriter, render, render_all
from .tag_node import AttributeValue, LiteralTag, TagKind, TagNode
from .tag_source import TagList, TagSource, iter_tags, to_tag_list

__all__ = [
    # Core classes
    "TagNode",
    "LiteralTag",
    "TagKind",
    "AttributeValue",
    "KeyedCache",
    # Tag sources
    "TagSource",
    "TagList",
    "iter_tags",
    "to_tag_list",
    # Builders
    "HtmlTagFactory",
    "tags",
    "span",
    "div",
    "action_link",
    # Rendering
    "HtmlWriter",
    "render",
    "render_all",
    # Configuration
    "TagsConfig",
    "get_config",
    "set_config",
    "configure",
    "override_config",
    "use_metadata_suffix",
    # Exceptions
    "TagsError",
    "KeyNotFoundError",
    "InvalidClassNameError",
    "InvalidTagOperationError",
]
