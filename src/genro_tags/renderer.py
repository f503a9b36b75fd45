# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Serialization of tag trees to HTML markup.

This module provides HtmlWriter, a small markup writer with a stack of
open tags, and the render() entry point that walks a TagNode tree.

Per node, the renderer:
    1. re-roots to the top ancestor if the node renders from top
    2. writes the opening tag with attributes in a fixed order: stored
       attributes (insertion order), 'class', the metadata attribute,
       'style'
    3. writes the inner text (escaped unless encoding is disabled) and
       then every child
    4. writes the closing tag, unless the node has none
    5. continues with the node's 'next' sibling at the same level

A node that will not be rendered emits nothing, and neither do its
children or the siblings chained after it.

Example:
    >>> from genro_tags import TagNode
    >>> render(TagNode('div').add_class('a').text('x < y'))
    '<div class="a">x &lt; y</div>'
"""

from __future__ import annotations

import html
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from .config import DATA_PREFIX, TagsConfig, get_config
from .serialization import to_json
from .tag_node import TagKind, TagNode
from .tag_source import TagSource, iter_tags

logger = logging.getLogger(__name__)

CSS_CLASS_ATTRIBUTE = "class"
CSS_STYLE_ATTRIBUTE = "style"

# Elements written in self-closing form, never with a closing tag.
VOID_ELEMENTS = frozenset(
    {
        "area", "base", "br", "col", "embed", "hr", "img", "input", "keygen",
        "link", "meta", "param", "source", "track", "wbr",
    }
)


@dataclass
class _OpenTag:
    name: str
    void: bool
    has_child_tags: bool = False


class HtmlWriter:
    """Markup writer with attribute buffering and a stack of open tags.

    Attributes are collected with add_attribute() and written by the next
    render_begin_tag(). render_end_tag() closes the innermost open tag.
    When newline is non-empty, every tag starts on its own line indented by
    its depth, and a closing tag goes on its own line if the element
    contains child tags.

    Args:
        indent: Indentation unit (pretty mode).
        newline: Line separator; '' selects compact output.
    """

    def __init__(self, indent: str = "", newline: str = "") -> None:
        self.indent = indent
        self.newline = newline
        self._parts: list[str] = []
        self._stack: list[_OpenTag] = []
        self._attributes: list[tuple[str, str | None, bool]] = []
        self._discard = False

    def getvalue(self) -> str:
        return "".join(self._parts)

    def _emit(self, text: str) -> None:
        if text and not self._discard:
            self._parts.append(text)

    def _line_break(self) -> None:
        if self.newline and self._parts:
            self._emit(self.newline + self.indent * len(self._stack))

    @contextmanager
    def discarding(self) -> Iterator[None]:
        """Send everything written inside the block to a throwaway buffer."""
        previous = self._discard
        self._discard = True
        try:
            yield
        finally:
            self._discard = previous

    def add_attribute(self, name: str, value: str | None, encode: bool = True) -> None:
        """Queue an attribute for the next opening tag. None writes the name only."""
        self._attributes.append((name, value, encode))

    @staticmethod
    def _format_attribute(name: str, value: str | None, encode: bool) -> str:
        if value is None:
            return f" {name}"
        if encode:
            value = html.escape(value, quote=True)
        return f' {name}="{value}"'

    def render_begin_tag(self, tag: str) -> None:
        if self._stack:
            self._stack[-1].has_child_tags = True
        self._line_break()
        attrs = "".join(self._format_attribute(*attribute) for attribute in self._attributes)
        self._attributes = []
        void = tag in VOID_ELEMENTS
        self._emit(f"<{tag}{attrs} />" if void else f"<{tag}{attrs}>")
        self._stack.append(_OpenTag(tag, void))

    def render_end_tag(self) -> None:
        frame = self._stack.pop()
        if frame.void:
            return
        if frame.has_child_tags:
            self._line_break()
        self._emit(f"</{frame.name}>")

    def write_encoded_text(self, text: str) -> None:
        self._emit(html.escape(text, quote=False))

    def write(self, text: str) -> None:
        self._emit(text)

    def write_markup(self, markup: str) -> None:
        """Write pre-formed markup raw, on its own line in pretty mode."""
        if not markup:
            return
        if self._stack:
            self._stack[-1].has_child_tags = True
        self._line_break()
        self._emit(markup)


def _write_begin_tag(node: TagNode, writer: HtmlWriter, config: TagsConfig) -> bool:
    """Write the opening tag. Returns False if the node has none."""
    if not node.has_tag() or not node.tag_name:
        return False

    for key, attribute in node.attributes():
        if attribute is None:
            writer.add_attribute(key, None, encode=False)
            continue
        value = attribute.value
        if not isinstance(value, str) and key.startswith(DATA_PREFIX):
            string_value = to_json(value)
        else:
            string_value = str(value)
        writer.add_attribute(key, string_value, attribute.encode)

    if node.classes:
        writer.add_attribute(CSS_CLASS_ATTRIBUTE, node.css_class_value())

    metadata = node.metadata_json()
    if metadata:
        writer.add_attribute(config.metadata_attribute, metadata)

    styles = node.style_value()
    if styles:
        writer.add_attribute(CSS_STYLE_ATTRIBUTE, styles)

    writer.render_begin_tag(node.tag_name)
    return True


def _text_of(node: TagNode) -> str:
    text = node.text()
    return "" if text is None else str(text)


def _write_content(node: TagNode, writer: HtmlWriter, config: TagsConfig) -> None:
    text = _text_of(node)
    if text:
        if node.encoded():
            writer.write_encoded_text(text)
        else:
            writer.write(text)
    for child in node.children:
        write_html(child, writer, config)


def _write_end_tag(node: TagNode, writer: HtmlWriter, opened: bool) -> None:
    if not opened:
        return
    if node.has_closing_tag():
        writer.render_end_tag()
    else:
        with writer.discarding():
            writer.render_end_tag()


def write_html(node: TagNode, writer: HtmlWriter, config: TagsConfig) -> None:
    """Write node and the siblings chained after it.

    Stops at the first node of the chain that will not be rendered.
    """
    current: TagNode | None = node
    while current is not None and current.will_be_rendered():
        match current.kind:
            case TagKind.LITERAL:
                writer.write_markup(_text_of(current))
            case TagKind.STRUCTURAL:
                opened = _write_begin_tag(current, writer, config)
                _write_content(current, writer, config)
                _write_end_tag(current, writer, opened)
        current = current.next


def render(node: TagNode, pretty: bool = False, config: TagsConfig | None = None) -> str:
    """Render a tag to markup.

    Args:
        node: The tag to render.
        pretty: If True, indent nested tags and put them on separate lines.
        config: Configuration to use. Defaults to the process-wide one.

    Returns:
        The markup, or '' if the tag will not be rendered.
    """
    if not node.will_be_rendered():
        return ""
    config = config or get_config()
    writer = HtmlWriter(config.indent, config.newline) if pretty else HtmlWriter()
    if node.renders_from_top:
        top = node.top()
        if top is not node:
            logger.debug("Rendering %r from its root %r", node, top)
        node = top
    write_html(node, writer, config)
    return writer.getvalue()


def render_all(
    source: TagSource | Iterable[TagNode],
    pretty: bool = False,
    config: TagsConfig | None = None,
) -> str:
    """Concatenate the markup of every tag a source yields."""
    config = config or get_config()
    separator = config.newline if pretty else ""
    return separator.join(
        markup for markup in (render(tag, pretty, config) for tag in iter_tags(source)) if markup
    )
