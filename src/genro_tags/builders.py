# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Builders - shortcuts for creating HTML5 tags.

This module provides HtmlTagFactory, which exposes one method per HTML5
element via __getattr__, and a few helpers that build and append common
children.

Example:
    Building a list::

        from genro_tags.builders import tags

        ul = tags.ul(class_='menu')
        ul.append(tags.li('Home', data_id='1'))
        ul.append(tags.li('About'))
        str(ul)
        # '<ul class="menu"><li data-id="1">Home</li><li>About</li></ul>'
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .tag_node import TagConfigurator, TagNode

HTML5_ELEMENTS = frozenset(
    {
        "a", "abbr", "address", "area", "article", "aside", "audio", "b", "base",
        "bdi", "bdo", "blockquote", "body", "br", "button", "canvas", "caption",
        "cite", "code", "col", "colgroup", "data", "datalist", "dd", "del",
        "details", "dfn", "dialog", "div", "dl", "dt", "em", "embed", "fieldset",
        "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5",
        "h6", "head", "header", "hgroup", "hr", "html", "i", "iframe", "img",
        "input", "ins", "kbd", "label", "legend", "li", "link", "main", "map",
        "mark", "menu", "meta", "meter", "nav", "noscript", "object", "ol",
        "optgroup", "option", "output", "p", "param", "picture", "pre",
        "progress", "q", "rp", "rt", "ruby", "s", "samp", "script", "search",
        "section", "select", "slot", "small", "source", "span", "strong",
        "style", "sub", "summary", "sup", "table", "tbody", "td", "template",
        "textarea", "tfoot", "th", "thead", "time", "title", "tr", "track", "u",
        "ul", "var", "video", "wbr",
    }
)


def attribute_name(name: str) -> str:
    """Map a keyword name to an attribute name: class_ -> class, data_id -> data-id."""
    return name.rstrip("_").replace("_", "-")


class HtmlTagFactory:
    """Factory with one method per HTML5 element.

    Each method creates a new, unattached TagNode. The optional positional
    argument is the inner text; keyword arguments become attributes
    (a None value is skipped, True sets a boolean attribute).

    Attributes:
        ELEMENTS: Set of element names the factory accepts.
    """

    ELEMENTS = HTML5_ELEMENTS

    def __getattr__(self, name: str) -> Callable[..., TagNode]:
        """Dynamic method for any HTML tag.

        Raises:
            AttributeError: If name is not a known HTML element.
        """
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

        if name in self.ELEMENTS:
            return self._make_tag_method(name)

        raise AttributeError(f"'{name}' is not a valid HTML tag")

    def __contains__(self, name: str) -> bool:
        return name in self.ELEMENTS

    def _make_tag_method(self, name: str) -> Callable[..., TagNode]:
        """Create a method for a specific tag."""

        def tag_method(text: str | None = None, **attr: Any) -> TagNode:
            tag = TagNode(name)
            if text is not None:
                tag.text(text)
            for key, value in attr.items():
                if value is True:
                    tag.boolean_attr(attribute_name(key))
                elif value is not None and value is not False:
                    tag.attr(attribute_name(key), value)
            return tag

        return tag_method


tags = HtmlTagFactory()


def span(parent: TagNode, configure: TagConfigurator) -> TagNode:
    """Append a configured span to parent and return parent."""
    child = TagNode("span")
    configure(child)
    return parent.append(child)


def div(parent: TagNode, configure: TagConfigurator) -> TagNode:
    """Append a configured div to parent and return parent."""
    child = TagNode("div")
    configure(child)
    return parent.append(child)


def action_link(parent: TagNode, text: str, *classes: str) -> TagNode:
    """Append an <a href="#"> link and return the link."""
    link = TagNode("a").attr("href", "#").text(text).add_classes(*classes)
    parent.append(link)
    return link
