# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""TagNode module - individual elements of an HTML tag tree.

This module provides the TagNode class, a mutable node in a markup tree,
and LiteralTag, a node whose content is pre-formed markup.

Each node has:
    - a lower-cased tag name (possibly empty for placeholders)
    - attributes stored in a KeyedCache, in insertion order
    - CSS classes (ordered set), inline styles and JSON metadata
    - inner text, encoded on render unless encoding is disabled
    - ordered children, each pointing back to this node as parent
    - an optional 'next' sibling rendered right after the node
    - rendering flags: should_render, authorized, opening/closing tag,
      encoded text, render from top

Reserved attributes:
    'class', 'style' and the metadata attribute ('data-__' by default) are
    not stored as plain attributes: each is backed by its own facet. Setting
    one of them to '' or None, or removing it, clears the whole facet.

Mutators return the node itself so they can be chained. add() returns the
innermost new node and wrap_with() returns the wrapper.

Example:
    >>> div = TagNode('div').id('main').add_class('box wide')
    >>> li = div.add('ul/li').text('first')
    >>> str(div)
    '<div id="main" class="box wide"><ul><li>first</li></ul></div>'
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from genro_toolbox import smartsplit

from .cache import KeyedCache
from .config import DATA_PREFIX, get_config
from .css import is_valid_class_name, parse_class_names
from .exceptions import InvalidClassNameError, InvalidTagOperationError, KeyNotFoundError
from .serialization import to_json
from .tag_source import TagSource, iter_tags

if TYPE_CHECKING:
    from .config import TagsConfig

logger = logging.getLogger(__name__)

CSS_CLASS_ATTRIBUTE = "class"
CSS_STYLE_ATTRIBUTE = "style"
INPUT_ELEMENTS = frozenset({"input", "select", "textarea"})

# Distinguishes "argument not given" from an explicit None.
_MISSING: Any = object()

TagConfigurator = Callable[["TagNode"], Any]


class TagKind(Enum):
    """Closed set of node variants the renderer dispatches on."""

    STRUCTURAL = "structural"
    LITERAL = "literal"


@dataclass(frozen=True)
class AttributeValue:
    """A stored attribute value.

    Attributes:
        value: The raw value (str for attr(), any object for data()).
        encode: If True the value is HTML-escaped on render; False marks
            it as already encoded.
    """

    value: Any
    encode: bool = True

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)


def split_tag_path(path: str) -> list[str]:
    """Split 'div/ul>li' into ['div', 'ul', 'li']."""
    return [name.strip() for name in smartsplit(path.replace(">", "/"), "/") if name.strip()]


class TagNode:
    """A node of an HTML markup tree.

    Attributes:
        next: The sibling rendered immediately after this node, outside of
            it. Assigning it replaces any existing sibling; use after() to
            insert while keeping the existing chain.

    Internal Attributes (via __slots__):
        _tag: Lower-cased tag name.
        _parent: The node this one is a child of.
        _children: Ordered child nodes.
        _css_classes: Ordered set of class tokens (dict with None values).
        _custom_styles: Inline style properties.
        _html_attributes: KeyedCache of AttributeValue, None for boolean
            attributes.
        _metadata: KeyedCache serialized as one JSON attribute.
    """

    kind = TagKind.STRUCTURAL

    __slots__ = (
        "_tag",
        "_parent",
        "_children",
        "_css_classes",
        "_custom_styles",
        "_html_attributes",
        "_metadata",
        "_inner_text",
        "_should_render",
        "_is_authorized",
        "_ignore_opening_tag",
        "_ignore_closing_tag",
        "_encode_inner_text",
        "_render_from_top",
        "next",
    )

    def __init__(
        self,
        tag: str = "",
        parent: TagNode | None = None,
        configure: TagConfigurator | None = None,
    ) -> None:
        """Create a tag.

        Args:
            tag: Element name, lower-cased on storage.
            parent: If given, the new tag is appended to it.
            configure: If given, called with the new tag.
        """
        self._tag = (tag or "").lower()
        self._parent: TagNode | None = None
        self._children: list[TagNode] = []
        self._css_classes: dict[str, None] = {}
        self._custom_styles: dict[str, str] = {}
        self._html_attributes: KeyedCache[str, AttributeValue | None] = KeyedCache(
            on_missing=lambda key: None
        )
        self._metadata: KeyedCache[str, Any] = KeyedCache()
        self._inner_text: str | None = ""
        self._should_render = True
        self._is_authorized = True
        self._ignore_opening_tag = False
        self._ignore_closing_tag = False
        self._encode_inner_text = True
        self._render_from_top = False
        self.next: TagNode | None = None

        if parent is not None:
            parent.append(self)
        if configure is not None:
            configure(self)

    @classmethod
    def empty(cls) -> TagNode:
        """A span that is never rendered."""
        return cls("span").should_render(False)

    @classmethod
    def placeholder(cls) -> TagNode:
        """A tagless node that renders only its children."""
        return cls().no_tag()

    def __repr__(self) -> str:
        return f"TagNode({self._tag!r}, children={len(self._children)}) at {id(self)}"

    def __str__(self) -> str:
        return self.to_string()

    def __html__(self) -> str:
        return self.to_string()

    # -------------------------------------------------------------------------
    # Rendering entry points
    # -------------------------------------------------------------------------

    def to_string(self, config: TagsConfig | None = None) -> str:
        """Compact markup, or '' if the tag will not be rendered."""
        from .renderer import render

        return render(self, config=config)

    def to_pretty_string(self, config: TagsConfig | None = None) -> str:
        """Indented markup, or '' if the tag will not be rendered."""
        from .renderer import render

        return render(self, pretty=True, config=config)

    def will_be_rendered(self) -> bool:
        return self._should_render and self._is_authorized

    def should_render(self, flag: bool = _MISSING) -> Any:
        """Get or set the render flag. A tag not rendered emits nothing."""
        if flag is _MISSING:
            return self._should_render
        self._should_render = flag
        return self

    def authorized(self, flag: bool = _MISSING) -> Any:
        """Get or set the authorization flag."""
        if flag is _MISSING:
            return self._is_authorized
        self._is_authorized = flag
        return self

    def visible_for_roles(self, is_in_role: Callable[[str], bool], *roles: str) -> TagNode:
        """Authorize the tag only if is_in_role() accepts at least one role."""
        return self.authorized(any(is_in_role(role) for role in roles))

    def render_from_top(self) -> TagNode:
        """Render the whole tree from the root ancestor when this tag is rendered."""
        self._render_from_top = True
        return self

    @property
    def renders_from_top(self) -> bool:
        return self._render_from_top

    def top(self) -> TagNode:
        """Return the root ancestor (self if there is no parent)."""
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    # -------------------------------------------------------------------------
    # Tag name and shape
    # -------------------------------------------------------------------------

    @property
    def tag_name(self) -> str:
        return self._tag

    def set_tag_name(self, tag: str) -> TagNode:
        self._tag = tag.lower()
        return self

    def no_tag(self) -> TagNode:
        """Render only the children, without this tag's opening and closing tags."""
        self._ignore_opening_tag = True
        self._ignore_closing_tag = True
        return self

    def no_closing_tag(self) -> TagNode:
        self._ignore_closing_tag = True
        return self

    def use_closing_tag(self) -> TagNode:
        self._ignore_closing_tag = False
        return self

    def has_tag(self) -> bool:
        return not self._ignore_opening_tag

    def has_closing_tag(self) -> bool:
        return not self._ignore_closing_tag

    def is_input_element(self) -> bool:
        return self._tag in INPUT_ELEMENTS

    # -------------------------------------------------------------------------
    # Tree structure
    # -------------------------------------------------------------------------

    @property
    def parent(self) -> TagNode | None:
        return self._parent

    @property
    def children(self) -> list[TagNode]:
        return self._children

    def all_tags(self) -> Iterator[TagNode]:
        """TagSource implementation: a single tag yields itself."""
        yield self

    def first_child(self) -> TagNode | None:
        return self._children[0] if self._children else None

    def _index_of(self, child: TagNode) -> int:
        return next((i for i, node in enumerate(self._children) if node is child), -1)

    def _detach(self, child: TagNode) -> None:
        idx = self._index_of(child)
        if idx >= 0:
            del self._children[idx]
        child._parent = None

    def _attach(self, child: TagNode, index: int | None = None) -> None:
        """Make child a child of self, detaching it from its previous parent."""
        if child._parent is not None:
            child._parent._detach(child)
        child._parent = self
        if index is None:
            self._children.append(child)
        else:
            self._children.insert(index, child)

    def add(self, path: str, configure: TagConfigurator | None = None) -> TagNode:
        """Create nested children along path and return the innermost one.

        Args:
            path: One or more tag names separated by '/' or '>'.
            configure: If given, called with the innermost new tag.

        Returns:
            The innermost tag created (self if path is empty).
        """
        tag = self
        for name in split_tag_path(path):
            tag = TagNode(name, parent=tag)
        if configure is not None:
            configure(tag)
        return tag

    def append(
        self,
        child: TagNode | str | TagSource | Iterable[TagNode],
        configure: TagConfigurator | None = None,
    ) -> TagNode:
        """Append a child and return self.

        Args:
            child: A TagNode; a tag path (creates nested tags as add() does);
                or a TagSource / iterable of tags (see append_all()).
            configure: With a tag path, called on the innermost new tag.
        """
        if isinstance(child, str):
            self.add(child, configure)
        elif isinstance(child, TagNode):
            self._attach(child)
        else:
            self.append_all(child)
        return self

    def append_all(self, source: TagSource | Iterable[TagNode]) -> TagNode:
        """Append every tag a source yields, in order."""
        for tag in list(iter_tags(source)):
            self._attach(tag)
        return self

    def append_html(self, html: str) -> TagNode:
        """Append a LiteralTag holding pre-formed markup."""
        self._attach(LiteralTag(html))
        return self

    def insert_first(self, child: TagNode) -> TagNode:
        self._attach(child, 0)
        return self

    def replace_children(self, *tags: TagNode) -> TagNode:
        for child in list(self._children):
            self._detach(child)
        for tag in tags:
            self._attach(tag)
        return self

    def for_child(self, tag_name: str) -> TagNode:
        """Return the first child with the given tag name.

        Raises:
            KeyNotFoundError: If no child has that tag name.
        """
        wanted = tag_name.lower()
        for child in self._children:
            if child.tag_name == wanted:
                return child
        raise KeyNotFoundError(tag_name, f"No child tag named '{tag_name}'")

    def wrap_with(self, wrapper: str | TagNode) -> TagNode:
        """Wrap this tag in another one and return the wrapper.

        With a tag name, a new wrapper is created with this tag as its only
        child, and this tag's render and authorization flags are copied onto
        it. With a TagNode, this tag becomes its first child. If this tag had
        a parent, the wrapper takes its place there.
        """
        parent = self._parent
        position = parent._index_of(self) if parent is not None else -1

        if isinstance(wrapper, str):
            wrapper = TagNode(wrapper)
            wrapper.append(self)
            wrapper.should_render(self._should_render)
            wrapper.authorized(self._is_authorized)
        else:
            wrapper.insert_first(self)

        if parent is not None and wrapper._parent is not parent:
            parent._attach(wrapper, position)
        return wrapper

    def after(self, next_tag: TagNode | None = None) -> Any:
        """Insert a sibling right after this tag, or return the current one.

        Called with a tag, the tag is inserted in the sibling chain and
        whatever followed this tag now follows it. Returns self.
        Called without arguments, returns the next sibling.
        """
        if next_tag is None:
            return self.next
        next_tag.next = self.next
        self.next = next_tag
        return self

    def modify(self, action: TagConfigurator) -> TagNode:
        action(self)
        return self

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def text(self, value: str | None = _MISSING) -> Any:
        """Get or set the inner text (plain text, escaped on render)."""
        if value is _MISSING:
            return self._inner_text
        self._inner_text = value
        return self

    def text_if_empty(self, default_text: str) -> TagNode:
        """Set the inner text only if it is empty.

        Raises:
            InvalidTagOperationError: On an input element, which has no content.
        """
        if self._tag == "input":
            raise InvalidTagOperationError(
                "You are attempting to set the inner text on an INPUT tag. "
                "If you wanted multiline text, use a textarea tag."
            )
        if not self._inner_text:
            self._inner_text = default_text
        return self

    def encoded(self, flag: bool = _MISSING) -> Any:
        """Get or set whether the inner text is HTML-escaped on render."""
        if flag is _MISSING:
            return self._encode_inner_text
        self._encode_inner_text = flag
        return self

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    @staticmethod
    def _is_class_attr(name: str) -> bool:
        return name.lower() == CSS_CLASS_ATTRIBUTE

    @staticmethod
    def _is_style_attr(name: str) -> bool:
        return name.lower() == CSS_STYLE_ATTRIBUTE

    @staticmethod
    def _is_metadata_attr(name: str) -> bool:
        return name.lower() == get_config().metadata_attribute.lower()

    def _is_reserved(self, name: str) -> bool:
        return self._is_class_attr(name) or self._is_style_attr(name) or self._is_metadata_attr(name)

    def attr(self, name: str, value: Any = _MISSING) -> Any:
        """Get or set an attribute.

        Reading returns the string form of the value, '' if absent. For the
        reserved names it returns the rendered facet value.

        Writing stores str(value), escaped on render. None removes the
        attribute; '' removes a reserved facet; 'class' adds classes.
        """
        if value is _MISSING:
            if self._is_class_attr(name):
                return self.css_class_value()
            if self._is_style_attr(name):
                return self.style_value()
            if self._is_metadata_attr(name):
                return self.metadata_json()
            found, attribute = self._html_attributes.try_get(name)
            return str(attribute) if found and attribute is not None else ""
        return self.build_attr(name, value)

    def build_attr(self, name: str, value: Any, encode: bool = True) -> TagNode:
        if value is None:
            return self.remove_attr(name)
        if isinstance(value, str) and value == "" and self._is_reserved(name):
            return self.remove_attr(name)
        if self._is_class_attr(name):
            self.add_class(str(value))
        else:
            self._html_attributes[name] = AttributeValue(str(value), encode)
        return self

    def unencoded_attr(self, name: str, value: Any) -> TagNode:
        """Set an attribute whose value is already encoded (written raw)."""
        return self.build_attr(name, value, encode=False)

    def boolean_attr(self, name: str) -> TagNode:
        """Set a valueless attribute, e.g. <input required />."""
        if self._is_class_attr(name):
            self.build_attr(name, None)
        self._html_attributes[name] = None
        return self

    def remove_attr(self, name: str) -> TagNode:
        """Remove an attribute. Reserved names clear their whole facet."""
        if self._is_class_attr(name):
            self._css_classes.clear()
        elif self._is_style_attr(name):
            self._custom_styles.clear()
        elif self._is_metadata_attr(name):
            self._metadata.clear()
        else:
            self._html_attributes.remove(name)
        return self

    def has_attr(self, name: str) -> bool:
        if self._is_class_attr(name):
            return len(self._css_classes) > 0
        if self._is_style_attr(name):
            return len(self._custom_styles) > 0
        if self._is_metadata_attr(name):
            return self._metadata.count > 0
        return self._html_attributes.has(name)

    def attributes(self) -> list[tuple[str, AttributeValue | None]]:
        """Stored (non reserved) attributes in insertion order."""
        return self._html_attributes.items()

    def id(self, value: str = _MISSING) -> Any:
        return self.attr("id", value)

    def title(self, value: str = _MISSING) -> Any:
        return self.attr("title", value)

    def name(self, value: str = _MISSING) -> Any:
        return self.attr("name", value)

    def value(self, value: str = _MISSING) -> Any:
        return self.attr("value", value)

    # -------------------------------------------------------------------------
    # CSS classes
    # -------------------------------------------------------------------------

    def add_class(self, class_name: str) -> TagNode:
        """Add one or more space separated classes, or one JSON literal.

        All tokens are validated before any is added.

        Raises:
            InvalidClassNameError: If a token is not a valid class name.
        """
        tokens = parse_class_names(class_name)
        allow_invalid = get_config().allow_invalid_css_class_names
        for token in tokens:
            if not is_valid_class_name(token, allow_invalid=allow_invalid):
                logger.debug("Rejected CSS class %r in %r", token, class_name)
                raise InvalidClassNameError(class_name, token)
        for token in tokens:
            self._css_classes[token] = None
        return self

    def add_classes(self, *class_names: str) -> TagNode:
        for class_name in class_names:
            self.add_class(class_name)
        return self

    def remove_class(self, class_name: str) -> TagNode:
        self._css_classes.pop(class_name, None)
        return self

    def has_class(self, class_name: str) -> bool:
        return class_name in self._css_classes

    @property
    def classes(self) -> list[str]:
        return list(self._css_classes)

    def css_class_value(self) -> str:
        return " ".join(self._css_classes)

    # -------------------------------------------------------------------------
    # Inline styles
    # -------------------------------------------------------------------------

    def style(self, key: str, value: str = _MISSING) -> Any:
        """Get or set an inline style property. Reading a missing key returns None."""
        if value is _MISSING:
            return self._custom_styles.get(key)
        self._custom_styles[key] = value
        return self

    def has_style(self, key: str) -> bool:
        return key in self._custom_styles

    def hide(self) -> TagNode:
        return self.style("display", "none")

    def style_value(self) -> str:
        return ";".join(f"{key}:{value}" for key, value in self._custom_styles.items())

    # -------------------------------------------------------------------------
    # data-* attributes and metadata
    # -------------------------------------------------------------------------

    def data(self, key: str, value: Any = _MISSING) -> Any:
        """Get or set an HTML5 data attribute ('data-' + key).

        Non-string values are stored as they are and serialized to JSON on
        render. Setting None removes the attribute.
        """
        data_key = DATA_PREFIX + key
        if value is _MISSING:
            found, attribute = self._html_attributes.try_get(data_key)
            return attribute.value if found and attribute is not None else None
        if value is None:
            self.remove_attr(data_key)
        else:
            self._html_attributes[data_key] = AttributeValue(value)
        return self

    def modify_data(self, key: str, action: Callable[[Any], Any]) -> TagNode:
        """Run action on the value stored in a data attribute, if any."""
        found, attribute = self._html_attributes.try_get(DATA_PREFIX + key)
        if found and attribute is not None:
            action(attribute.value)
        return self

    def metadata(self, key: str, value: Any = _MISSING) -> Any:
        """Get or set a metadata entry. Reading a missing key returns None."""
        if value is _MISSING:
            return self._metadata.get(key) if self._metadata.has(key) else None
        self._metadata[key] = value
        return self

    def modify_metadata(self, key: str, action: Callable[[Any], Any]) -> TagNode:
        """Run action on a stored metadata value, if any."""
        if self._metadata.has(key):
            action(self._metadata.get(key))
        return self

    def has_metadata(self, key: str) -> bool:
        return self._metadata.has(key)

    def metadata_json(self) -> str:
        """JSON of all metadata entries, '' when there are none."""
        if self._metadata.count == 0:
            return ""
        return to_json(self._metadata.inner)


class LiteralTag(TagNode):
    """A tag that renders only the markup passed to it, verbatim.

    The 'div' tag name is bookkeeping only and never emitted.

    Example:
        >>> str(TagNode('p').append_html('<b>bold</b>'))
        '<p><b>bold</b></p>'
    """

    kind = TagKind.LITERAL

    __slots__ = ()

    def __init__(self, html: str) -> None:
        super().__init__("div")
        self.text(html)
        self.encoded(False)
