# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""TagSource protocol and TagList.

A TagSource is anything that can yield the tags it represents, to be
spliced as children of another tag. A single TagNode yields itself; a
TagList yields its members in order. Every call to all_tags() returns a
fresh iterator, so a source can be consumed more than once.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from genro_toolbox import safe_is_instance

if TYPE_CHECKING:
    from .config import TagsConfig
    from .tag_node import TagNode


@runtime_checkable
class TagSource(Protocol):
    """Anything that can yield an ordered sequence of tags."""

    def all_tags(self) -> Iterator[TagNode]: ...


def iter_tags(source: TagSource | Iterable[TagNode]) -> Iterator[TagNode]:
    """Return an iterator over the tags a source represents.

    Args:
        source: A TagNode, any TagSource, or a plain iterable of TagNodes.

    Raises:
        TypeError: If source is none of the above.
    """
    if safe_is_instance(source, "genro_tags.tag_node.TagNode"):
        return iter((source,))
    if isinstance(source, TagSource):
        return source.all_tags()
    if isinstance(source, Iterable) and not isinstance(source, (str, bytes)):
        return iter(source)
    raise TypeError(f"Cannot read tags from {type(source).__name__}")


class TagList:
    """Ordered list of tags usable as a TagSource.

    The string form is the concatenated markup of the members.

    Example:
        >>> items = TagList([TagNode('li').text('a'), TagNode('li').text('b')])
        >>> str(items)
        '<li>a</li><li>b</li>'
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[TagNode] = ()) -> None:
        self._tags: list[TagNode] = list(tags)

    def __repr__(self) -> str:
        return f"TagList({self._tags!r})"

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[TagNode]:
        return iter(self._tags)

    def __getitem__(self, index: int) -> TagNode:
        return self._tags[index]

    def all_tags(self) -> Iterator[TagNode]:
        return iter(self._tags)

    def append(self, tag: TagNode) -> TagList:
        self._tags.append(tag)
        return self

    def to_string(self, pretty: bool = False, config: TagsConfig | None = None) -> str:
        from .renderer import render_all

        return render_all(self, pretty=pretty, config=config)

    def __str__(self) -> str:
        return self.to_string()

    def __html__(self) -> str:
        return self.to_string()


def to_tag_list(tags: Iterable[TagNode]) -> TagList:
    """Build a TagList from any iterable of tags."""
    return TagList(tags)
