"""Markup event source for the extractor.

The extractor never builds a tree. lxml's HTML parser is driven in
push mode with a parser target, so every element open, element close
and text chunk reaches the handler once, in document order, with
character entities already decoded.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from lxml import etree


class DocumentHandler(Protocol):
    """Receiver of markup events."""

    def start(self, tag: str, attrib: Mapping[str, str]) -> None: ...

    def end(self, tag: str) -> None: ...

    def data(self, text: str) -> None: ...


class _ParserTarget:
    """Adapts lxml's parser-target callbacks to a DocumentHandler."""

    def __init__(self, handler: DocumentHandler) -> None:
        self._handler = handler

    def start(self, tag: str, attrib: Mapping[str, str]) -> None:
        self._handler.start(tag, attrib)

    def end(self, tag: str) -> None:
        self._handler.end(tag)

    def data(self, data: str) -> None:
        self._handler.data(data)

    def close(self) -> None:
        return None


def feed_document(page: str, handler: DocumentHandler) -> None:
    """Stream the events of an HTML document to a handler.

    Exceptions raised by the handler stop the parse and propagate to the
    caller. An empty page produces no events.
    """
    if not page.strip():
        return
    parser = etree.HTMLParser(
        target=_ParserTarget(handler),
        remove_comments=True,
        remove_pis=True,
    )
    parser.feed(page)
    parser.close()
