#!/usr/bin/env python3
"""
Indenting XML writer.
Re-emits tokenizer events with one structural item per line, indented
by nesting depth. Formatting whitespace from the source is dropped and
re-derived; text that carries content is written verbatim.

Known oddity kept on purpose: text is glued to whatever precedes it and
a closing tag right after text stays on the same line, so
``<tag2><!--Comment-->Text</tag2>`` formats as::

    <tag2>
      <!--Comment-->Text</tag2>
"""

import logging
from typing import Iterable, List, Union

from ..config import DEFAULT_INDENT, DEFAULT_NEWLINE
from ..models import EndOfDocument, EndTag, Event, StartTag, Text, XML_WHITESPACE
from .tokenizer import Tokenizer

logger = logging.getLogger(__name__)


class IndentingWriter:
    """
    Accumulates formatted output for a stream of events.

    Attributes:
        indent: Whitespace written once per nesting level
        newline: Line separator placed before each structural item
        depth: Current nesting depth
    """

    def __init__(self, indent: str = DEFAULT_INDENT, newline: str = DEFAULT_NEWLINE):
        self.indent = indent
        self.newline = newline
        self.depth = 0
        self._parts: List[str] = []
        self._inline = False
        self._finished = False

    def _line_break(self):
        if not self._parts:
            return
        if self._inline:
            # trailing whitespace of inline text is replaced by the break
            self._parts[-1] = self._parts[-1].rstrip(XML_WHITESPACE)
        self._parts.append(self.newline + self.indent * self.depth)

    def write_event(self, event: Event):
        if self._finished:
            return

        if isinstance(event, Text):
            if event.is_whitespace:
                return
            self._parts.append(event.content)
            self._inline = True
            return

        if isinstance(event, EndOfDocument):
            self._finished = True
            return

        if isinstance(event, EndTag):
            self.depth -= 1
            if not self._inline:
                self._line_break()
            self._parts.append(event.markup)
            self._inline = False
            return

        self._line_break()
        self._parts.append(event.markup)
        if isinstance(event, StartTag):
            self.depth += 1
        self._inline = False

    def write_events(self, events: Iterable[Event]) -> "IndentingWriter":
        for event in events:
            self.write_event(event)
        return self

    def getvalue(self) -> str:
        return "".join(self._parts)


def pretty_print(xml: Union[str, bytes], indent: str = DEFAULT_INDENT,
                 newline: str = DEFAULT_NEWLINE) -> str:
    """
    Reformat an XML document with consistent indentation.

    Args:
        xml: Complete XML document (str, or UTF-8 bytes)
        indent: Indentation unit per nesting level
        newline: Line separator

    Returns:
        The formatted document

    Raises:
        ParseError: If the input is not well-formed. No partial output
            is ever returned.
    """
    writer = IndentingWriter(indent, newline)
    writer.write_events(Tokenizer(xml))
    result = writer.getvalue()
    logger.debug("Formatted %d characters into %d", len(xml), len(result))
    return result
