#!/usr/bin/env python3
"""
Streaming XML tokenizer.
Turns an in-memory XML document into a lazy sequence of lexical events,
checking well-formedness as it goes. No parse tree is built: the only
state carried between events is the stack of open element names.

Text, attribute values, comments and CDATA are reported exactly as
written, so re-serializing the events never changes escaping.
"""

import re
import logging
from typing import Iterator, List, Optional, Set, Tuple, Union

from ..models import (
    CData, Comment, Declaration, DocType, EmptyTag, EndOfDocument, EndTag,
    Event, ParseError, ProcessingInstruction, StartTag, Text, XML_WHITESPACE,
)

logger = logging.getLogger(__name__)

_NAME_START_CHARS = (
    "A-Za-z_:"
    "\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    "\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF"
    "\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
_NAME_CHARS = _NAME_START_CHARS + r"\-.0-9" + "\u00B7\u0300-\u036F\u203F-\u2040"
_NAME = "[" + _NAME_START_CHARS + "][" + _NAME_CHARS + "]*"

NAME_RE = re.compile(_NAME)
ATTRIBUTE_RE = re.compile("(" + _NAME + r""")[ \t\r\n]*=[ \t\r\n]*(?:"([^"]*)"|'([^']*)')""")
REFERENCE_RE = re.compile("&(?:" + _NAME + r"|#[0-9]+|#x[0-9a-fA-F]+);")
WHITESPACE_RE = re.compile(r"[ \t\r\n]*")


def decode_document(data: bytes) -> str:
    """
    Decode raw document bytes as UTF-8.

    Raises:
        ParseError: At the first invalid byte sequence
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        prefix = data[:e.start].decode("utf-8")
        line = prefix.count("\n") + 1
        col = len(prefix) - (prefix.rfind("\n") + 1)
        raise ParseError(e.start, f"Invalid UTF-8 byte sequence ({e.reason})",
                         position=len(prefix), line=line, col=col) from e


class Tokenizer:
    """
    Single forward pass over an XML document.

    Iterating yields events in document order and ends with EndOfDocument.
    The first malformed construct raises ParseError carrying its UTF-8
    byte offset; nothing after it is produced.
    """

    def __init__(self, xml: Union[str, bytes]):
        if isinstance(xml, (bytes, bytearray)):
            self._raw: Optional[bytes] = bytes(xml)
            self.text = ""
        else:
            self._raw = None
            self.text = xml
        self.pos = 0
        self._start = 0
        self._stack: List[str] = []
        self._root_seen = False
        self._doctype_seen = False
        self._started = False

    def __iter__(self) -> Iterator[Event]:
        return self.events()

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._stack)

    # ─── Errors ────────────────────────────────────────────

    def _error(self, pos: int, message: str) -> ParseError:
        text = self.text
        offset = len(text[:pos].encode("utf-8", "surrogatepass"))
        line = text.count("\n", 0, pos) + 1
        col = pos - (text.rfind("\n", 0, pos) + 1)
        logger.debug("Parse error at byte %d (line %d, col %d): %s", offset, line, col, message)
        return ParseError(offset, message, position=pos, line=line, col=col)

    def _decode(self) -> str:
        if self._raw is None:
            return self.text
        return decode_document(self._raw)

    # ─── Main loop ─────────────────────────────────────────

    def events(self) -> Iterator[Event]:
        if self._started:
            raise RuntimeError("Tokenizer has already been consumed")
        self._started = True

        self.text = text = self._decode()
        if text.startswith("\ufeff"):
            self.pos = self._start = 1
        length = len(text)

        while self.pos < length:
            if text[self.pos] == "<":
                yield self._read_markup()
            else:
                yield self._read_text()

        if self._stack:
            raise self._error(length, f"Unclosed tag <{self._stack[-1]}> at end of document")
        yield EndOfDocument(position=length)

    def _skip_whitespace(self, i: int) -> int:
        return WHITESPACE_RE.match(self.text, i).end()

    def _check_references(self, start: int, end: int):
        text = self.text
        amp = text.find("&", start, end)
        while amp != -1:
            if not REFERENCE_RE.match(text, amp, end):
                raise self._error(amp, "Malformed entity or character reference")
            amp = text.find("&", amp + 1, end)

    # ─── Character data ────────────────────────────────────

    def _read_text(self) -> Text:
        text = self.text
        start = self.pos
        end = text.find("<", start)
        if end == -1:
            end = len(text)
        content = text[start:end]
        self.pos = end

        if not self._stack:
            stripped = content.lstrip(XML_WHITESPACE)
            if stripped:
                raise self._error(end - len(stripped), "Text outside the root element")
        else:
            self._check_references(start, end)
            bad = content.find("]]>")
            if bad != -1:
                raise self._error(start + bad, "']]>' is not allowed in text")
        return Text(content, position=start)

    # ─── Markup ────────────────────────────────────────────

    def _read_markup(self) -> Event:
        text = self.text
        start = self.pos
        if text.startswith("<!--", start):
            return self._read_comment(start)
        if text.startswith("<![CDATA[", start):
            return self._read_cdata(start)
        if text.startswith("<!DOCTYPE", start):
            return self._read_doctype(start)
        if text.startswith("<!", start):
            raise self._error(start, "Unrecognized markup declaration")
        if text.startswith("<?", start):
            return self._read_processing_instruction(start)
        if text.startswith("</", start):
            return self._read_end_tag(start)
        return self._read_start_tag(start)

    def _read_comment(self, start: int) -> Comment:
        end = self.text.find("-->", start + 4)
        if end == -1:
            raise self._error(start, "Unterminated comment")
        content = self.text[start + 4:end]
        if "--" in content or content.endswith("-"):
            raise self._error(start, "'--' is not allowed inside a comment")
        self.pos = end + 3
        return Comment(content, position=start)

    def _read_cdata(self, start: int) -> CData:
        if not self._stack:
            raise self._error(start, "CDATA section outside the root element")
        end = self.text.find("]]>", start + 9)
        if end == -1:
            raise self._error(start, "Unterminated CDATA section")
        self.pos = end + 3
        return CData(self.text[start + 9:end], position=start)

    def _find_declaration_end(self, i: int) -> int:
        """Index of the '>' closing a DOCTYPE, skipping quotes and the internal subset."""
        text = self.text
        quote = None
        brackets = 0
        j = i
        while j < len(text):
            ch = text[j]
            if quote:
                if ch == quote:
                    quote = None
            elif brackets > 0 and text.startswith(("<!--", "<?"), j):
                # quotes inside comments and PIs of the subset are plain text
                opener, closer = ("<!--", "-->") if text.startswith("<!--", j) else ("<?", "?>")
                end = text.find(closer, j + len(opener))
                if end == -1:
                    return -1
                j = end + len(closer)
                continue
            elif ch in "\"'":
                quote = ch
            elif ch == "[":
                brackets += 1
            elif ch == "]":
                brackets -= 1
            elif ch == ">" and brackets <= 0:
                return j
            j += 1
        return -1

    def _read_doctype(self, start: int) -> DocType:
        if self._root_seen:
            raise self._error(start, "DOCTYPE declaration must precede the root element")
        if self._doctype_seen:
            raise self._error(start, "Duplicate DOCTYPE declaration")
        i = start + len("<!DOCTYPE")
        if i < len(self.text) and self.text[i] not in XML_WHITESPACE:
            raise self._error(start, "Malformed DOCTYPE declaration")
        end = self._find_declaration_end(i)
        if end == -1:
            raise self._error(start, "Unterminated DOCTYPE declaration")
        content = self.text[i:end].strip(XML_WHITESPACE)
        if not content:
            raise self._error(start, "Malformed DOCTYPE declaration")
        self._doctype_seen = True
        self.pos = end + 1
        return DocType(content, position=start)

    def _read_processing_instruction(self, start: int) -> Event:
        end = self.text.find("?>", start + 2)
        if end == -1:
            raise self._error(start, "Unterminated processing instruction")
        body = self.text[start + 2:end]
        m = NAME_RE.match(body)
        if not m:
            raise self._error(start, "Processing instruction is missing its target")
        target = m.group(0)
        rest = body[m.end():]
        if rest and rest[0] not in XML_WHITESPACE:
            raise self._error(start, f"Malformed processing instruction <?{target}")
        content = rest.strip(XML_WHITESPACE)
        self.pos = end + 2

        if target == "xml":
            if start != self._start:
                raise self._error(start, "XML declaration is only allowed at the start of the document")
            return Declaration(content, position=start)
        if target.lower() == "xml":
            raise self._error(start, f"Reserved processing instruction target '{target}'")
        return ProcessingInstruction(target, content, position=start)

    def _read_end_tag(self, start: int) -> EndTag:
        text = self.text
        m = NAME_RE.match(text, start + 2)
        if not m:
            if start + 2 >= len(text):
                raise self._error(start, "Unterminated end tag")
            raise self._error(start, "Malformed end tag")
        name = m.group(0)
        i = self._skip_whitespace(m.end())
        if i >= len(text):
            raise self._error(start, f"Unterminated end tag </{name}>")
        if text[i] != ">":
            raise self._error(start, f"Malformed end tag </{name}>")
        if not self._stack:
            raise self._error(start, f"Unexpected end tag </{name}>: no element is open")
        if self._stack[-1] != name:
            raise self._error(
                start, f"Mismatched end tag: expected </{self._stack[-1]}>, found </{name}>")
        self._stack.pop()
        self.pos = i + 1
        return EndTag(name, position=start)

    def _read_attribute(self, start: int, j: int, tag: str, seen: Set[str]) -> Tuple[str, str, int]:
        """Parse one attribute at j. Returns (name, raw_value, end_index)."""
        text = self.text
        am = ATTRIBUTE_RE.match(text, j)
        if am is None:
            if text.find(">", j) == -1:
                raise self._error(start, f"Unterminated tag <{tag}>")
            raise self._error(j, f"Malformed attribute in <{tag}>")

        name = am.group(1)
        if name in seen:
            raise self._error(j, f"Duplicate attribute '{name}' in <{tag}>")
        group = 2 if am.group(2) is not None else 3
        value = am.group(group)
        value_start = am.start(group)
        lt = value.find("<")
        if lt != -1:
            raise self._error(value_start + lt, f"'<' is not allowed in attribute '{name}'")
        self._check_references(value_start, value_start + len(value))
        return name, value, am.end()

    def _read_start_tag(self, start: int) -> Event:
        text = self.text
        length = len(text)
        m = NAME_RE.match(text, start + 1)
        if not m:
            if start + 1 >= length:
                raise self._error(start, "Unterminated tag")
            raise self._error(start, "Malformed tag name")
        name = m.group(0)
        if not self._stack and self._root_seen:
            raise self._error(start, f"Unexpected element <{name}> after the root element")

        attributes: List[Tuple[str, str]] = []
        seen: Set[str] = set()
        i = m.end()
        while True:
            j = self._skip_whitespace(i)
            if j >= length or text[j] == "<":
                raise self._error(start, f"Unterminated tag <{name}>")
            if text[j] == ">":
                empty = False
                end = j + 1
                break
            if text.startswith("/>", j):
                empty = True
                end = j + 2
                break
            if j == i:
                raise self._error(j, f"Malformed tag <{name}>")
            attr_name, value, i = self._read_attribute(start, j, name, seen)
            seen.add(attr_name)
            attributes.append((attr_name, value))

        self.pos = end
        self._root_seen = True
        if empty:
            return EmptyTag(name, tuple(attributes), position=start)
        self._stack.append(name)
        return StartTag(name, tuple(attributes), position=start)


def iter_events(xml: Union[str, bytes]) -> Iterator[Event]:
    """Lazily tokenize an XML document into events."""
    return iter(Tokenizer(xml))
