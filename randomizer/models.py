#!/usr/bin/env python3
"""
Data models for the XML formatter.
Defines the lexical events produced by the tokenizer and the parse error.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

Attributes = Tuple[Tuple[str, str], ...]

# Only these count as whitespace in XML; other Unicode spaces are text.
XML_WHITESPACE = " \t\r\n"


class ParseError(ValueError):
    """
    Raised when the input is not well-formed XML.

    Attributes:
        offset: UTF-8 byte offset of the malformed construct
        message: Human-readable description
        position: Character index into the decoded text
        line: 1-based line number
        col: Column number (0-based)
    """

    def __init__(self, offset: int, message: str, position: Optional[int] = None,
                 line: Optional[int] = None, col: Optional[int] = None):
        super().__init__(f"Error at position {offset}: {message}")
        self.offset = offset
        self.message = message
        self.position = offset if position is None else position
        self.line = line
        self.col = col

    @property
    def location(self) -> str:
        """Human-readable location string."""
        if self.line is not None and self.col is not None:
            return f"Line {self.line}, Col {self.col}"
        return f"Byte {self.offset}"


def _render_attributes(attributes: Attributes) -> str:
    parts = []
    for name, value in attributes:
        if '"' not in value:
            parts.append(f' {name}="{value}"')
        elif "'" not in value:
            parts.append(f" {name}='{value}'")
        else:
            # only reachable for hand-built events; parsed values hold one quote kind
            quoted = value.replace('"', "&quot;")
            parts.append(f' {name}="{quoted}"')
    return "".join(parts)


@dataclass(frozen=True)
class StartTag:
    name: str
    attributes: Attributes = ()
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        return f"<{self.name}{_render_attributes(self.attributes)}>"


@dataclass(frozen=True)
class EndTag:
    name: str
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        return f"</{self.name}>"


@dataclass(frozen=True)
class EmptyTag:
    name: str
    attributes: Attributes = ()
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        return f"<{self.name}{_render_attributes(self.attributes)}/>"


@dataclass(frozen=True)
class Text:
    """A run of character data, kept exactly as written (references unexpanded)."""
    content: str
    position: int = field(default=0, compare=False)

    @property
    def is_whitespace(self) -> bool:
        return not self.content.strip(XML_WHITESPACE)

    @property
    def markup(self) -> str:
        return self.content


@dataclass(frozen=True)
class Comment:
    content: str
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        return f"<!--{self.content}-->"


@dataclass(frozen=True)
class CData:
    content: str
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        return f"<![CDATA[{self.content}]]>"


@dataclass(frozen=True)
class ProcessingInstruction:
    target: str
    content: str = ""
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        if self.content:
            return f"<?{self.target} {self.content}?>"
        return f"<?{self.target}?>"


@dataclass(frozen=True)
class Declaration:
    """The <?xml ...?> declaration; content is everything after 'xml'."""
    content: str = ""
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        if self.content:
            return f"<?xml {self.content}?>"
        return "<?xml?>"


@dataclass(frozen=True)
class DocType:
    """A <!DOCTYPE ...> declaration, passed through unresolved."""
    content: str
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        return f"<!DOCTYPE {self.content}>"


@dataclass(frozen=True)
class EndOfDocument:
    position: int = field(default=0, compare=False)

    @property
    def markup(self) -> str:
        return ""


Event = Union[
    StartTag, EndTag, EmptyTag, Text, Comment, CData,
    ProcessingInstruction, Declaration, DocType, EndOfDocument,
]
