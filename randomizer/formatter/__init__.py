"""
Formatter package - XML tokenizer and indenting writer.
"""

from .tokenizer import Tokenizer, decode_document, iter_events
from .writer import IndentingWriter, pretty_print
