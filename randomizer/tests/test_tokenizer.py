#!/usr/bin/env python3
"""
Tests for the streaming XML tokenizer.
Covers every event kind, laziness, and well-formedness errors with offsets.
"""

import os
import sys
import unittest

# Ensure project root is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from randomizer.formatter.tokenizer import Tokenizer, decode_document, iter_events
from randomizer.models import (
    CData, Comment, Declaration, DocType, EmptyTag, EndOfDocument, EndTag,
    ParseError, ProcessingInstruction, StartTag, Text,
)


class BaseTokenizerTest(unittest.TestCase):
    """Base class providing helper methods for tokenizer tests."""

    def _events(self, xml):
        return list(Tokenizer(xml))

    def _assert_error(self, xml, offset, fragment=""):
        with self.assertRaises(ParseError) as ctx:
            self._events(xml)
        err = ctx.exception
        self.assertEqual(err.offset, offset, f"Wrong offset for {xml!r}: {err}")
        if fragment:
            self.assertIn(fragment, err.message)
        return err


class TestEvents(BaseTokenizerTest):
    """Test that each construct becomes the right event."""

    def test_start_text_end(self):
        self.assertEqual(self._events('<a x="1" y=\'2\'>hi</a>'), [
            StartTag("a", (("x", "1"), ("y", "2"))),
            Text("hi"),
            EndTag("a"),
            EndOfDocument(),
        ])

    def test_empty_tag(self):
        self.assertEqual(self._events("<a><b/><c k='v' /></a>"), [
            StartTag("a"),
            EmptyTag("b"),
            EmptyTag("c", (("k", "v"),)),
            EndTag("a"),
            EndOfDocument(),
        ])

    def test_prolog_and_special_sections(self):
        xml = ('<?xml version="1.0"?><!DOCTYPE r SYSTEM "r.dtd"><?pi data?>'
               '<r><!-- c --><![CDATA[<x>]]></r>')
        self.assertEqual(self._events(xml), [
            Declaration('version="1.0"'),
            DocType('r SYSTEM "r.dtd"'),
            ProcessingInstruction("pi", "data"),
            StartTag("r"),
            Comment(" c "),
            CData("<x>"),
            EndTag("r"),
            EndOfDocument(),
        ])

    def test_doctype_internal_subset(self):
        xml = '<!DOCTYPE r [<!ELEMENT r (#PCDATA)> <!ENTITY e "x>y">]><r/>'
        events = self._events(xml)
        self.assertEqual(events[0], DocType('r [<!ELEMENT r (#PCDATA)> <!ENTITY e "x>y">]'))
        self.assertEqual(events[1], EmptyTag("r"))

    def test_doctype_quotes_in_subset_comment_and_pi(self):
        for subset in ("<!-- it's -->", "<?pi don't?>", '<!-- "a ] > -->'):
            events = self._events(f"<!DOCTYPE r [{subset}]><r/>")
            self.assertEqual(events[0], DocType(f"r [{subset}]"), subset)
            self.assertEqual(events[1], EmptyTag("r"), subset)

    def test_doctype_unterminated_subset_comment(self):
        self._assert_error("<!DOCTYPE r [<!-- open ]><r/>", 0, "Unterminated DOCTYPE")

    def test_decode_document(self):
        self.assertEqual(decode_document("<a>é</a>".encode("utf-8")), "<a>é</a>")
        with self.assertRaises(ParseError) as ctx:
            decode_document(b"<a>\n<b>\xff</b></a>")
        self.assertEqual(ctx.exception.offset, 7)
        self.assertEqual(ctx.exception.location, "Line 2, Col 3")

    def test_attribute_order_preserved(self):
        events = self._events('<a z="1" a="2" m="3"/>')
        self.assertEqual([name for name, _ in events[0].attributes], ["z", "a", "m"])

    def test_whitespace_text_is_reported(self):
        events = self._events("<a> <b/> </a>")
        self.assertEqual(events[1], Text(" "))
        self.assertTrue(events[1].is_whitespace)

    def test_references_kept_raw(self):
        events = self._events("<a t='&lt;'>&lt;&amp;&#60;&#x3C;</a>")
        self.assertEqual(events[0].attributes, (("t", "&lt;"),))
        self.assertEqual(events[1], Text("&lt;&amp;&#60;&#x3C;"))

    def test_end_tag_with_whitespace(self):
        self.assertEqual(self._events("<a></a  >")[1], EndTag("a"))

    def test_positions(self):
        events = self._events("<a><b/></a>")
        self.assertEqual([e.position for e in events], [0, 3, 7, 11])

    def test_bytes_input(self):
        self.assertEqual(self._events("<a>é</a>".encode("utf-8"))[1], Text("é"))

    def test_byte_order_mark_skipped(self):
        events = self._events("\ufeff<?xml version='1.0'?><a/>")
        self.assertEqual(events[0], Declaration("version='1.0'"))
        self.assertEqual(events[1], EmptyTag("a"))

    def test_empty_document(self):
        self.assertEqual(self._events(""), [EndOfDocument()])

    def test_non_ascii_names(self):
        self.assertEqual(self._events("<données/>")[0], EmptyTag("données"))


class TestLaziness(BaseTokenizerTest):
    """Events are produced on demand, in a single pass."""

    def test_events_before_error_are_delivered(self):
        it = iter_events("<a></b>")
        self.assertEqual(next(it), StartTag("a"))
        with self.assertRaises(ParseError):
            next(it)

    def test_not_restartable(self):
        tokenizer = Tokenizer("<a/>")
        list(tokenizer)
        with self.assertRaises(RuntimeError):
            list(tokenizer)

    def test_depth_tracks_open_elements(self):
        tokenizer = Tokenizer("<a><b>")
        it = iter(tokenizer)
        next(it)
        next(it)
        self.assertEqual(tokenizer.depth, 2)


class TestErrors(BaseTokenizerTest):
    """Malformed input raises ParseError at the offending offset."""

    def test_unterminated_tag(self):
        self._assert_error("<a><b</a>", 3, "Unterminated tag <b>")

    def test_unterminated_tag_at_eof(self):
        self._assert_error('<a><b c="1"', 3, "Unterminated tag")

    def test_unclosed_element(self):
        self._assert_error("<a><b>", 6, "Unclosed tag <b>")

    def test_mismatched_end_tag(self):
        self._assert_error("<a><b></a>", 6, "Mismatched end tag")

    def test_unexpected_end_tag(self):
        self._assert_error("</a>", 0, "Unexpected end tag")

    def test_duplicate_attribute(self):
        self._assert_error('<a x="1" x="2"/>', 9, "Duplicate attribute 'x'")

    def test_unquoted_attribute(self):
        self._assert_error("<a x=1/>", 3, "Malformed attribute")

    def test_missing_space_between_attributes(self):
        self._assert_error('<a x="1"y="2"/>', 8, "Malformed tag")

    def test_lt_in_attribute_value(self):
        self._assert_error('<a x="<"/>', 6, "'<' is not allowed")

    def test_bad_reference(self):
        self._assert_error("<a>&bogus</a>", 3, "reference")

    def test_unterminated_comment(self):
        self._assert_error("<a><!-- x</a>", 3, "Unterminated comment")

    def test_double_hyphen_in_comment(self):
        self._assert_error("<a><!-- a -- b --></a>", 3, "'--'")

    def test_unterminated_cdata(self):
        self._assert_error("<a><![CDATA[x</a>", 3, "Unterminated CDATA")

    def test_cdata_outside_root(self):
        self._assert_error("<![CDATA[x]]><a/>", 0, "CDATA")

    def test_second_root_element(self):
        self._assert_error("<a/><b/>", 4, "after the root element")

    def test_text_before_root(self):
        self._assert_error("text<a/>", 0, "Text outside the root element")

    def test_text_after_root(self):
        self._assert_error("<a/>  x", 6, "Text outside the root element")

    def test_late_xml_declaration(self):
        self._assert_error('<a/><?xml version="1.0"?>', 4, "XML declaration")

    def test_cdata_end_in_text(self):
        self._assert_error("<a>]]></a>", 3, "']]>'")

    def test_unterminated_processing_instruction(self):
        self._assert_error("<?pi", 0, "Unterminated processing instruction")

    def test_unrecognized_declaration(self):
        self._assert_error("<a><!FOO></a>", 3, "Unrecognized markup")

    def test_malformed_tag_name(self):
        self._assert_error("<a>< b/></a>", 3, "Malformed tag name")

    def test_doctype_after_root(self):
        self._assert_error("<a/><!DOCTYPE a>", 4, "DOCTYPE")

    def test_offset_counts_utf8_bytes(self):
        err = self._assert_error("<a>é</b>", 5, "Mismatched")
        self.assertEqual(err.position, 4)
        self.assertEqual((err.line, err.col), (1, 4))

    def test_invalid_utf8(self):
        err = self._assert_error(b"<a>\xff</a>", 3, "UTF-8")
        self.assertEqual(err.position, 3)

    def test_line_and_column(self):
        err = self._assert_error("<a>\n  <b>\n</a>", 10, "expected </b>")
        self.assertEqual((err.line, err.col), (3, 0))
        self.assertEqual(err.location, "Line 3, Col 0")

    def test_error_string_mentions_offset(self):
        with self.assertRaises(ParseError) as ctx:
            self._events("<a><b></a>")
        self.assertTrue(str(ctx.exception).startswith("Error at position 6:"))


if __name__ == "__main__":
    unittest.main(verbosity=2)
