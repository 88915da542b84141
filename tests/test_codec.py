from __future__ import annotations

import unittest

from textreplace.core import codec
from textreplace.core.entry import Entry


class EscapeTests(unittest.TestCase):
    def test_plain_field_is_unchanged(self) -> None:
        self.assertEqual(codec.escape("hello"), "hello")

    def test_field_with_specials_is_quoted(self) -> None:
        self.assertEqual(codec.escape("a,b"), '"a,b"')
        self.assertEqual(codec.escape('say "hi"'), '"say ""hi"""')
        self.assertEqual(codec.escape("two\nlines"), '"two\nlines"')

    def test_unescape_reverses_escape(self) -> None:
        self.assertEqual(codec.unescape('"say ""hi"""'), 'say "hi"')
        self.assertEqual(codec.unescape("plain"), "plain")

    def test_parse_line_handles_quotes(self) -> None:
        self.assertEqual(
            codec.parse_line('"a,b","x ""y""",true'),
            ["a,b", 'x "y"', "true"],
        )

    def test_quote_inside_unquoted_field_is_literal(self) -> None:
        self.assertEqual(codec.parse_line('teh,t"he,false'), ["teh", 't"he', "false"])
        self.assertEqual(codec.parse_line('a,b"",true'), ["a", 'b""', "true"])

    def test_quote_after_leading_blanks_still_opens_field(self) -> None:
        entry = codec.decode_record(' "a,b" ,x,true')

        self.assertEqual(entry.misspelling, "a,b")
        self.assertEqual(entry.correction, "x")
        self.assertTrue(entry.always_on)


class DecodeTests(unittest.TestCase):
    def test_header_is_skipped_and_flags_parsed(self) -> None:
        text = "Misspell,Correct,Always on?\nteh,the,false\n^Im,I'm,TRUE\n"

        entries = codec.decode(text)

        self.assertEqual(len(entries), 2)
        self.assertEqual(entries[0].misspelling, "teh")
        self.assertFalse(entries[0].always_on)
        self.assertTrue(entries[1].match_case)
        self.assertTrue(entries[1].always_on)

    def test_header_that_looks_like_data_is_still_skipped(self) -> None:
        entries = codec.decode("foo,bar,true\nbaz,qux,false\n")

        self.assertEqual([entry.misspelling for entry in entries], ["baz"])

    def test_bom_is_skipped_in_bytes_and_text(self) -> None:
        body = "Misspell,Correct,Always on?\nteh,the,false\n"

        from_bytes = codec.decode(b"\xef\xbb\xbf" + body.encode("utf-8"))
        from_text = codec.decode("\ufeff" + body)
        without_bom = codec.decode(body.encode("utf-8"))

        for entries in (from_bytes, from_text, without_bom):
            self.assertEqual(len(entries), 1)
            self.assertEqual(entries[0].misspelling, "teh")

    def test_malformed_lines_are_dropped_without_aborting(self) -> None:
        text = (
            "Misspell,Correct,Always on?\n"
            "only-one-field\n"
            "\n"
            ",orphan,true\n"
            "adn,and,true\n"
        )

        entries = codec.decode(text)

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].correction, "and")

    def test_counter_column_is_read(self) -> None:
        text = "Misspell,Correct,Always on?,Counter\nteh,the,false,7\nadn,and,true,abc\n"

        entries = codec.decode(text)

        self.assertEqual(entries[0].usage_counter, 7)
        self.assertEqual(entries[1].usage_counter, 0)

    def test_quoted_newline_stays_in_field(self) -> None:
        text = 'Misspell,Correct,Always on?\r\nsig,"Best,\r\nMe",false\r\nteh,the,false\r\n'

        entries = codec.decode(text)

        self.assertEqual(len(entries), 2)
        self.assertEqual(entries[0].correction, "Best,\r\nMe")
        self.assertEqual(entries[1].misspelling, "teh")

    def test_unterminated_quote_does_not_swallow_document(self) -> None:
        text = 'Misspell,Correct,Always on?\nteh,the,false\nbad,"oops,false\nadn,and,true\n'

        entries = codec.decode(text)

        self.assertIn("teh", [entry.misspelling for entry in entries])
        self.assertIn("adn", [entry.misspelling for entry in entries])

    def test_stray_quotes_do_not_merge_records(self) -> None:
        text = 'Misspell,Correct,Always on?\nteh,t"he,false\nadn,and,false\nfoo,b"ar,true\n'

        entries = codec.decode(text)

        self.assertEqual([entry.misspelling for entry in entries], ["teh", "adn", "foo"])
        self.assertEqual(entries[0].correction, 't"he')
        self.assertEqual(entries[1].correction, "and")
        self.assertEqual(entries[2].correction, 'b"ar')
        self.assertTrue(entries[2].always_on)

    def test_duplicates_are_all_kept_in_order(self) -> None:
        entries = codec.decode("h\nteh,the,false\nteh,then,false\n")

        self.assertEqual([entry.correction for entry in entries], ["the", "then"])


class EncodeTests(unittest.TestCase):
    def test_header_and_line_breaks(self) -> None:
        text = codec.encode([Entry.parse("teh", "the")])

        self.assertEqual(text, "Misspell,Correct,Always on?\nteh,the,false\n")

    def test_empty_table_still_has_header(self) -> None:
        self.assertEqual(codec.encode([]), codec.HEADER + "\n")

    def test_blank_misspellings_are_not_written(self) -> None:
        text = codec.encode([Entry(), Entry.parse("   ", "x"), Entry.parse("a", "b")])

        self.assertEqual(text.splitlines()[1:], ["a,b,false"])

    def test_counter_column(self) -> None:
        text = codec.encode([Entry.parse("a", "b", True, 4)], include_counter=True)

        self.assertEqual(text, "Misspell,Correct,Always on?,Counter\na,b,true,4\n")

    def test_encode_bytes_starts_with_bom(self) -> None:
        data = codec.encode_bytes([Entry.parse("a", "b")])

        self.assertTrue(data.startswith(b"\xef\xbb\xbf"))

    def test_round_trip_with_special_characters(self) -> None:
        entries = [
            Entry.parse("teh", "the"),
            Entry.parse("^Im", "^I'm", always_on=True),
            Entry.parse("a,b", 'he said "hi"'),
            Entry.parse("addr", "1 Main St\nSpringfield, IL"),
            Entry.parse("ünïcödé", "ÜNÏCÖDÉ", always_on=True),
        ]

        decoded = codec.decode(codec.encode_bytes(entries))

        self.assertEqual(decoded, entries)

    def test_round_trip_keeps_counters_when_enabled(self) -> None:
        entries = [Entry.parse("teh", "the", usage_counter=12)]

        decoded = codec.decode(codec.encode(entries, include_counter=True))

        self.assertEqual(decoded, entries)


if __name__ == "__main__":
    unittest.main()
