"""
Unit tests for the mention codec.

Covers encoding, the delimiter rules of both forms and the single-pass decoder.
"""

import unittest

from mentionvault.codec import decode_all, encode, has_mention_of, validate
from mentionvault.errors import InvalidCharacters
from mentionvault.models import MentionForm


class TestEncode(unittest.TestCase):
    """Test encoding participant references as markup."""

    def test_encode_wikilink(self):
        """Test the wikilink surface text."""
        self.assertEqual(encode(MentionForm.WIKILINK, "john", "John Doe"), "@[[john|John Doe]]")

    def test_encode_explicit(self):
        """Test the explicit link surface text."""
        self.assertEqual(encode(MentionForm.EXPLICIT, "jane", "Jane"), "@[Jane](mention://jane)")

    def test_encode_accepts_form_value(self):
        """Test that the plain string value of a form is accepted."""
        self.assertEqual(encode("explicit", "jane", "Jane"), "@[Jane](mention://jane)")

    def test_wikilink_rejects_pipe_and_bracket_in_id(self):
        """Test that wikilink ids may not contain | or ]."""
        for bad_id in ("a|b", "a]b"):
            with self.assertRaises(InvalidCharacters) as ctx:
                encode(MentionForm.WIKILINK, bad_id, "Name")
            self.assertEqual(ctx.exception.field, "id")
            self.assertEqual(ctx.exception.form, "wikilink")

    def test_explicit_rejects_paren_in_id(self):
        """Test that explicit ids may not contain )."""
        with self.assertRaises(InvalidCharacters):
            encode(MentionForm.EXPLICIT, "a)b", "Name")

    def test_bracket_in_name_rejected_for_both_forms(self):
        """Test that names may not contain ] in either form."""
        for form in MentionForm:
            with self.assertRaises(InvalidCharacters) as ctx:
                encode(form, "id", "Na]me")
            self.assertEqual(ctx.exception.field, "name")

    def test_empty_values_rejected(self):
        """Test that empty ids and names cannot be encoded."""
        with self.assertRaises(InvalidCharacters):
            encode(MentionForm.WIKILINK, "", "Name")
        with self.assertRaises(InvalidCharacters):
            encode(MentionForm.EXPLICIT, "id", "")

    def test_characters_only_forbidden_in_other_form_are_allowed(self):
        """Test that a pipe is fine in an explicit id and a paren in a wikilink id."""
        validate(MentionForm.EXPLICIT, "a|b", "Name")
        validate(MentionForm.WIKILINK, "a)b", "Name")

    def test_invalid_characters_is_a_value_error(self):
        """Test that callers can catch codec errors as ValueError."""
        with self.assertRaises(ValueError):
            encode(MentionForm.WIKILINK, "a|b", "Name")


class TestDecode(unittest.TestCase):
    """Test decoding mentions out of text."""

    def test_round_trip(self):
        """Test that an encoded mention decodes to the same id, name and form."""
        samples = [
            ("john", "John Doe"),
            ("jane.doe", "Jane (Doe)"),
            ("x-1", "Ünïcødé Name"),
            ("team/alpha", "Alpha | Team"),
        ]
        for participant_id, name in samples:
            for form in MentionForm:
                occurrences = list(decode_all(encode(form, participant_id, name)))
                self.assertEqual(len(occurrences), 1, (form, participant_id, name))
                self.assertEqual(occurrences[0].participant_id, participant_id)
                self.assertEqual(occurrences[0].display_name, name)
                self.assertEqual(occurrences[0].encoding, form)

    def test_text_order_across_forms(self):
        """Test that both forms are reported in the order they appear."""
        text = "x @[B](mention://b) y @[[a|A]] z @[C](mention://c)"
        occurrences = list(decode_all(text))

        self.assertEqual([o.participant_id for o in occurrences], ["b", "a", "c"])
        self.assertEqual(
            [o.encoding for o in occurrences],
            [MentionForm.EXPLICIT, MentionForm.WIKILINK, MentionForm.EXPLICIT],
        )

    def test_offsets_cover_surface_text(self):
        """Test that offsets slice out exactly the mention markup."""
        text = "Hello @[[john|John Doe]], see @[jane](mention://jane)"
        occurrences = list(decode_all(text, "doc1"))

        self.assertEqual(text[occurrences[0].start_offset:occurrences[0].end_offset], "@[[john|John Doe]]")
        self.assertEqual(text[occurrences[1].start_offset:occurrences[1].end_offset], "@[jane](mention://jane)")
        self.assertTrue(all(o.document_id == "doc1" for o in occurrences))

    def test_fields_stop_at_first_delimiter(self):
        """Test that one mention's closing delimiter is not swallowed by the next."""
        text = "@[[a|A]] and @[[b|B]] and @[C](mention://c) (see)"
        occurrences = list(decode_all(text))

        self.assertEqual([(o.participant_id, o.display_name) for o in occurrences],
                         [("a", "A"), ("b", "B"), ("c", "C")])

    def test_malformed_markup_is_ignored(self):
        """Test that incomplete markup yields no occurrences."""
        for text in ("@[[a|A] text", "@[[a]]", "@[A](mention://)", "@[](mention://a)", "@[[|A]]", "plain @ [x]"):
            self.assertEqual(list(decode_all(text)), [], text)

    def test_stray_prefix_before_mention(self):
        """Test that a stray '@[' does not hide a following wikilink."""
        occurrences = list(decode_all("@[x @[[a|A]]"))

        self.assertEqual(len(occurrences), 1)
        self.assertEqual(occurrences[0].participant_id, "a")
        self.assertEqual(occurrences[0].start_offset, 4)

    def test_earliest_start_wins(self):
        """Test that an earlier-starting candidate consumes a later one."""
        occurrences = list(decode_all("@[Note @[Jane](mention://jane)"))

        self.assertEqual(len(occurrences), 1)
        self.assertEqual(occurrences[0].start_offset, 0)
        self.assertEqual(occurrences[0].display_name, "Note @[Jane")

    def test_sequence_is_restartable(self):
        """Test that the decoded sequence can be iterated more than once."""
        decoded = decode_all("@[[a|A]] @[B](mention://b)")

        self.assertEqual(list(decoded), list(decoded))
        self.assertEqual(len(decoded), 2)

    def test_empty_text(self):
        """Test decoding text with no mentions."""
        self.assertEqual(list(decode_all("")), [])
        self.assertEqual(len(decode_all("no mentions here")), 0)


class TestHasMentionOf(unittest.TestCase):
    """Test the case-insensitive containment check."""

    def test_case_insensitive_match(self):
        """Test that ids match regardless of case, in both forms."""
        self.assertTrue(has_mention_of("@[[John|J]]", ["john"]))
        self.assertTrue(has_mention_of("@[J](mention://JOHN)", ["John"]))

    def test_whole_id_only(self):
        """Test that a prefix of an id does not count."""
        self.assertFalse(has_mention_of("@[[johnny|J]]", ["john"]))
        self.assertFalse(has_mention_of("@[[john|J]]", ["johnny"]))

    def test_no_ids(self):
        """Test that an empty id set never matches."""
        self.assertFalse(has_mention_of("@[[john|J]]", []))


if __name__ == "__main__":
    unittest.main()
