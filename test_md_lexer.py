# test_md_lexer.py
#
# Run:
#   python -m unittest -v

import unittest

from config_loader import DialectConfig
from md_lexer import (
    BLANK,
    HEADING,
    HR,
    ORDERED_ITEM,
    TEXT,
    UNORDERED_ITEM,
    ClassifiedLine,
    classify_line,
    classify_lines,
    split_lines,
)


class TestClassifyLine(unittest.TestCase):
    # ---------- horizontal rule ----------
    def test_three_hyphens_is_rule(self):
        self.assertEqual(classify_line("---").kind, HR)

    def test_rule_with_surrounding_whitespace_is_text(self):
        self.assertEqual(classify_line(" ---").kind, TEXT)
        self.assertEqual(classify_line("--- ").kind, TEXT)

    def test_four_hyphens_is_text(self):
        self.assertEqual(classify_line("----").kind, TEXT)

    # ---------- headings ----------
    def test_heading_levels(self):
        for marker, level in (("#", 1), ("##", 2), ("###", 3)):
            line = classify_line(f"{marker} Title")
            self.assertEqual(line.kind, HEADING)
            self.assertEqual(line.level, level)
            self.assertEqual(line.text, "Title")

    def test_heading_trailing_whitespace_trimmed(self):
        self.assertEqual(classify_line("## Title  ").text, "Title")

    def test_heading_accepts_tab_after_marker(self):
        self.assertEqual(classify_line("#\tTitle").kind, HEADING)

    def test_four_or_more_hashes_is_literal_text(self):
        line = classify_line("#### Deep")
        self.assertEqual(line.kind, TEXT)
        self.assertEqual(line.text, "#### Deep")
        self.assertEqual(classify_line("##### Title").text, "##### Title")

    def test_hash_without_space_is_text(self):
        self.assertEqual(classify_line("#hashtag").kind, TEXT)

    def test_marker_without_text_is_text(self):
        self.assertEqual(classify_line("# ").kind, TEXT)

    def test_lower_max_heading_level(self):
        cfg = DialectConfig(max_heading_level=2)
        self.assertEqual(classify_line("## ok", cfg).kind, HEADING)
        self.assertEqual(classify_line("### no", cfg).kind, TEXT)

    # ---------- lists ----------
    def test_unordered_item(self):
        line = classify_line("- item one")
        self.assertEqual(line.kind, UNORDERED_ITEM)
        self.assertEqual(line.text, "item one")

    def test_unordered_item_needs_space(self):
        self.assertEqual(classify_line("-item").kind, TEXT)

    def test_unordered_item_may_be_empty(self):
        line = classify_line("- ")
        self.assertEqual(line.kind, UNORDERED_ITEM)
        self.assertEqual(line.text, "")

    def test_ordered_item(self):
        line = classify_line("12. twelve")
        self.assertEqual(line.kind, ORDERED_ITEM)
        self.assertEqual(line.text, "twelve")

    def test_ordered_item_needs_dot_and_space(self):
        self.assertEqual(classify_line("1.one").kind, TEXT)
        self.assertEqual(classify_line("1) one").kind, TEXT)

    def test_rule_wins_over_list(self):
        self.assertEqual(classify_line("---").kind, HR)

    def test_heading_wins_over_everything_after_it(self):
        self.assertEqual(classify_line("# - 1. x").kind, HEADING)

    # ---------- blank / text ----------
    def test_blank_lines(self):
        self.assertEqual(classify_line("").kind, BLANK)
        self.assertEqual(classify_line("   \t").kind, BLANK)

    def test_text_kept_verbatim(self):
        line = classify_line("  indented <b>html</b>  ")
        self.assertEqual(line.kind, TEXT)
        self.assertEqual(line.text, "  indented <b>html</b>  ")

    def test_html_tags_are_plain_text(self):
        self.assertEqual(classify_line("<h1>Title</h1>").kind, TEXT)
        self.assertEqual(classify_line("<ul><li>a</li></ul>").kind, TEXT)


class TestClassifyLines(unittest.TestCase):
    def test_empty_string_is_one_blank_line(self):
        self.assertEqual(classify_lines(""), [ClassifiedLine(kind=BLANK, raw="")])

    def test_none_is_treated_as_empty(self):
        self.assertEqual(len(classify_lines(None)), 1)

    def test_line_endings_normalized(self):
        self.assertEqual(split_lines("a\r\nb\rc\nd"), ["a", "b", "c", "d"])
        kinds = [line.kind for line in classify_lines("# a\r\n- b\r\n")]
        self.assertEqual(kinds, [HEADING, UNORDERED_ITEM, BLANK])

    def test_order_preserved(self):
        lines = classify_lines("one\ntwo\nthree")
        self.assertEqual([line.text for line in lines], ["one", "two", "three"])


if __name__ == "__main__":
    unittest.main()
