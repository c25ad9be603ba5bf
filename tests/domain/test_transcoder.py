"""Tests for domain/transcoder.py: markdown to Slack mrkdwn."""

import pytest

from relay.domain import transcoder
from relay.domain.transcoder import (
    Stash,
    fenced_code,
    lists,
    run_passes,
    tables,
    to_chat_markup,
)


class TestInline:
    def test_bold(self):
        assert to_chat_markup("**bold**") == "*bold*"

    def test_underscore_italic(self):
        assert to_chat_markup("_ital_") == "_ital_"

    def test_asterisk_italic(self):
        assert to_chat_markup("*ital*") == "_ital_"

    def test_bold_then_italic(self):
        assert to_chat_markup("**bold** and *ital*") == "*bold* and _ital_"

    def test_multiplication_not_italic(self):
        assert to_chat_markup("2 * 3 * 4") == "2 * 3 * 4"

    def test_link(self):
        assert to_chat_markup("[text](http://x)") == "<http://x|text>"

    def test_link_with_bold_label(self):
        assert to_chat_markup("[**x**](http://y)") == "<http://y|*x*>"

    def test_link_url_not_restyled(self):
        assert to_chat_markup("see [a](http://x/*y*)") == "see <http://x/*y*|a>"

    def test_link_url_keeps_underscores_and_emoji_codes(self):
        md = "[docs](https://x.test/**a**/:x:/b_c)"
        assert to_chat_markup(md) == "<https://x.test/**a**/:x:/b_c|docs>"

    def test_link_label_italic(self):
        assert to_chat_markup("[*label*](http://y)") == "<http://y|_label_>"

    def test_link_in_list_item(self):
        assert to_chat_markup("- [a](http://x)") == "• <http://x|a>"

    def test_bold_italic(self):
        assert to_chat_markup("***bi***") == "*_bi_*"

    def test_bold_italic_beside_bold(self):
        assert to_chat_markup("**b** and ***both***") == "*b* and *_both_*"

    def test_inline_code_untouched(self):
        assert to_chat_markup("use `**x**` and `[a](b)` here") == "use `**x**` and `[a](b)` here"


class TestHeaders:
    def test_level_one(self):
        assert to_chat_markup("# Title") == "*Title*\n"

    def test_level_two(self):
        assert to_chat_markup("## Sub") == "**Sub**\n"

    @pytest.mark.parametrize("hashes", ["###", "####", "#####", "######"])
    def test_levels_three_and_deeper_collapse(self, hashes):
        assert to_chat_markup(f"{hashes} Deep") == "***Deep***\n"

    def test_header_followed_by_text(self):
        assert to_chat_markup("# Title\nbody") == "*Title*\n\nbody"

    def test_hashtag_is_not_header(self):
        assert to_chat_markup("#general") == "#general"


class TestLists:
    def test_bullets_with_nesting(self):
        assert to_chat_markup("- a\n  - b\n    - c") == "• a\n  • b\n    • c"

    def test_numbered(self):
        assert to_chat_markup("1. one\n2. two") == "• one\n• two"

    def test_star_bullet(self):
        assert to_chat_markup("* star item") == "• star item"

    def test_odd_indent_rounds_down(self):
        assert to_chat_markup(" - one\n   - three") == "• one\n  • three"

    def test_pass_in_isolation(self):
        assert lists("  + x", Stash()) == "  • x"


class TestQuotes:
    def test_quote(self):
        assert to_chat_markup("> quoted") == ">>> quoted"

    def test_bare_quote_lines_dropped(self):
        assert to_chat_markup("> a\n>\n> b") == ">>> a\n\n>>> b"


class TestEmoji:
    def test_mapped(self):
        assert to_chat_markup(":thumbsup: :check: :info:") == ":+1: :white_check_mark: :information_source:"

    def test_unmapped_passthrough(self):
        assert to_chat_markup(":tada: :warning:") == ":tada: :warning:"


class TestCodeBlocks:
    def test_language_canonicalized(self):
        md = "```py\nprint('**x**')\n```"
        assert to_chat_markup(md) == "```Python\nprint('**x**')\n```"

    def test_cpp_tag(self):
        assert to_chat_markup("```c++\nint x;\n```") == "```C++\nint x;\n```"

    def test_no_tag(self):
        assert to_chat_markup("```\n- not a list\n```") == "```\n- not a list\n```"

    def test_unknown_tag_passthrough(self):
        assert to_chat_markup("```brainfuck\n+++\n```") == "```brainfuck\n+++\n```"

    def test_unclosed_fence_left_alone(self):
        assert to_chat_markup("```py\nno close") == "```py\nno close"

    def test_fence_pass_stashes_content(self):
        stash = Stash()
        out = fenced_code("```js\nx\n```", stash)
        assert "```" not in out
        assert stash.restore(out) == "```JavaScript\nx\n```"


class TestTables:
    def test_basic_table(self):
        result = to_chat_markup("| A | B |\n|---|---|\n| 1 | 2 |\n")
        lines = result.split("\n")
        assert lines[0] == "```"
        assert "*A* | *B*" in lines
        assert "1 | 2" in lines
        assert "---" not in result
        assert result.rstrip("\n").endswith("```")

    def test_table_cells_not_restyled(self):
        result = to_chat_markup("| A | B |\n|---|---|\n| 1 | 2 |")
        assert "_A_" not in result
        assert result == "```\n*A* | *B*\n1 | 2\n```"

    def test_table_with_surrounding_text(self):
        md = "Results:\n| Name | Score |\n|:-----|------:|\n| Ann | 3 |\n| Bob | 4 |\nDone"
        assert to_chat_markup(md) == (
            "Results:\n```\n*Name* | *Score*\nAnn | 3\nBob | 4\n```\nDone"
        )

    def test_table_inside_code_fence_untouched(self):
        md = "```\n| A | B |\n|---|---|\n| 1 | 2 |\n```"
        assert to_chat_markup(md) == md

    def test_header_without_body_is_not_table(self):
        md = "| A | B |\n|---|---|"
        assert tables(md, Stash()) == md


class TestIdempotence:
    @pytest.mark.parametrize(
        "text",
        [
            "_ital_",
            "• item\n  • nested",
            ">>> quoted",
            "<http://x|text>",
            "plain sentence.",
            ":+1: done",
        ],
    )
    def test_converted_markup_is_stable(self, text):
        once = to_chat_markup(text)
        assert once == text
        assert to_chat_markup(once) == once


class TestRobustness:
    def test_empty(self):
        assert to_chat_markup("") == ""

    def test_failure_returns_original(self, monkeypatch):
        def boom(text, stash):
            raise ValueError("broken pass")

        monkeypatch.setattr(transcoder, "PASSES", [("boom", boom)])
        assert to_chat_markup("**keep me**") == "**keep me**"

    def test_placeholder_characters_in_input_removed(self):
        assert to_chat_markup("a\x000\x00b") == "a0b"

    def test_run_passes_with_subset(self):
        assert run_passes("**x** *y*", [("bold", transcoder.bold)]) == "*x* *y*"

    def test_stash_nested_restore(self):
        stash = Stash()
        inner = stash.put("inner")
        outer = stash.put(f"[{inner}]")
        assert stash.restore(f"x {outer}") == "x [inner]"
        assert len(stash) == 2
