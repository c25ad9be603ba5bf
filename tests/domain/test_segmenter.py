"""Tests for domain/segmenter.py."""

from relay.domain.models import BlockKind, TranscodedBlock
from relay.domain.segmenter import (
    MAX_BLOCKS,
    MAX_SECTION_TEXT,
    classify,
    segment,
    to_slack_blocks,
)


class TestSegment:
    def test_three_paragraphs_in_order(self):
        blocks = segment("a\n\nb\n\nc")
        assert [b.content for b in blocks] == ["a", "b", "c"]
        assert all(b.kind == BlockKind.TEXT for b in blocks)

    def test_empty(self):
        assert segment("") == []

    def test_blank_paragraphs_dropped(self):
        assert [b.content for b in segment("a\n\n\n\nb")] == ["a", "b"]

    def test_single_newlines_kept_together(self):
        blocks = segment("line one\nline two")
        assert len(blocks) == 1
        assert blocks[0].content == "line one\nline two"


class TestClassify:
    def test_code(self):
        assert classify("```\nx\n```") == BlockKind.CODE

    def test_quote(self):
        assert classify(">>> said") == BlockKind.QUOTE

    def test_table(self):
        assert classify("| a | b |\n| 1 | 2 |") == BlockKind.TABLE

    def test_single_pipe_line_is_text(self):
        assert classify("| a |") == BlockKind.TEXT

    def test_mixed_reply(self):
        kinds = [b.kind for b in segment("intro\n\n```Python\nx = 1\n```\n\n>>> quote")]
        assert kinds == [BlockKind.TEXT, BlockKind.CODE, BlockKind.QUOTE]


class TestSlackBlocks:
    def test_section_shape(self):
        blocks = to_slack_blocks([TranscodedBlock(kind=BlockKind.TEXT, content="hi")])
        assert blocks == [{"type": "section", "text": {"type": "mrkdwn", "text": "hi"}}]

    def test_long_section_truncated(self):
        blocks = to_slack_blocks([TranscodedBlock(kind=BlockKind.TEXT, content="x" * 5000)])
        text = blocks[0]["text"]["text"]
        assert len(text) == MAX_SECTION_TEXT
        assert text.endswith("...")

    def test_long_code_block_stays_closed(self):
        content = "```Python\n" + "x = 1\n" * 1000 + "```"
        blocks = to_slack_blocks(segment(content))
        text = blocks[0]["text"]["text"]
        assert len(text) == MAX_SECTION_TEXT
        assert text.startswith("```Python\n")
        assert text.endswith("...\n```")

    def test_short_code_block_unchanged(self):
        content = "```\nx\n```"
        assert to_slack_blocks(segment(content))[0]["text"]["text"] == content

    def test_too_many_blocks_falls_back_to_text(self):
        many = [TranscodedBlock(kind=BlockKind.TEXT, content="p")] * (MAX_BLOCKS + 1)
        assert to_slack_blocks(many) == []

    def test_at_limit_kept(self):
        many = [TranscodedBlock(kind=BlockKind.TEXT, content="p")] * MAX_BLOCKS
        assert len(to_slack_blocks(many)) == MAX_BLOCKS
