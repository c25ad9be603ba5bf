"""Split transcoded replies into Slack section blocks."""

from typing import Any, Dict, List

from relay.domain.models import BlockKind, TranscodedBlock

SEGMENT_SEPARATOR = "\n\n"

# Slack Block Kit limits
MAX_SECTION_TEXT = 3000
MAX_BLOCKS = 50


def classify(section: str) -> BlockKind:
    """Kind of a segment, judged by its leading characters."""
    if section.startswith("```"):
        return BlockKind.CODE
    if section.startswith(">>>"):
        return BlockKind.QUOTE
    if section.strip().startswith("|") and "\n" in section:
        return BlockKind.TABLE
    return BlockKind.TEXT


def segment(text: str) -> List[TranscodedBlock]:
    """Blank-line separated paragraphs, in source order.

    Whitespace-only paragraphs are dropped since Slack rejects empty
    section text.
    """
    if not text:
        return []
    return [
        TranscodedBlock(kind=classify(section), content=section)
        for section in text.split(SEGMENT_SEPARATOR)
        if section.strip()
    ]


def _truncate(text: str, limit: int = MAX_SECTION_TEXT, suffix: str = "") -> str:
    """Cut text to limit, ending with "..." and then suffix."""
    if len(text) <= limit:
        return text
    return text[: limit - 3 - len(suffix)] + "..." + suffix


def render_block(block: TranscodedBlock) -> Dict[str, Any]:
    # Every kind renders as a plain mrkdwn section; a cut code block is re-closed
    suffix = "\n```" if block.kind == BlockKind.CODE else ""
    return {
        "type": "section",
        "text": {"type": "mrkdwn", "text": _truncate(block.content, suffix=suffix)},
    }


def to_slack_blocks(blocks: List[TranscodedBlock]) -> List[Dict[str, Any]]:
    """Block Kit payload for blocks. Empty when Slack's block limit is exceeded,
    in which case the caller posts plain text only."""
    if len(blocks) > MAX_BLOCKS:
        return []
    return [render_block(block) for block in blocks]
