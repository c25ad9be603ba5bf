"""Markdown to Slack mrkdwn transcoding.

Slack's mrkdwn is a small dialect of its own:
  *bold*, _italic_, ~strike~, `code`, ```code blocks```,
  >>> quotes, <url|label> links, :emoji: shortcodes

The conversion is an ordered list of passes. Every pass takes the working
text plus a per-call Stash and returns new text. Output that must survive
untouched (code, tables) is parked in the stash behind a placeholder token,
and bold delimiters are held as a sentinel until the end, so later passes
never re-match what earlier passes produced.

Pure Python, no framework dependencies.
"""

import re
import sys
from typing import Callable, List, Tuple


def _log(msg: str):
    print(msg, file=sys.stderr)


# Display names for fenced code languages
LANGUAGE_MAP = {
    "python": "Python",
    "py": "Python",
    "javascript": "JavaScript",
    "js": "JavaScript",
    "typescript": "TypeScript",
    "ts": "TypeScript",
    "java": "Java",
    "cpp": "C++",
    "c++": "C++",
    "csharp": "C#",
    "c#": "C#",
    "ruby": "Ruby",
    "php": "PHP",
    "go": "Go",
    "rust": "Rust",
    "swift": "Swift",
    "kotlin": "Kotlin",
    "sql": "SQL",
    "html": "HTML",
    "css": "CSS",
    "shell": "Shell",
    "bash": "Bash",
    "json": "JSON",
    "xml": "XML",
    "yaml": "YAML",
    "markdown": "Markdown",
    "md": "Markdown",
}

# Markdown shortcode -> Slack shortcode
EMOJI_MAP = {
    ":smile:": ":smile:",
    ":thumbsup:": ":+1:",
    ":check:": ":white_check_mark:",
    ":warning:": ":warning:",
    ":info:": ":information_source:",
    ":star:": ":star:",
    ":question:": ":question:",
    ":x:": ":x:",
    ":heavy_check_mark:": ":white_check_mark:",
    ":clipboard:": ":clipboard:",
}

_TOKEN = "\x00"
_BOLD = "\x01"
_TOKEN_RE = re.compile(_TOKEN + r"(\d+)" + _TOKEN)

FENCE_RE = re.compile(r"```([\w+#.-]+)?[ \t]*\n(.*?)```", re.DOTALL)
TABLE_ROW_RE = re.compile(r"^\s*\|.*\|\s*$")
TABLE_SEPARATOR_RE = re.compile(r"^\s*\|[-:|\s]+\|\s*$")
INLINE_CODE_RE = re.compile(r"`[^`\n]+`")
HEADER_RE = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
BOLD_ITALIC_RE = re.compile(r"\*\*\*(?!\s)(.+?)(?<!\s)\*\*\*")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
ITALIC_RE = re.compile(r"(?<!\w)\*(?!\s)([^*\n]+?)\*(?!\w)")
LIST_RE = re.compile(r"^([ \t]*)(?:[-*+]|\d+\.)[ \t]+(.+)$", re.MULTILINE)
QUOTE_RE = re.compile(r"^>[ \t]+(.+)$", re.MULTILINE)
BARE_QUOTE_RE = re.compile(r"^>[ \t]*$", re.MULTILINE)
LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
EMOJI_RE = re.compile("|".join(re.escape(code) for code in EMOJI_MAP))


class Stash:
    """Holds rendered fragments behind placeholder tokens for one conversion."""

    def __init__(self):
        self._fragments: List[str] = []

    def put(self, fragment: str) -> str:
        self._fragments.append(fragment)
        return f"{_TOKEN}{len(self._fragments) - 1}{_TOKEN}"

    def restore(self, text: str) -> str:
        # Fragments may embed earlier tokens, so unwind until none are left
        for _ in range(len(self._fragments) + 1):
            if _TOKEN not in text:
                break
            text = _TOKEN_RE.sub(lambda m: self._fragments[int(m.group(1))], text)
        return text

    def __len__(self) -> int:
        return len(self._fragments)


def fenced_code(text: str, stash: Stash) -> str:
    """```lang\\n...``` -> ```Lang\\n...```, content verbatim and stashed.

    Unclosed fences are left for the later passes.
    """

    def _render(match: re.Match) -> str:
        lang, code = match.group(1), match.group(2)
        language = LANGUAGE_MAP.get(lang.lower(), lang) if lang else ""
        return stash.put(f"```{language}\n{code}```")

    return FENCE_RE.sub(_render, text)


def _table_cells(row: str) -> List[str]:
    inner = row.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|"):
        inner = inner[:-1]
    return [cell.strip() for cell in inner.split("|")]


def _is_separator(line: str) -> bool:
    return bool(TABLE_SEPARATOR_RE.match(line)) and "-" in line


def render_table(rows: List[str]) -> str:
    """Render header + body rows (separator already removed) as a fenced block."""
    header = " | ".join(f"*{cell}*" if cell else "" for cell in _table_cells(rows[0]))
    body = [" | ".join(_table_cells(row)) for row in rows[1:]]
    return "```\n" + "\n".join([header] + body) + "\n```"


def tables(text: str, stash: Stash) -> str:
    """Pipe tables (header, separator, one or more body rows) -> fenced block.

    Runs after fenced_code, so tables inside code fences are already stashed
    and cannot be picked up here.
    """
    lines = text.split("\n")
    out: List[str] = []
    i = 0
    while i < len(lines):
        if (
            i + 2 < len(lines)
            and TABLE_ROW_RE.match(lines[i])
            and _is_separator(lines[i + 1])
            and TABLE_ROW_RE.match(lines[i + 2])
        ):
            rows = [lines[i]]
            j = i + 2
            while j < len(lines) and TABLE_ROW_RE.match(lines[j]):
                rows.append(lines[j])
                j += 1
            out.append(stash.put(render_table(rows)))
            i = j
            continue
        out.append(lines[i])
        i += 1
    return "\n".join(out)


def inline_code(text: str, stash: Stash) -> str:
    """`code` spans are identical in mrkdwn; stash them so nothing inside changes."""
    return INLINE_CODE_RE.sub(lambda m: stash.put(m.group(0)), text)


def headers(text: str, stash: Stash) -> str:
    """# .. ###### -> bold delimiter run of the level, capped at 3."""

    def _render(match: re.Match) -> str:
        marker = _BOLD * min(len(match.group(1)), 3)
        return f"{marker}{match.group(2)}{marker}\n"

    return HEADER_RE.sub(_render, text)


def bold(text: str, stash: Stash) -> str:
    """**text** -> *text*, ***text*** -> *_text_*.

    Delimiters are held as sentinels until restore.
    """
    text = BOLD_ITALIC_RE.sub(lambda m: f"{_BOLD}_{m.group(1)}_{_BOLD}", text)
    return BOLD_RE.sub(lambda m: f"{_BOLD}{m.group(1)}{_BOLD}", text)


def italic(text: str, stash: Stash) -> str:
    """*text* -> _text_. _text_ is already mrkdwn italic and is left alone."""
    return ITALIC_RE.sub(r"_\1_", text)


def lists(text: str, stash: Stash) -> str:
    """-, *, + and 1. markers -> bullet, two source spaces per nesting level."""

    def _render(match: re.Match) -> str:
        level = len(match.group(1).expandtabs(4)) // 2
        return f"{'  ' * level}• {match.group(2)}"

    return LIST_RE.sub(_render, text)


def quotes(text: str, stash: Stash) -> str:
    """> text -> >>> text; lines holding only > are emptied."""
    text = QUOTE_RE.sub(r">>> \1", text)
    return BARE_QUOTE_RE.sub("", text)


def links(text: str, stash: Stash) -> str:
    """[label](url) -> <url|label>.

    The <url| and > parts are stashed, so the URL is never restyled while
    the label still goes through the inline passes that follow.
    """
    return LINK_RE.sub(
        lambda m: f"{stash.put(f'<{m.group(2)}|')}{m.group(1)}{stash.put('>')}",
        text,
    )


def emoji(text: str, stash: Stash) -> str:
    """Known shortcodes -> Slack equivalents, unknown ones untouched."""
    return EMOJI_RE.sub(lambda m: EMOJI_MAP[m.group(0)], text)


Pass = Callable[[str, Stash], str]

PASSES: List[Tuple[str, Pass]] = [
    ("fenced_code", fenced_code),
    ("tables", tables),
    ("inline_code", inline_code),
    ("links", links),
    ("headers", headers),
    ("bold", bold),
    ("italic", italic),
    ("lists", lists),
    ("quotes", quotes),
    ("emoji", emoji),
]


def run_passes(text: str, passes: List[Tuple[str, Pass]]) -> str:
    """Apply passes in order with a fresh stash, then restore placeholders."""
    text = text.replace(_TOKEN, "").replace(_BOLD, "")
    stash = Stash()
    for _, apply in passes:
        text = apply(text, stash)
    return stash.restore(text).replace(_BOLD, "*")


def to_chat_markup(text: str) -> str:
    """Convert markdown to Slack mrkdwn.

    Never raises: on an unexpected error the input is returned unchanged.
    """
    if not text:
        return text
    try:
        return run_passes(text, PASSES)
    except Exception as e:
        _log(f"[transcoder] conversion failed, sending original text: {e}")
        return text
