"""Domain data models: pure Python dataclasses."""

from dataclasses import dataclass
from enum import Enum


class BlockKind(str, Enum):
    CODE = "code"
    QUOTE = "quote"
    TABLE = "table"
    TEXT = "text"


@dataclass(frozen=True)
class TranscodedBlock:
    """One renderable segment of a transcoded reply."""

    kind: BlockKind
    content: str
