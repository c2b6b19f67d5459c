"""Helpers for chat transports that host the assistant."""
import re
from typing import List

MENTION_RE = re.compile(r"<@!?\d+>")

# Discord rejects messages above 2000 characters
MESSAGE_LIMIT = 2000
CHUNK_SIZE = 1900


def strip_mentions(text: str) -> str:
    return MENTION_RE.sub("", text or "").strip()


def chunk_message(text: str, limit: int = MESSAGE_LIMIT, size: int = CHUNK_SIZE) -> List[str]:
    if len(text) <= limit:
        return [text]
    return [text[i:i + size] for i in range(0, len(text), size)]
