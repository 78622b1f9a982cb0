"""Identity annotations embedded in outline lines: ``<!-- id:xxxxxxxx -->``."""

from __future__ import annotations

import re
import secrets
import string

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 8

_ID_COMMENT_RE = re.compile(r"<!--\s*id:([a-zA-Z0-9]+)\s*-->")


def generate_id(taken: set[str] | None = None) -> str:
    """Return a fresh 8-character lowercase alphanumeric id not in ``taken``."""
    while True:
        new_id = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
        if taken is None or new_id not in taken:
            return new_id


def extract_id(text: str) -> str | None:
    m = _ID_COMMENT_RE.search(text)
    return m.group(1) if m else None


def strip_id(text: str) -> str:
    """Remove the identity annotation and surrounding whitespace."""
    return _ID_COMMENT_RE.sub("", text, count=1).strip()


def embed_id(text: str, node_id: str) -> str:
    """Replace an existing annotation, or append one after the content."""
    annotation = f"<!-- id:{node_id} -->"
    if _ID_COMMENT_RE.search(text):
        return _ID_COMMENT_RE.sub(annotation, text, count=1)
    return f"{text} {annotation}"


def has_identity_annotations(text: str) -> bool:
    return _ID_COMMENT_RE.search(text) is not None
