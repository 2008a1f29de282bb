"""Hashing utilities."""

import hashlib


def generate_article_id(link: str, title: str) -> str:
    """Generate a content-addressed article ID from link and title."""
    return hashlib.sha256(f"{link}|{title}".encode()).hexdigest()[:16]


def stable_hash(value: str) -> int:
    """Return a process-independent unsigned integer hash of `value`."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")
