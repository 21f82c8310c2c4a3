import math
import re

WORDS_PER_MINUTE = 200


def slugify(value: str, max_length: int = 255) -> str:
    """Lowercase, drop anything outside [a-z0-9 -], hyphenate whitespace."""
    slug = value.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug.strip())
    slug = re.sub(r"-+", "-", slug)
    return slug[:max_length].strip("-")


def calculate_reading_time(content: str) -> int:
    words = len(content.split()) if content else 0
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


def count_words(text: str) -> int:
    return len(text.split()) if text else 0
