import re

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "will", "would", "could", "should",
    "i", "you", "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their",
})

_PUNCTUATION = re.compile(r"[^\w\s]", re.ASCII)


def extract_keywords(text: str) -> set[str]:
    """Lowercase, strip punctuation and stop words, keep tokens longer than two chars."""
    if not text:
        return set()

    words = _PUNCTUATION.sub(" ", text.lower()).split()

    return {word for word in words if len(word) > 2 and word not in STOP_WORDS}
