# src/suggestions.py
from config import SUGGESTION_LIMIT

# Static word list; order matters, lookups keep the first matches.
WORD_DICTIONARY = [
    "hello", "hi", "how", "hey", "house", "help", "happy", "have",
    "good", "great", "go", "game", "give", "girl",
    "yes", "you", "yesterday", "yell",
    "no", "note", "now", "nice",
    "please", "project", "put", "play",
    "thanks", "thankyou", "today", "tomorrow",
]


def suggest_words(letter, limit=SUGGESTION_LIMIT, dictionary=WORD_DICTIONARY):
    """Return up to `limit` words starting with `letter`, ignoring case."""
    if not letter:
        return []
    prefix = letter.lower()
    matches = [word for word in dictionary if word.lower().startswith(prefix)]
    return matches[:limit]
