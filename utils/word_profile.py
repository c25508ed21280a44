"""
Word Profile Builder

Turns song lyrics into word-frequency profiles (word -> count) and scores how
much two profiles overlap.
"""

import re
from collections import Counter

# Common function words ignored when profiling lyrics
STOP_WORDS = frozenset([
    "the", "and", "a", "to", "of", "in", "is", "it", "you", "that", "on", "for", "with",
    "as", "was", "are", "but", "be", "at", "by", "this", "have", "or", "an", "not", "we",
])

_APOSTROPHES = re.compile(r"['’]")
# Runs of letters; digits, punctuation and whitespace all act as delimiters
_WORD_RE = re.compile(r"[^\W\d_]+")


def tokenize(text, stop_words=STOP_WORDS):
    """
    Split text into lowercase word tokens with stopwords removed.

    Apostrophes are dropped inside words ("don't" -> "dont"); every other
    non-letter character separates tokens, so no empty token is ever produced.

    Args:
        text (str): Raw text, None is treated as empty
        stop_words (Iterable[str]): Words to discard

    Returns:
        list: Tokens in order of appearance
    """
    if not text:
        return []
    cleaned = _APOSTROPHES.sub("", text.lower())
    return [word for word in _WORD_RE.findall(cleaned) if word not in stop_words]


def build_word_map(lyrics, stop_words=STOP_WORDS):
    """
    Word frequency map for a single song.

    Args:
        lyrics (str): Song lyrics

    Returns:
        collections.Counter: word -> count
    """
    return Counter(tokenize(lyrics, stop_words))


def build_profile(songs, stop_words=STOP_WORDS):
    """
    Sum the word maps of a collection of songs into one profile.

    Args:
        songs (Iterable): Song dicts carrying a 'lyrics' key, or plain lyric strings.
            Songs with missing or empty lyrics are skipped.

    Returns:
        dict: word -> count across all songs
    """
    profile = Counter()
    for song in songs:
        lyrics = song.get('lyrics') if isinstance(song, dict) else song
        if not lyrics:
            continue
        profile.update(build_word_map(lyrics, stop_words))
    return dict(profile)


def similarity_score(profile_a, profile_b):
    """
    Weighted intersection of two profiles.

    Sum over the words present in both profiles of the smaller count. The score
    is symmetric, zero for disjoint profiles and never decreases when a count grows.
    """
    if len(profile_b) < len(profile_a):
        profile_a, profile_b = profile_b, profile_a
    return sum(min(count, profile_b[word]) for word, count in profile_a.items() if word in profile_b)
