from utils.word_profile import STOP_WORDS, tokenize, build_word_map, build_profile, similarity_score
from webapp.services.lyrics_service import LYRICS_UNKNOWN


def test_counts_words_and_drops_stopwords():
    assert build_word_map("Love love peace peace and harmony") == {'love': 2, 'peace': 2, 'harmony': 1}


def test_repeated_whitespace_never_yields_blank_word():
    profile = build_word_map("love  peace   ")
    assert profile == {'love': 1, 'peace': 1}
    assert '' not in profile


def test_punctuation_and_digits_split_tokens():
    assert tokenize("Hey! Hey,hey... 99 problems\n\tdon't stop") == ['hey', 'hey', 'hey', 'problems', 'dont', 'stop']


def test_tokenize_handles_missing_text():
    assert tokenize(None) == []
    assert tokenize("") == []
    assert tokenize("   \n ") == []


def test_only_stopwords_gives_empty_profile():
    assert build_word_map(" ".join(sorted(STOP_WORDS))) == {}


def test_profile_sums_songs_and_skips_missing_lyrics():
    songs = [
        {'song_id': '1', 'lyrics': "Sun sun moon"},
        {'song_id': '2', 'lyrics': None},
        {'song_id': '3', 'lyrics': ""},
        {'song_id': '4', 'lyrics': "moon STARS"},
    ]
    assert build_profile(songs) == {'sun': 2, 'moon': 2, 'stars': 1}


def test_unknown_placeholder_is_ordinary_text():
    assert build_profile([{'lyrics': LYRICS_UNKNOWN}]) == {'unknown': 1}


def test_similarity_is_weighted_intersection():
    a = {'love': 3, 'night': 1, 'rain': 2}
    b = {'love': 1, 'rain': 5, 'fire': 4}
    assert similarity_score(a, b) == 1 + 2
    assert similarity_score(b, a) == similarity_score(a, b)


def test_similarity_of_disjoint_profiles_is_zero():
    assert similarity_score({'a': 1}, {'b': 1}) == 0
    assert similarity_score({}, {'b': 1}) == 0


def test_similarity_grows_with_counts():
    base = similarity_score({'love': 1}, {'love': 3})
    assert similarity_score({'love': 2}, {'love': 3}) > base
