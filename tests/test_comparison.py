import pytest

from utils.errors import NotFoundError, PrivacyError, ValidationError
from webapp.services import comparison_service, favorite_service, wordcloud_service
from webapp.services.comparison_service import aggregate_common_songs, score_matches

SHARED_LYRICS = "midnight city lights burning bright midnight dreams forever young"


@pytest.fixture
def trio(make_user):
    """user2 shares most lyric words with user1, user3 shares almost none."""
    for name in ("user1", "user2", "user3"):
        make_user(name)
    favorite_service.add_favorite("user1", "s1", title="City", lyrics=SHARED_LYRICS)
    favorite_service.add_favorite("user1", "s2", title="Shared", lyrics="ocean waves")
    favorite_service.add_favorite("user2", "s3", title="Lights", lyrics=SHARED_LYRICS + " again")
    favorite_service.add_favorite("user2", "s2", title="Shared", lyrics="ocean waves")
    favorite_service.add_favorite("user3", "s4", title="Barn", lyrics="tractor dirt road whiskey young")
    return "user1", "user2", "user3"


def test_soulmate_and_enemy(trio):
    result = comparison_service.compare("user1", ["user2", "user3"])

    assert result.soulmate.username == "user2"
    assert result.enemy.username == "user3"
    assert result.soulmate.score > result.enemy.score


def test_common_songs_count_and_users(trio):
    result = comparison_service.compare("user1", ["user2", "user3"])

    assert [song.song_id for song in result.common_songs] == ["s2"]
    shared = result.common_songs[0]
    assert shared.count == 2
    assert shared.users == ["user1", "user2"]
    assert shared.position == 1


def test_private_user_reported_and_not_leaked(trio, db):
    favorite_service.add_favorite("user3", "s2", lyrics="ocean waves")
    db.set_favorites_privacy("user3", True)

    result = comparison_service.compare("user1", ["user2", "user3"])

    assert isinstance(result.errors["user3"], PrivacyError)
    assert result.compared == ["user2"]
    assert all("user3" not in song.users for song in result.common_songs)
    assert "user3" not in (result.soulmate.username, getattr(result.enemy, 'username', None))
    assert "s4" not in str(result.to_dict())


def test_requester_sees_own_private_list(trio, db):
    db.set_favorites_privacy("user1", True)
    result = comparison_service.compare("user1", ["user1", "user2"])
    assert result.errors == {}
    assert result.compared == ["user2"]


def test_unknown_user_does_not_abort_comparison(trio):
    result = comparison_service.compare("user1", ["nobody", "user2", "", "user2"])

    assert isinstance(result.errors["nobody"], NotFoundError)
    assert result.compared == ["user2"]
    assert result.soulmate.username == "user2"
    assert result.enemy.username == "user2"


def test_unknown_requester_or_collection(trio):
    with pytest.raises(NotFoundError):
        comparison_service.compare("ghost", ["user2"])
    with pytest.raises(ValidationError):
        comparison_service.compare("user1", ["user2"], collection="playlists")


def test_compare_with_nobody(trio):
    result = comparison_service.compare("user1", [])
    assert result.soulmate is None
    assert result.enemy is None
    assert result.common_songs == []


def test_word_cloud_collection_is_profiled_separately(trio):
    wordcloud_service.add_to_word_cloud("user1", [{'song_id': "w1", 'lyrics': "tractor dirt road"}])
    wordcloud_service.add_to_word_cloud("user2", [{'song_id': "w2", 'lyrics': "city lights"}])
    wordcloud_service.add_to_word_cloud("user3", [{'song_id': "w3", 'lyrics': "tractor dirt road whiskey"}])

    result = comparison_service.compare("user1", ["user2", "user3"], collection="wordcloud")
    assert result.soulmate.username == "user3"
    assert result.enemy.username == "user2"


def test_single_other_user_is_soulmate_and_enemy():
    soulmate, enemy = score_matches('a', {'a': {'love': 1}, 'b': {'dust': 1}})
    assert soulmate == enemy
    assert enemy.username == 'b'
    assert enemy.score == 0


def test_ties_break_alphabetically():
    profiles = {
        'me': {'love': 2},
        'zed': {'love': 1},
        'amy': {'love': 1},
        'bob': {'hate': 1},
        'abe': {'war': 1},
    }
    soulmate, enemy = score_matches('me', profiles)
    assert soulmate.username == 'amy'
    assert enemy.username == 'abe'


def test_mutual_flags():
    profiles = {
        'me': {'love': 3, 'night': 2},
        'twin': {'love': 3, 'night': 2},
        'far': {'dust': 4},
        'dusty': {'dust': 4, 'love': 1},
    }
    soulmate, enemy = score_matches('me', profiles)
    assert soulmate.username == 'twin'
    assert soulmate.mutual is True
    assert enemy.username == 'far'
    # nobody scores lower than zero against 'far'
    assert enemy.mutual is True

    profiles['rival'] = {'love': 3, 'night': 2, 'dust': 1}
    profiles['twin'] = {'love': 3, 'night': 2, 'dust': 1}
    soulmate, _ = score_matches('me', profiles)
    assert soulmate.username == 'rival'
    assert soulmate.mutual is False


def test_common_song_positions_share_ties():
    song_lists = {
        'a': [{'song_id': 'x'}, {'song_id': 'y'}, {'song_id': 'z'}],
        'b': [{'song_id': 'x'}, {'song_id': 'y'}, {'song_id': 'z'}],
        'c': [{'song_id': 'x'}, {'song_id': 'solo'}],
    }
    common = aggregate_common_songs(song_lists)
    assert [(song.song_id, song.count, song.position) for song in common] == [
        ('x', 3, 1),
        ('y', 2, 2),
        ('z', 2, 2),
    ]


def test_search_users_by_prefix(make_user):
    for name in ("Alice", "alex", "albert", "bob", "al_x"):
        make_user(name)

    assert comparison_service.search_users_by_prefix("AL", requester="albert") == ["al_x", "alex", "Alice"]
    assert comparison_service.search_users_by_prefix("al_") == ["al_x"]
    assert comparison_service.search_users_by_prefix("zz") == []


def test_favoriters_exclude_requester_and_private_users(make_user):
    for name in ("me", "pal", "ghostly"):
        make_user(name)
    make_user("secret", private=True)
    for name in ("me", "pal", "secret"):
        favorite_service.add_favorite(name, "hit")

    assert comparison_service.get_favoriters_of("hit", "me") == ["pal"]
    with pytest.raises(NotFoundError):
        comparison_service.get_favoriters_of("hit", "nobody")


def test_lyrical_matches_cover_all_public_users(trio, make_user):
    make_user("hidden", private=True)
    favorite_service.add_favorite("hidden", "s9", lyrics=SHARED_LYRICS)

    result = comparison_service.find_lyrical_matches("user1")
    assert result.soulmate.username == "user2"
    assert result.enemy.username == "user3"
    assert result.errors == {}
    assert "hidden" not in result.compared


def test_all_word_maps_respect_privacy(trio, db):
    db.set_favorites_privacy("user3", True)
    maps = comparison_service.get_all_word_maps("user1")
    assert set(maps) == {"user1", "user2"}
    assert maps["user1"]['word_map']['midnight'] == 2
    assert [song['song_id'] for song in maps["user2"]['favorites']] == ["s3", "s2"]
