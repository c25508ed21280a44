"""
Comparison Service

Compares a requester's music with a set of other users:

- common songs: songs favorited by more than one of the compared users
- soulmate / enemy: the users whose lyric word profiles overlap the
  requester's the most / the least

Users whose favorites are private (and who are not the requester) or who do not
exist are reported individually and never contribute data. Each user's data is
read separately, so a favorite added during a comparison may or may not show up.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from config import database
from utils.errors import ValidationError, NotFoundError, PrivacyError, LyricMatchError
from utils.word_profile import build_profile, similarity_score

logger = logging.getLogger(__name__)

FAVORITES = "favorites"
WORDCLOUD = "wordcloud"
COLLECTIONS = (FAVORITES, WORDCLOUD)


@dataclass
class Match:
    username: str
    score: int
    mutual: bool = False

    def to_dict(self):
        return {'username': self.username, 'score': self.score, 'mutual': self.mutual}


@dataclass
class CommonSong:
    song_id: str
    users: List[str]
    position: int = 0
    title: Optional[str] = None
    artist_name: Optional[str] = None

    @property
    def count(self):
        return len(self.users)

    def to_dict(self):
        return {
            'song_id': self.song_id,
            'title': self.title,
            'artist_name': self.artist_name,
            'count': self.count,
            'users': list(self.users),
            'position': self.position,
        }


@dataclass
class ComparisonResult:
    requester: str
    compared: List[str] = field(default_factory=list)
    common_songs: List[CommonSong] = field(default_factory=list)
    soulmate: Optional[Match] = None
    enemy: Optional[Match] = None
    errors: Dict[str, LyricMatchError] = field(default_factory=dict)

    def to_dict(self):
        return {
            'requester': self.requester,
            'compared': list(self.compared),
            'common_songs': [song.to_dict() for song in self.common_songs],
            'soulmate': self.soulmate.to_dict() if self.soulmate else None,
            'enemy': self.enemy.to_dict() if self.enemy else None,
            'errors': {username: error.to_dict() for username, error in self.errors.items()},
        }


def _load_songs(username, collection):
    if collection == WORDCLOUD:
        return database.get_word_cloud(username)
    return database.list_favorites(username)


def _check_collection(collection):
    if collection not in COLLECTIONS:
        raise ValidationError(f"collection must be one of {', '.join(COLLECTIONS)}")


def _require_user(username):
    if not database.user_exists(username):
        raise NotFoundError(f"{username} does not exist.", username=username)


def resolve_permitted_users(requester, selected):
    """
    Split the selected usernames into users whose data may be read and per-user errors.

    Blank names, duplicates and the requester itself are ignored.

    Returns:
        tuple: (permitted usernames in selection order, {username: error})
    """
    permitted = []
    errors = {}
    seen = {requester}
    for raw in selected or []:
        username = (raw or '').strip()
        if not username or username in seen:
            continue
        seen.add(username)

        user = database.get_user(username)
        if user is None:
            errors[username] = NotFoundError(f"{username} does not exist.", username=username)
        elif user['favorites_private']:
            errors[username] = PrivacyError(f"{username}'s favorite list is private.", username=username)
        else:
            permitted.append(username)
    return permitted, errors


def aggregate_common_songs(song_lists):
    """
    Find songs shared by more than one user.

    Args:
        song_lists (dict): username -> list of song dicts

    Returns:
        list: CommonSong entries, most shared first (ties by song_id). Equal
            counts share a position and the next position skips accordingly.
    """
    songs = {}
    for username, user_songs in song_lists.items():
        for song in user_songs:
            entry = songs.get(song['song_id'])
            if entry is None:
                entry = CommonSong(
                    song_id=song['song_id'],
                    users=[],
                    title=song.get('title'),
                    artist_name=song.get('artist_name'),
                )
                songs[song['song_id']] = entry
            if username not in entry.users:
                entry.users.append(username)

    common = sorted(
        (entry for entry in songs.values() if entry.count > 1),
        key=lambda entry: (-entry.count, entry.song_id),
    )

    last_count = None
    for index, entry in enumerate(common, start=1):
        if entry.count != last_count:
            position = index
            last_count = entry.count
        entry.position = position
    return common


def score_matches(requester, profiles):
    """
    Pick the soulmate and the enemy of `requester`.

    Soulmate is the highest similarity score, enemy the lowest; ties go to the
    alphabetically first username. With a single other user, that user is both.

    Args:
        requester (str): Username whose profile is compared
        profiles (dict): username -> word profile, including the requester

    Returns:
        tuple: (soulmate Match or None, enemy Match or None)
    """
    own = profiles[requester]
    scores = {
        username: similarity_score(own, profile)
        for username, profile in profiles.items()
        if username != requester
    }
    if not scores:
        return None, None

    soulmate_name = min(scores, key=lambda username: (-scores[username], username))
    soulmate = Match(soulmate_name, scores[soulmate_name])
    soulmate.mutual = not any(
        similarity_score(profiles[soulmate_name], profile) > soulmate.score
        for username, profile in profiles.items()
        if username not in (requester, soulmate_name)
    )

    enemy_name = min(scores, key=lambda username: (scores[username], username))
    enemy = Match(enemy_name, scores[enemy_name])
    enemy.mutual = not any(
        similarity_score(profiles[enemy_name], profile) < enemy.score
        for username, profile in profiles.items()
        if username not in (requester, enemy_name)
    )
    return soulmate, enemy


def compare(requester, selected, collection=FAVORITES):
    """
    Compare a requester with the selected users.

    Args:
        requester (str): Username asking for the comparison
        selected (list): Usernames to compare against
        collection (str): Song collection used for lyric profiles ("favorites" or "wordcloud")

    Returns:
        ComparisonResult: Common songs, soulmate/enemy and per-user errors

    Raises:
        ValidationError: If the collection is unknown
        NotFoundError: If the requester does not exist
    """
    _check_collection(collection)
    _require_user(requester)

    permitted, errors = resolve_permitted_users(requester, selected)
    participants = [requester] + permitted

    favorites = {username: database.list_favorites(username) for username in participants}
    if collection == FAVORITES:
        profile_songs = favorites
    else:
        profile_songs = {username: _load_songs(username, collection) for username in participants}
    profiles = {username: build_profile(songs) for username, songs in profile_songs.items()}

    soulmate, enemy = score_matches(requester, profiles)
    result = ComparisonResult(
        requester=requester,
        compared=permitted,
        common_songs=aggregate_common_songs(favorites),
        soulmate=soulmate,
        enemy=enemy,
        errors=errors,
    )
    logger.info(
        f"Compared {requester} with {len(permitted)} user(s): {len(result.common_songs)} common song(s), "
        f"{len(errors)} error(s)"
    )
    return result


def find_lyrical_matches(requester, collection=FAVORITES):
    """
    Soulmate and enemy among every other user with public favorites.
    """
    _require_user(requester)
    candidates = [username for username in database.get_usernames_with_favorites() if username != requester]
    result = compare(requester, candidates, collection)
    # Private users were not asked for, so they are left out silently
    result.errors = {}
    return result


def get_all_word_maps(requester):
    """
    Word profile and favorites of every user with favorites visible to `requester`.

    Returns:
        dict: username -> {'word_map': dict, 'favorites': list}
    """
    word_maps = {}
    for username in database.get_usernames_with_favorites():
        if username != requester and database.is_favorites_private(username):
            continue
        favorites = database.list_favorites(username)
        word_maps[username] = {'word_map': build_profile(favorites), 'favorites': favorites}
    return word_maps


def search_users_by_prefix(prefix, requester=None):
    """
    Usernames starting with `prefix` (case-insensitive), excluding the requester.
    """
    return [username for username in database.search_usernames_by_prefix(prefix) if username != requester]


def get_favoriters_of(song_id, requester):
    """
    Other users with public favorites who also favorited a song.

    Raises:
        NotFoundError: If the requester does not exist
    """
    _require_user(requester)
    return [
        username
        for username, is_private in database.find_usernames_by_song_id(str(song_id))
        if username != requester and not is_private
    ]
