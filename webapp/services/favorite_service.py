"""
Favorite Service

Ranked favorites for each user: add to the bottom, remove, list in rank order
and swap two positions. Rank mutations for one user are serialized.
"""

import logging

from config import database
from utils.errors import ValidationError, NotFoundError, PrivacyError, PersistenceError
from utils.locks import user_locks
from webapp.services.lyrics_service import normalize_lyrics

logger = logging.getLogger(__name__)


def _require_user(username):
    user = database.get_user(username)
    if user is None:
        raise NotFoundError(f"{username} does not exist.", username=username)
    return user


def add_favorite(username, song_id, title=None, artist_name=None, url=None, image_url=None,
                 release_date=None, lyrics=None):
    """
    Add a song to the end of a user's favorites.

    Returns:
        int: The rank assigned to the song

    Raises:
        ValidationError: If song_id is missing
        NotFoundError: If the user does not exist
        ConflictError: If the song is already a favorite
        PersistenceError: If the song could not be stored
    """
    if not song_id:
        raise ValidationError("song_id is required")
    _require_user(username)

    with user_locks.hold(username):
        rank = database.add_favorite(
            username,
            str(song_id),
            lyrics=normalize_lyrics(lyrics),
            title=title,
            artist_name=artist_name,
            url=url,
            image_url=image_url,
            release_date=release_date,
        )

    if rank is None:
        raise PersistenceError("Failed to add song.")
    return rank


def remove_favorite(username, song_id):
    with user_locks.hold(username):
        return database.remove_favorite(username, str(song_id))


def swap_ranks(username, rank1, rank2):
    """
    Exchange two positions in a user's favorites.

    Returns:
        bool: False if either rank is not held by one of the user's songs
    """
    with user_locks.hold(username):
        return database.swap_ranks(username, int(rank1), int(rank2))


def list_favorites(username):
    return database.list_favorites(username)


def get_favorites(username, requester):
    """
    A user's favorites as seen by `requester`.

    An anonymous requester (None) is treated like any other user.

    Raises:
        NotFoundError: If the user does not exist
        PrivacyError: If the list is private and requester is someone else
    """
    _check_visible(_require_user(username), requester)
    return database.list_favorites(username)


def _check_visible(user, requester):
    if user['favorites_private'] and requester != user['username']:
        raise PrivacyError(f"{user['username']}'s favorite list is private.", username=user['username'])


def is_favorites_private(username):
    return _require_user(username)['favorites_private']


def get_favorites_privacy(username, requester):
    """
    Privacy flag of a user's list; only the owner may see that it is private.
    """
    user = _require_user(username)
    _check_visible(user, requester)
    return user['favorites_private']


def set_favorites_privacy(username, is_private):
    if not database.set_favorites_privacy(username, is_private):
        raise NotFoundError(f"{username} does not exist.", username=username)
    return bool(is_private)
