"""
Word Cloud Service

A second song collection per user, used only for word-cloud views. It shares
the lyric profiling of favorites but is never merged with them.
"""

import logging

from config import database
from utils.errors import ValidationError, NotFoundError
from utils.word_profile import build_profile
from webapp.services.lyrics_service import normalize_lyrics

logger = logging.getLogger(__name__)


def add_to_word_cloud(username, songs):
    """
    Add songs to a user's word cloud; songs already present are skipped.

    Args:
        username (str): Owner of the word cloud
        songs (list): Song dicts, each with at least a song_id

    Returns:
        bool: True if the songs were stored
    """
    if not isinstance(songs, list):
        raise ValidationError("songs must be a list")
    if not database.user_exists(username):
        raise NotFoundError(f"{username} does not exist.", username=username)

    prepared = []
    for song in songs:
        if not isinstance(song, dict) or not song.get('song_id'):
            raise ValidationError("every song needs a song_id")
        prepared.append(dict(song, song_id=str(song['song_id']), lyrics=normalize_lyrics(song.get('lyrics'))))

    return database.add_songs_to_word_cloud(username, prepared)


def get_word_cloud(username):
    return database.get_word_cloud(username)


def get_word_cloud_profile(username):
    return build_profile(database.get_word_cloud(username))


def remove_from_word_cloud(username, song_id):
    return database.remove_from_word_cloud(username, str(song_id))


def clear_word_cloud(username):
    return database.clear_word_cloud(username)
