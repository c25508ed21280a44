"""
Database Configuration and Management (SQLAlchemy)

Handles database setup, connections, and initialization using SQLAlchemy ORM,
plus the repository functions for users, ranked favorites and word cloud songs.

Every repository function runs in its own session. Failures are logged, rolled
back and reported as None / False / [] so no partially-applied change is ever
visible to later calls.
"""

import shutil
from datetime import datetime
from pathlib import Path
import logging
from sqlalchemy import create_engine, select, delete, update, and_, func
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
from config.models import Base, User, FavoriteSong, WordCloudSong
from config.settings import DATABASE_URL, BACKUP_DIR, RANK_RETRIES
from utils.errors import ConflictError

logger = logging.getLogger(__name__)

SONG_FIELDS = ('title', 'artist_name', 'url', 'image_url', 'release_date')

# SQLAlchemy Engine and Session (re-bound by configure_database)
engine = None
SessionLocal = None

def configure_database(database_url=None):
    """
    Point the module at a database and (re)create the engine and session factory.

    Args:
        database_url (str, optional): SQLAlchemy URL, defaults to LYRICMATCH_DATABASE_URL

    Returns:
        sqlalchemy.engine.Engine: The new engine
    """
    global engine, SessionLocal

    url = make_url(database_url or DATABASE_URL)
    connect_args = {}
    if url.get_backend_name() == 'sqlite':
        connect_args['check_same_thread'] = False
        if url.database and url.database != ':memory:':
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    if engine is not None:
        engine.dispose()
    engine = create_engine(url, echo=False, connect_args=connect_args)
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return engine

def get_db_session():
    """
    Get a new database session.

    Returns:
        sqlalchemy.orm.Session: Database session
    """
    if SessionLocal is None:
        configure_database()
    return SessionLocal()

def init_database():
    """
    Initialize the database with all required tables.
    """
    logger.info("Initializing database...")

    if engine is None:
        configure_database()

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized successfully!")
    except Exception as e:
        logger.error(f"Error initializing database: {e}")
        raise

def backup_database():
    """
    Create a backup of a file-based SQLite database.

    Returns:
        str or None: Path of the backup file
    """
    url = engine.url if engine is not None else make_url(DATABASE_URL)
    if url.get_backend_name() != 'sqlite' or not url.database or url.database == ':memory:':
        logger.warning("Backups are only supported for file-based SQLite databases")
        return None

    db_path = Path(url.database)
    if not db_path.exists():
        logger.warning("Database file does not exist, cannot create backup")
        return None

    BACKUP_DIR.mkdir(exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = BACKUP_DIR / f"lyricmatch_backup_{timestamp}.db"

    try:
        shutil.copy2(db_path, backup_path)
        logger.info(f"Database backed up to: {backup_path}")
        return str(backup_path)
    except Exception as e:
        logger.error(f"Error creating backup: {e}")
        return None

def _user_to_dict(user):
    return {
        'user_id': user.user_id,
        'username': user.username,
        'failed_attempts': user.failed_attempts,
        'locked_until': user.locked_until,
        'favorites_private': bool(user.favorites_private),
        'created_at': user.created_at,
    }

def _song_to_dict(song, username, rank=None):
    data = {
        'username': username,
        'song_id': song.song_id,
        'lyrics': song.lyrics,
    }
    for field in SONG_FIELDS:
        data[field] = getattr(song, field)
    if rank is not None:
        data['rank'] = rank
    return data

def _find_user(session, username):
    return session.execute(select(User).where(User.username == username)).scalar_one_or_none()

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def create_user(username, password_hash):
    """
    Create a new user.

    Returns:
        int or None: New user ID, None if the username is taken or the insert failed
    """
    session = get_db_session()
    try:
        if _find_user(session, username):
            logger.warning(f"User {username} already exists")
            return None

        user = User(username=username, password_hash=password_hash)
        session.add(user)
        session.commit()
        logger.info(f"Created user: {username} (ID: {user.user_id})")
        return user.user_id
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        session.rollback()
        return None
    finally:
        session.close()

def get_user(username):
    """
    Get a user's public account state by username.
    """
    session = get_db_session()
    try:
        user = _find_user(session, username)
        return _user_to_dict(user) if user else None
    except Exception as e:
        logger.error(f"Error fetching user {username}: {e}")
        return None
    finally:
        session.close()

def user_exists(username):
    return get_user(username) is not None

def delete_user(username):
    """
    Delete a user together with their favorites and word cloud songs.
    """
    session = get_db_session()
    try:
        user = _find_user(session, username)
        if not user:
            return False
        session.delete(user)
        session.commit()
        logger.info(f"Deleted user {username}")
        return True
    except Exception as e:
        logger.error(f"Error deleting user {username}: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def search_usernames_by_prefix(prefix):
    """
    Case-insensitive prefix search over usernames.

    Returns:
        list: Matching usernames sorted case-insensitively
    """
    escaped = (prefix or '').lower().replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    session = get_db_session()
    try:
        stmt = select(User.username).where(func.lower(User.username).like(f"{escaped}%", escape='\\'))
        usernames = session.execute(stmt).scalars().all()
        return sorted(usernames, key=lambda name: (name.lower(), name))
    except Exception as e:
        logger.error(f"Error searching usernames: {e}")
        return []
    finally:
        session.close()

def set_favorites_privacy(username, is_private):
    session = get_db_session()
    try:
        stmt = (
            update(User)
            .where(User.username == username)
            .values(favorites_private=bool(is_private))
        )
        result = session.execute(stmt)
        session.commit()
        logger.info(f"Set favorites_private={bool(is_private)} for {username}")
        return result.rowcount > 0
    except Exception as e:
        logger.error(f"Error updating privacy for {username}: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def is_favorites_private(username):
    """
    Returns:
        bool or None: Privacy flag, None when the user does not exist
    """
    user = get_user(username)
    return user['favorites_private'] if user else None

# ---------------------------------------------------------------------------
# Ranked favorites
# ---------------------------------------------------------------------------

def _next_rank(session, user_id):
    highest = session.execute(
        select(func.coalesce(func.max(FavoriteSong.rank), 0)).where(FavoriteSong.user_id == user_id)
    ).scalar_one()
    return max(highest, 0) + 1

def _favorite_exists(session, user_id, song_id):
    stmt = select(FavoriteSong.favorite_id).where(and_(
        FavoriteSong.user_id == user_id,
        FavoriteSong.song_id == song_id
    ))
    return session.execute(stmt).first() is not None

def add_favorite(username, song_id, lyrics=None, **metadata):
    """
    Append a song to the bottom of a user's favorites.

    Args:
        username (str): Owner of the list
        song_id (str): Song identifier
        lyrics (str, optional): Lyrics text stored with the entry
        **metadata: title, artist_name, url, image_url, release_date

    Returns:
        int or None: Assigned rank, None if the user is unknown or the insert failed

    Raises:
        ConflictError: If the song is already in the user's favorites
    """
    for attempt in range(1, RANK_RETRIES + 1):
        session = get_db_session()
        try:
            user = _find_user(session, username)
            if not user:
                logger.warning(f"Cannot add favorite: user {username} not found")
                return None

            if _favorite_exists(session, user.user_id, song_id):
                raise ConflictError(f"Song {song_id} is already in {username}'s favorites")

            rank = _next_rank(session, user.user_id)
            song = FavoriteSong(
                user_id=user.user_id,
                song_id=song_id,
                lyrics=lyrics,
                rank=rank,
                **{field: metadata.get(field) for field in SONG_FIELDS}
            )
            session.add(song)
            session.commit()
            logger.info(f"Added song {song_id} for {username} with rank {rank}")
            return rank
        except ConflictError:
            session.rollback()
            raise
        except IntegrityError as e:
            session.rollback()
            # Either the song or the rank was taken by a concurrent writer
            logger.warning(f"Rank conflict adding {song_id} for {username} (attempt {attempt}): {e}")
            continue
        except Exception as e:
            logger.error(f"Error adding favorite {song_id} for {username}: {e}")
            session.rollback()
            return None
        finally:
            session.close()

    logger.error(f"Giving up adding favorite {song_id} for {username} after {RANK_RETRIES} attempts")
    return None

def remove_favorite(username, song_id):
    """
    Remove a song from a user's favorites. Remaining ranks are left as they are.
    """
    session = get_db_session()
    try:
        user = _find_user(session, username)
        if not user:
            return False

        stmt = delete(FavoriteSong).where(and_(
            FavoriteSong.user_id == user.user_id,
            FavoriteSong.song_id == song_id
        ))
        result = session.execute(stmt)
        session.commit()
        logger.info(f"Removed song {song_id} for {username}: {result.rowcount} row(s)")
        return result.rowcount > 0
    except Exception as e:
        logger.error(f"Error removing favorite {song_id} for {username}: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def list_favorites(username):
    """
    Get a user's favorites ordered by rank (1 first).

    A stored rank below 1 is reported as 1, unless rank 1 is already held by
    another entry; that case is logged as a data-integrity problem and the
    stored value is returned unchanged.
    """
    session = get_db_session()
    try:
        stmt = (
            select(FavoriteSong)
            .join(User, FavoriteSong.user_id == User.user_id)
            .where(User.username == username)
            .order_by(FavoriteSong.rank.asc())
        )
        songs = session.execute(stmt).scalars().all()

        taken = {song.rank for song in songs}
        favorites = []
        for song in songs:
            rank = song.rank
            if rank < 1:
                if 1 not in taken:
                    rank = 1
                    taken.add(1)
                else:
                    logger.error(
                        f"Data integrity: favorite {song.song_id} of {username} has rank {song.rank} "
                        f"and rank 1 is already taken"
                    )
            favorites.append(_song_to_dict(song, username, rank=rank))

        favorites.sort(key=lambda entry: entry['rank'])
        return favorites
    except Exception as e:
        logger.error(f"Error fetching favorites for {username}: {e}")
        return []
    finally:
        session.close()

def swap_ranks(username, rank1, rank2):
    """
    Exchange the positions of the favorites holding rank1 and rank2.

    The (user, rank) uniqueness constraint holds after every statement, so the
    entry at rank1 is parked on the sentinel -rank1 first. All three updates run
    in one transaction and each must touch exactly one row, otherwise the whole
    swap is rolled back.

    Returns:
        bool: True if the swap was committed
    """
    if rank1 == rank2 or rank1 < 1 or rank2 < 1:
        logger.warning(f"Rejected swap of ranks {rank1} and {rank2} for {username}")
        return False

    sentinel = -rank1
    session = get_db_session()
    try:
        user = _find_user(session, username)
        if not user:
            return False

        steps = ((rank1, sentinel), (rank2, rank1), (sentinel, rank2))
        for current, target in steps:
            stmt = (
                update(FavoriteSong)
                .where(and_(
                    FavoriteSong.user_id == user.user_id,
                    FavoriteSong.rank == current
                ))
                .values(rank=target)
            )
            result = session.execute(stmt)
            if result.rowcount != 1:
                raise LookupError(f"expected one favorite at rank {current}, found {result.rowcount}")

        session.commit()
        logger.info(f"Swapped ranks {rank1} and {rank2} for {username}")
        return True
    except Exception as e:
        logger.error(f"Error swapping ranks {rank1} and {rank2} for {username}: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def find_usernames_by_song_id(song_id):
    """
    Get the usernames of every user who favorited a song, with their privacy flag.

    Returns:
        list: (username, favorites_private) tuples sorted by username
    """
    session = get_db_session()
    try:
        stmt = (
            select(User.username, User.favorites_private)
            .join(FavoriteSong, FavoriteSong.user_id == User.user_id)
            .where(FavoriteSong.song_id == song_id)
            .order_by(User.username)
        )
        return [(row.username, bool(row.favorites_private)) for row in session.execute(stmt).all()]
    except Exception as e:
        logger.error(f"Error fetching users for song {song_id}: {e}")
        return []
    finally:
        session.close()

def get_usernames_with_favorites():
    session = get_db_session()
    try:
        stmt = (
            select(User.username)
            .join(FavoriteSong, FavoriteSong.user_id == User.user_id)
            .distinct()
            .order_by(User.username)
        )
        return list(session.execute(stmt).scalars().all())
    except Exception as e:
        logger.error(f"Error fetching users with favorites: {e}")
        return []
    finally:
        session.close()

# ---------------------------------------------------------------------------
# Word cloud songs
# ---------------------------------------------------------------------------

def add_songs_to_word_cloud(username, songs):
    """
    Add songs to a user's word cloud, skipping songs already present.

    Args:
        username (str): Owner of the word cloud
        songs (list): Dicts with song_id, lyrics and optional display metadata

    Returns:
        bool: True if the batch was stored
    """
    session = get_db_session()
    try:
        user = _find_user(session, username)
        if not user:
            logger.warning(f"Cannot add word cloud songs: user {username} not found")
            return False

        existing = set(session.execute(
            select(WordCloudSong.song_id).where(WordCloudSong.user_id == user.user_id)
        ).scalars().all())

        added = 0
        for song in songs:
            song_id = song.get('song_id')
            if not song_id or song_id in existing:
                continue
            session.add(WordCloudSong(
                user_id=user.user_id,
                song_id=song_id,
                lyrics=song.get('lyrics'),
                **{field: song.get(field) for field in SONG_FIELDS}
            ))
            existing.add(song_id)
            added += 1

        session.commit()
        logger.info(f"Added {added} word cloud song(s) for {username}")
        return True
    except Exception as e:
        logger.error(f"Error adding word cloud songs for {username}: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def get_word_cloud(username):
    session = get_db_session()
    try:
        stmt = (
            select(WordCloudSong)
            .join(User, WordCloudSong.user_id == User.user_id)
            .where(User.username == username)
            .order_by(WordCloudSong.wordcloud_id)
        )
        return [_song_to_dict(song, username) for song in session.execute(stmt).scalars().all()]
    except Exception as e:
        logger.error(f"Error fetching word cloud for {username}: {e}")
        return []
    finally:
        session.close()

def remove_from_word_cloud(username, song_id):
    session = get_db_session()
    try:
        user = _find_user(session, username)
        if not user:
            return False

        stmt = delete(WordCloudSong).where(and_(
            WordCloudSong.user_id == user.user_id,
            WordCloudSong.song_id == song_id
        ))
        result = session.execute(stmt)
        session.commit()
        return result.rowcount > 0
    except Exception as e:
        logger.error(f"Error removing {song_id} from word cloud of {username}: {e}")
        session.rollback()
        return False
    finally:
        session.close()

def clear_word_cloud(username):
    """
    Remove every song from a user's word cloud.

    Returns:
        bool: True if at least one song was removed
    """
    session = get_db_session()
    try:
        user = _find_user(session, username)
        if not user:
            return False

        result = session.execute(delete(WordCloudSong).where(WordCloudSong.user_id == user.user_id))
        session.commit()
        if result.rowcount > 0:
            logger.info(f"Cleared {result.rowcount} word cloud song(s) for {username}")
        return result.rowcount > 0
    except Exception as e:
        logger.error(f"Error clearing word cloud for {username}: {e}")
        session.rollback()
        return False
    finally:
        session.close()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
