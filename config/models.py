"""
SQLAlchemy ORM Models
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class User(Base):
    __tablename__ = 'users'

    user_id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    failed_attempts = Column(Integer, nullable=False, default=0)
    locked_until = Column(DateTime)
    favorites_private = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    favorites = relationship("FavoriteSong", back_populates="user", cascade="all, delete-orphan")
    wordcloud_songs = relationship("WordCloudSong", back_populates="user", cascade="all, delete-orphan")

class FavoriteSong(Base):
    __tablename__ = 'favorites'
    __table_args__ = (
        UniqueConstraint('user_id', 'song_id', name='uq_favorites_user_song'),
        # Checked per statement, which is why rank swaps go through a sentinel
        UniqueConstraint('user_id', 'rank', name='uq_favorites_user_rank'),
    )

    favorite_id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.user_id'), nullable=False)
    song_id = Column(String, nullable=False)
    title = Column(String)
    artist_name = Column(String)
    url = Column(String)
    image_url = Column(String)
    release_date = Column(String)
    lyrics = Column(Text)
    rank = Column(Integer, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="favorites")

class WordCloudSong(Base):
    __tablename__ = 'wordcloud_songs'
    __table_args__ = (
        UniqueConstraint('user_id', 'song_id', name='uq_wordcloud_user_song'),
    )

    wordcloud_id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.user_id'), nullable=False)
    song_id = Column(String, nullable=False)
    title = Column(String)
    artist_name = Column(String)
    url = Column(String)
    image_url = Column(String)
    release_date = Column(String)
    lyrics = Column(Text)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="wordcloud_songs")
