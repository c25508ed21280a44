#!/usr/bin/env python3
"""
User Inspection Script

Prints a user's ranked favorites, the top words of their lyric profile and
their lyrical soulmate / enemy.

Usage:
    python scripts/inspect_user.py <username> [--top 15]
"""

import sys
import argparse
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config.database import get_user, list_favorites
from config.settings import LOG_FORMAT
from utils.errors import LyricMatchError
from utils.word_profile import build_profile
from webapp.services.comparison_service import find_lyrical_matches

def print_favorites(favorites):
    print(f"\nFavorites ({len(favorites)}):")
    for song in favorites:
        print(f"   {song['rank']:>3}. {song['title'] or song['song_id']} - {song['artist_name'] or 'unknown artist'}")

def print_profile(favorites, top):
    profile = build_profile(favorites)
    words = sorted(profile.items(), key=lambda item: (-item[1], item[0]))[:top]
    print(f"\nTop {len(words)} lyric words:")
    for word, count in words:
        print(f"   {word:<20} {count}")

def main():
    parser = argparse.ArgumentParser(description="Inspect a user's favorites and lyric matches")
    parser.add_argument("username")
    parser.add_argument("--top", type=int, default=15, help="Number of profile words to show")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)

    user = get_user(args.username)
    if not user:
        print(f"User {args.username} not found")
        sys.exit(1)

    print(f"User: {user['username']} (ID {user['user_id']})")
    print(f"   Favorites private: {user['favorites_private']}")
    print(f"   Failed attempts:   {user['failed_attempts']}")
    print(f"   Locked until:      {user['locked_until'] or '-'}")

    favorites = list_favorites(args.username)
    print_favorites(favorites)
    print_profile(favorites, args.top)

    try:
        matches = find_lyrical_matches(args.username)
    except LyricMatchError as e:
        print(f"\nCould not compute matches: {e}")
        return

    print("\nLyrical matches:")
    for label, match in (("Soulmate", matches.soulmate), ("Enemy", matches.enemy)):
        if match:
            mutual = " (mutual)" if match.mutual else ""
            print(f"   {label}: {match.username} score {match.score}{mutual}")
        else:
            print(f"   {label}: -")

if __name__ == "__main__":
    main()
