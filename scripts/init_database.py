#!/usr/bin/env python3
"""
Database Initialization Script

Run this script to create the database tables.
"""

import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config.database import configure_database, init_database, backup_database
from config.settings import LOG_LEVEL, LOG_FORMAT

def main():
    """Initialize the database and create a backup."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    print("Initializing Lyric Match Database...")
    print("=" * 50)

    try:
        configure_database(sys.argv[1] if len(sys.argv) > 1 else None)
        init_database()
        print("Database initialized successfully!")

        backup_path = backup_database()
        if backup_path:
            print(f"Initial backup created: {backup_path}")
        else:
            print("Could not create initial backup")

        print("\nDatabase Structure:")
        print("   - users: Accounts, login lockout state and privacy flag")
        print("   - favorites: Ranked favorite songs with lyrics")
        print("   - wordcloud_songs: Songs selected for word clouds")

    except Exception as e:
        print(f"Error initializing database: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
