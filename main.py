#!/usr/bin/env python3
"""
Lyric Match - Main Entry Point

Runs the Flask web application serving favorites, word clouds and lyric comparisons.

Usage:
    python main.py
"""

import argparse
import logging

from config.settings import LOG_LEVEL, LOG_FORMAT

def main():
    parser = argparse.ArgumentParser(description="Lyric Match API")

    parser.add_argument("--host", default="0.0.0.0", help="Web app host")
    parser.add_argument("--port", type=int, default=5000, help="Web app port")
    parser.add_argument("--database-url", default=None, help="SQLAlchemy database URL")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else LOG_LEVEL, format=LOG_FORMAT)

    from webapp.app import create_app
    app = create_app(database_url=args.database_url)
    logger = logging.getLogger(__name__)
    logger.info(f"Starting Lyric Match API at http://{args.host}:{args.port} (debug {'ON' if args.debug else 'OFF'})")
    app.run(host=args.host, port=args.port, debug=args.debug)

if __name__ == "__main__":
    main()
