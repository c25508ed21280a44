"""
Lyrics Service

Searches songs through the Genius API and scrapes lyrics from song pages.
Network failures never propagate: searches return [] and lyrics fall back to
the "unknown" placeholder, which is stored and profiled like any other text.
"""

import logging
import requests
from bs4 import BeautifulSoup

from config.settings import GENIUS_ACCESS_TOKEN, GENIUS_API_URL, LYRICS_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

LYRICS_UNKNOWN = "unknown"

HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; LyricMatch/1.0)"}


def normalize_lyrics(lyrics):
    """
    Use the placeholder for missing or blank lyrics.
    """
    if lyrics is None or not str(lyrics).strip():
        return LYRICS_UNKNOWN
    return lyrics


def _hit_to_song(hit):
    result = hit.get("result") or {}
    return {
        "song_id": str(result.get("id")),
        "title": result.get("title"),
        "artist_name": (result.get("primary_artist") or {}).get("name"),
        "url": result.get("url"),
        "image_url": result.get("song_art_image_thumbnail_url"),
        "release_date": result.get("release_date_for_display"),
    }


def search_songs(query, access_token=None):
    """
    Search songs by free-text query.

    Returns:
        list: Song dicts (song_id, title, artist_name, url, image_url, release_date)
    """
    token = access_token or GENIUS_ACCESS_TOKEN
    if not token:
        logger.error("Genius token not configured. Set GENIUS_ACCESS_TOKEN environment variable.")
        return []

    try:
        resp = requests.get(
            f"{GENIUS_API_URL}/search",
            params={"q": query},
            headers={"Authorization": f"Bearer {token}"},
            timeout=LYRICS_REQUEST_TIMEOUT,
        )
        resp.raise_for_status()
        hits = resp.json().get("response", {}).get("hits", [])
        return [_hit_to_song(hit) for hit in hits if hit.get("type", "song") == "song"]
    except Exception as e:
        logger.warning(f"Genius search failed for '{query}': {e}")
        return []


def extract_lyrics(html_content):
    """
    Pull the lyric text out of a song page.

    Returns:
        str or None: Lyrics with one line per verse line, None if no lyrics were found
    """
    soup = BeautifulSoup(html_content, "html.parser")
    containers = soup.select("[data-lyrics-container='true']")
    if not containers:
        # Older page layout
        containers = soup.select("div.lyrics")

    lines = []
    for container in containers:
        for br in container.find_all("br"):
            br.replace_with("\n")
        lines.append(container.get_text())

    text = "\n".join(lines).strip()
    return text or None


def fetch_lyrics(song_url):
    """
    Download and extract the lyrics of a song page.

    Returns:
        str: Lyrics text, or LYRICS_UNKNOWN if they could not be retrieved
    """
    if not song_url:
        return LYRICS_UNKNOWN

    try:
        resp = requests.get(song_url, headers=HEADERS, timeout=LYRICS_REQUEST_TIMEOUT)
        resp.raise_for_status()
    except Exception as e:
        logger.warning(f"Could not fetch lyrics page {song_url}: {e}")
        return LYRICS_UNKNOWN

    lyrics = extract_lyrics(resp.text)
    if lyrics is None:
        logger.warning(f"No lyrics found on {song_url}")
    return normalize_lyrics(lyrics)
