from unittest.mock import MagicMock, patch

import requests

from webapp.services import lyrics_service
from webapp.services.lyrics_service import LYRICS_UNKNOWN, extract_lyrics, fetch_lyrics, search_songs

SONG_PAGE = """
<html><body>
  <div data-lyrics-container="true">First line<br/>Second <i>line</i></div>
  <div class="ad">Buy now</div>
  <div data-lyrics-container="true">Chorus line</div>
</body></html>
"""

SEARCH_PAYLOAD = {
    'response': {
        'hits': [
            {
                'type': 'song',
                'result': {
                    'id': 42,
                    'title': "Midnight City",
                    'primary_artist': {'name': "M83"},
                    'url': "https://genius.com/m83-midnight-city-lyrics",
                    'song_art_image_thumbnail_url': "https://images/42.jpg",
                    'release_date_for_display': "August 16, 2011",
                },
            },
            {'type': 'album', 'result': {'id': 7}},
        ]
    }
}


def _response(text='', payload=None, status_error=None):
    resp = MagicMock()
    resp.text = text
    resp.json.return_value = payload
    if status_error:
        resp.raise_for_status.side_effect = status_error
    return resp


def test_extract_lyrics_joins_containers():
    assert extract_lyrics(SONG_PAGE) == "First line\nSecond line\nChorus line"


def test_extract_lyrics_legacy_layout():
    assert extract_lyrics('<div class="lyrics">Old page</div>') == "Old page"


def test_extract_lyrics_without_lyrics():
    assert extract_lyrics("<html><p>nothing here</p></html>") is None


def test_fetch_lyrics_success():
    with patch.object(lyrics_service.requests, 'get', return_value=_response(SONG_PAGE)) as get:
        assert fetch_lyrics("https://genius.com/song") == "First line\nSecond line\nChorus line"
    assert get.call_args[0][0] == "https://genius.com/song"


def test_fetch_lyrics_falls_back_to_unknown():
    with patch.object(lyrics_service.requests, 'get', side_effect=requests.ConnectionError("down")):
        assert fetch_lyrics("https://genius.com/song") == LYRICS_UNKNOWN

    error = requests.HTTPError("404")
    with patch.object(lyrics_service.requests, 'get', return_value=_response(status_error=error)):
        assert fetch_lyrics("https://genius.com/song") == LYRICS_UNKNOWN

    with patch.object(lyrics_service.requests, 'get', return_value=_response("<p>no lyrics</p>")):
        assert fetch_lyrics("https://genius.com/song") == LYRICS_UNKNOWN

    assert fetch_lyrics("") == LYRICS_UNKNOWN


def test_search_songs_maps_hits():
    with patch.object(lyrics_service.requests, 'get', return_value=_response(payload=SEARCH_PAYLOAD)) as get:
        songs = search_songs("midnight", access_token="token")

    assert songs == [{
        'song_id': "42",
        'title': "Midnight City",
        'artist_name': "M83",
        'url': "https://genius.com/m83-midnight-city-lyrics",
        'image_url': "https://images/42.jpg",
        'release_date': "August 16, 2011",
    }]
    assert get.call_args.kwargs['params'] == {'q': "midnight"}
    assert get.call_args.kwargs['headers']['Authorization'] == "Bearer token"


def test_search_songs_without_token(monkeypatch):
    monkeypatch.setattr(lyrics_service, 'GENIUS_ACCESS_TOKEN', None)
    with patch.object(lyrics_service.requests, 'get') as get:
        assert search_songs("midnight") == []
    get.assert_not_called()


def test_search_songs_network_error():
    with patch.object(lyrics_service.requests, 'get', side_effect=requests.Timeout("slow")):
        assert search_songs("midnight", access_token="token") == []
