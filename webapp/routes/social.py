"""
Social Routes

User search, "who else favorited this", comparisons, lyrical matches and song lookup.
"""

from flask import Blueprint, jsonify, request

from utils.errors import ValidationError
from webapp.routes import current_requester, json_body, require_fields
from webapp.services import comparison_service, lyrics_service

social_bp = Blueprint('social', __name__)


@social_bp.route('/users/search', methods=['GET'])
def search_users():
    prefix = request.args.get('prefix', '')
    return jsonify(comparison_service.search_users_by_prefix(prefix, current_requester()))


@social_bp.route('/songs/<song_id>/friends', methods=['GET'])
def song_friends(song_id):
    requester = request.args.get('user') or current_requester()
    if not requester:
        raise ValidationError("Missing required parameter: user")
    return jsonify(comparison_service.get_favoriters_of(song_id, requester))


@social_bp.route('/api/compare', methods=['POST'])
def compare():
    payload = json_body()
    require_fields(payload, 'requester', 'users')
    if not isinstance(payload['users'], list):
        raise ValidationError("users must be a list of usernames")
    result = comparison_service.compare(
        payload['requester'],
        payload['users'],
        payload.get('collection', comparison_service.FAVORITES),
    )
    return jsonify(result.to_dict())


@social_bp.route('/api/matches/<username>', methods=['GET'])
def lyrical_matches(username):
    collection = request.args.get('collection', comparison_service.FAVORITES)
    return jsonify(comparison_service.find_lyrical_matches(username, collection).to_dict())


@social_bp.route('/api/genius/search', methods=['GET'])
def genius_search():
    query = request.args.get('q', '').strip()
    if not query:
        raise ValidationError("Missing required parameter: q")
    return jsonify(lyrics_service.search_songs(query))


@social_bp.route('/api/genius/lyrics', methods=['GET'])
def genius_lyrics():
    url = request.args.get('url', '').strip()
    if not url:
        raise ValidationError("Missing required parameter: url")
    return jsonify({'url': url, 'lyrics': lyrics_service.fetch_lyrics(url)})
