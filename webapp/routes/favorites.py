"""
Favorites Routes

Ranked favorites, privacy settings and per-user word maps.
"""

from flask import Blueprint, jsonify, request

from utils.errors import ValidationError
from webapp.routes import current_requester, json_body, require_fields, parse_bool
from webapp.services import favorite_service
from webapp.services.comparison_service import get_all_word_maps

favorites_bp = Blueprint('favorites', __name__, url_prefix='/api/favorites')


@favorites_bp.route('/add', methods=['POST'])
def add_favorite():
    payload = json_body()
    require_fields(payload, 'username', 'song_id')
    rank = favorite_service.add_favorite(
        payload['username'],
        payload['song_id'],
        title=payload.get('title'),
        artist_name=payload.get('artist_name'),
        url=payload.get('url'),
        image_url=payload.get('image_url'),
        release_date=payload.get('release_date'),
        lyrics=payload.get('lyrics'),
    )
    return jsonify({'message': "Song added to favorites", 'rank': rank}), 201


@favorites_bp.route('/remove/<username>/<song_id>', methods=['DELETE'])
def remove_favorite(username, song_id):
    if favorite_service.remove_favorite(username, song_id):
        return jsonify({'message': "Song removed successfully."})
    return jsonify({'error': 'not_found', 'message': "Failed to remove song."}), 400


@favorites_bp.route('/swap', methods=['POST'])
def swap_ranks():
    payload = json_body()
    require_fields(payload, 'username', 'rank1', 'rank2')
    try:
        rank1, rank2 = int(payload['rank1']), int(payload['rank2'])
    except (TypeError, ValueError):
        raise ValidationError("rank1 and rank2 must be integers")

    if favorite_service.swap_ranks(payload['username'], rank1, rank2):
        return jsonify({'message': "Swap successful."})
    return jsonify({'error': 'swap_failed', 'message': "Failed to swap ranks."}), 400


@favorites_bp.route('/privacy/<username>', methods=['GET'])
def get_privacy(username):
    is_private = favorite_service.get_favorites_privacy(username, current_requester())
    return jsonify({'username': username, 'private': is_private})


@favorites_bp.route('/privacy/<username>', methods=['POST'])
def update_privacy(username):
    payload = json_body()
    value = payload.get('private', request.args.get('private'))
    if value is None:
        raise ValidationError("Missing required field(s): private")
    is_private = favorite_service.set_favorites_privacy(username, parse_bool(value))
    return jsonify({'username': username, 'private': is_private})


@favorites_bp.route('/all-wordmaps', methods=['GET'])
def all_word_maps():
    return jsonify(get_all_word_maps(current_requester()))


@favorites_bp.route('/<username>', methods=['GET'])
def get_favorites(username):
    return jsonify(favorite_service.get_favorites(username, current_requester()))
