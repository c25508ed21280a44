"""
Word Cloud Routes
"""

from flask import Blueprint, jsonify

from webapp.routes import json_body, require_fields
from webapp.services import wordcloud_service

wordcloud_bp = Blueprint('wordcloud', __name__, url_prefix='/api/wordcloud')


@wordcloud_bp.route('/add', methods=['POST'])
def add_songs():
    payload = json_body()
    require_fields(payload, 'username', 'songs')
    if wordcloud_service.add_to_word_cloud(payload['username'], payload['songs']):
        return jsonify({'message': "Word cloud songs saved successfully."})
    return jsonify({'error': 'persistence_error', 'message': "Failed to save word cloud songs."}), 500


@wordcloud_bp.route('/<username>', methods=['GET'])
def get_word_cloud(username):
    return jsonify(wordcloud_service.get_word_cloud(username))


@wordcloud_bp.route('/<username>/profile', methods=['GET'])
def get_profile(username):
    return jsonify(wordcloud_service.get_word_cloud_profile(username))


@wordcloud_bp.route('/remove/<username>/<song_id>', methods=['DELETE'])
def remove_song(username, song_id):
    if wordcloud_service.remove_from_word_cloud(username, song_id):
        return jsonify({'message': "Removed from word cloud."})
    return jsonify({'error': 'not_found', 'message': "Failed to remove."}), 400


@wordcloud_bp.route('/clear/<username>', methods=['DELETE'])
def clear(username):
    if wordcloud_service.clear_word_cloud(username):
        return jsonify({'message': "Word cloud cleared."})
    return jsonify({'error': 'not_found', 'message': "Failed to clear."}), 400
