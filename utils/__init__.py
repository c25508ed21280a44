"""
Utility modules for the lyric match application.
"""

from .word_profile import tokenize, build_word_map, build_profile, similarity_score

__all__ = ['tokenize', 'build_word_map', 'build_profile', 'similarity_score']
