"""
Service layer: authentication, favorites, word cloud, comparison and lyrics lookup.
"""
