"""
Flask web application for the lyric match service.
"""
