"""
Settings, ORM models and database access for the lyric match application.
"""
