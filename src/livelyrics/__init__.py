"""Live lyrics: follow the playing song and keep synced lyrics in step."""

__version__ = "0.1.0"
