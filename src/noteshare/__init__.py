"""
NoteShare Backend - Collaborative Note Sharing Service

Permissioned notes with owner / shared-read / shared-write / public-read
access, plus scoped full-text search.
"""

__version__ = "1.0.0"
