# Importing both modules registers every mapper before the first query
from app.models.note import Note, note_tags
from app.models.tag import Tag

__all__ = ["Note", "Tag", "note_tags"]
