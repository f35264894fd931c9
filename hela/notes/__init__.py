"""Note import module."""

from hela.notes.importer import NoteCategory, NoteDraft, NoteFormat, NoteImporter

__all__ = ["NoteCategory", "NoteDraft", "NoteFormat", "NoteImporter"]
