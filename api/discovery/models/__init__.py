"""Domain enumerations for the discovery pipeline."""
from discovery.models.discovery import Branch, ContentType, MediaKind, Mood, PersonRole, SortOrder

__all__ = ["Branch", "ContentType", "MediaKind", "Mood", "PersonRole", "SortOrder"]
