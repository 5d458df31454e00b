"""Vault access: note model, provider contract and filesystem implementation."""

from bases_bridge.vault.file_vault import FileVault
from bases_bridge.vault.metadata import extract_links, extract_tags
from bases_bridge.vault.models import Note
from bases_bridge.vault.provider import FrontmatterMutator, NoteProvider

__all__ = [
    "FileVault",
    "FrontmatterMutator",
    "Note",
    "NoteProvider",
    "extract_links",
    "extract_tags",
]
