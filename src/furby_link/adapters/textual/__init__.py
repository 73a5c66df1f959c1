"""Textual demo host for the furby link."""

from .controller import TextualEditorHost, TextualHostHooks, TextualLinkAdapter

__all__ = ["TextualEditorHost", "TextualHostHooks", "TextualLinkAdapter"]
