"""Textual control panel for the typing engine."""

from .controller import DocumentView, TextualPanelAdapter, TextualPanelHooks

__all__ = ["DocumentView", "TextualPanelAdapter", "TextualPanelHooks"]
