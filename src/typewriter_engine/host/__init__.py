"""Host editor boundary and the in-process host implementation."""

from .memory import EditRecord, MemoryHost
from .protocol import Decoration, DocumentInfo, EditorHost, EditorRef

__all__ = [
    "Decoration",
    "DocumentInfo",
    "EditRecord",
    "EditorHost",
    "EditorRef",
    "MemoryHost",
]
