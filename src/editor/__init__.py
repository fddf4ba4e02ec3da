"""Editing engine: session, autosave, validation gate and editor facade."""

from pagecraft.editor.autosave import AutosavePolicy, AutosaveState, UnloadGuard
from pagecraft.editor.services import Editor, EditorProps
from pagecraft.editor.session import EditSession
from pagecraft.editor.ui_state import EditorUIState
from pagecraft.editor.validation import validate

__all__ = [
    "AutosavePolicy",
    "AutosaveState",
    "EditSession",
    "Editor",
    "EditorProps",
    "EditorUIState",
    "UnloadGuard",
    "validate",
]
