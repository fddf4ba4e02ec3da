"""Editor-wide UI state passed explicitly to every screen."""

from __future__ import annotations

from pydantic import BaseModel

from pagecraft.content.models import Locale


class EditorUIState(BaseModel):
    """Language toggle, preview locale and modal flags for one editor."""

    locale: Locale = Locale.MN
    preview_locale: Locale = Locale.MN
    open_modal: str | None = None
    editing_section: str | None = None

    def toggle_locale(self) -> Locale:
        self.locale = self.locale.other
        return self.locale

    def toggle_preview(self) -> Locale:
        self.preview_locale = self.preview_locale.other
        return self.preview_locale

    def open(self, modal: str, section: str | None = None) -> None:
        self.open_modal = modal
        self.editing_section = section

    def close(self) -> None:
        self.open_modal = None
        self.editing_section = None

    @property
    def modal_open(self) -> bool:
        return self.open_modal is not None
