"""Persisted user settings read by the engine."""

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Optional

from ..config import DEFAULT_PROVIDER, get_settings_path
from ..utils.logging import get_logger
from .models import Provider

logger = get_logger(__name__)


def _default_provider() -> Provider:
    try:
        return Provider.parse(DEFAULT_PROVIDER)
    except ValueError:
        logger.warning(f"Unknown default provider '{DEFAULT_PROVIDER}', using LRCLib")
        return Provider.LRCLIB


@dataclass
class UserSettings:
    """Provider choice and lyrics feature toggles."""

    selected_provider: Provider = field(default_factory=_default_provider)
    include_translation: bool = False
    include_romanization: bool = False
    multi_person_word_by_word: bool = False
    unsynced_fallback: bool = False
    translation_language: str = "en"

    def __post_init__(self):
        if not isinstance(self.selected_provider, Provider):
            self.selected_provider = Provider.parse(str(self.selected_provider))


class SettingsStore:
    """Loads and saves UserSettings as JSON.

    A missing or unreadable file yields default settings.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_settings_path()
        self.settings = self.load()

    def load(self) -> UserSettings:
        if not self.path.exists():
            return UserSettings()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            known = {f.name for f in fields(UserSettings)}
            return UserSettings(**{k: v for k, v in data.items() if k in known})
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return UserSettings()

    def save(self) -> None:
        data = asdict(self.settings)
        data["selected_provider"] = self.settings.selected_provider.value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not save settings to {self.path}: {e}")

    def update_selected_provider(self, provider: Provider) -> None:
        self.settings.selected_provider = provider
        self.save()
