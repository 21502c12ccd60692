"""Application settings supplying creation-time defaults for new games."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from wpstat_events.models import StorageError

logger = logging.getLogger("wpstat_events.settings")


class AppSettings(BaseModel):
    """User-level defaults applied when a CreateGameArgs field is unset."""

    model_config = ConfigDict(frozen=True)

    default_periods: int = Field(4, ge=1)
    default_overtime_periods: int = Field(2, ge=0)
    default_shootout_enabled: bool = False
    auto_shot_on_goal: bool = True
    track_opponent_players: bool = False


def load_settings(path: Path) -> AppSettings:
    """Load settings from a JSON file, falling back to defaults.

    Keys missing from the file keep their default values. A file that
    cannot be read or parsed is logged and ignored.
    """
    path = Path(path)
    if not path.exists():
        return AppSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return AppSettings.model_validate(data)
    except (OSError, ValueError, PydanticValidationError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return AppSettings()


def save_settings(settings: AppSettings, path: Path) -> None:
    """Write settings to a JSON file, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")
    except OSError as exc:
        raise StorageError(f"Failed to write settings to {path}: {exc}") from exc
