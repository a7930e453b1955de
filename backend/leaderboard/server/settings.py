"""Leaderboard server and player store configuration via environment variables."""

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from backdrop.logic.cards import COMPACT_BREAKPOINT_PX, TICK_INTERVAL_SECONDS
from shared.validators import StringListEnvSettingsSource, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class LeaderboardServerSettings(BaseSettings):
    model_config = {"env_prefix": "LEADERBOARD_"}

    log_dir: str = "backend/logs/leaderboard"
    cors_origins: list[str] = []
    tick_interval_seconds: float = Field(default=TICK_INTERVAL_SECONDS, gt=0)
    breakpoint_px: int = Field(default=COMPACT_BREAKPOINT_PX, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v, allow_empty=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, StringListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings)


class StoreSettings(BaseSettings):
    """Endpoint and credential for the hosted player table."""

    model_config = {"env_prefix": "STORE_"}

    url: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    table: str = Field(default="players", min_length=1)
    timeout_seconds: float = Field(default=5.0, gt=0)
