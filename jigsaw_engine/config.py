from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .layout import DIFFICULTY_LEVELS


class Settings(BaseSettings):
    """Engine settings configuration."""

    # Canvas and assembled puzzle size, in pixels
    CANVAS_WIDTH: int = 1050
    CANVAS_HEIGHT: int = 700
    PUZZLE_WIDTH: int = 900
    PUZZLE_HEIGHT: int = 600

    # Piece shape settings
    TAB_SIZE: float = 20.0  # percent, 10-30
    JITTER: float = 4.0  # percent, 0-13
    DEFAULT_DIFFICULTY: str = "medium"
    POINTS_PER_CURVE: int = 20

    # Interaction settings
    SNAP_THRESHOLD: float = 16.0  # pixels at zoom 1.0
    SNAP_POLICY: str = "first"  # "first" or "nearest"
    ZOOM_STEP: float = 0.1
    ZOOM_LEVELS: int = 7

    LOG_LEVEL: str = "INFO"

    class Config:
        """Pydantic configuration class."""

        case_sensitive = True
        env_file = ".env"

    @field_validator("SNAP_POLICY")
    @classmethod
    def validate_snap_policy(cls, v: str) -> str:
        """Only the two known candidate policies are accepted."""
        if v not in ("first", "nearest"):
            raise ValueError(f"SNAP_POLICY must be 'first' or 'nearest', got '{v}'")
        return v

    @field_validator("DEFAULT_DIFFICULTY")
    @classmethod
    def validate_difficulty(cls, v: str) -> str:
        if v not in DIFFICULTY_LEVELS:
            raise ValueError(f"DEFAULT_DIFFICULTY must be one of {', '.join(DIFFICULTY_LEVELS)}, got '{v}'")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
