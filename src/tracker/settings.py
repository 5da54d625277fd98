"""Runtime configuration for the replay and bot scripts via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class ReplaySettings(BaseSettings):
    model_config = {"env_prefix": "TRACKER_"}

    player_id: int = Field(default=0, ge=0, le=3)
    log_dir: str = "logs/tracker"
    strict: bool = True
    check_reactions: bool = True
    max_steps: int = 100_000
