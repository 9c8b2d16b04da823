from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # visible window of the day grid (hours, end is exclusive)
    DAY_START_HOUR: int = 9
    DAY_END_HOUR: int = 23

    SEAT_LABEL_PREFIX: str = "S-"

    # snapping granularity in minutes
    EDIT_SNAP_MINUTES: int = 5     # time edits in dialogs
    SLOT_SNAP_MINUTES: int = 30    # clicks on empty grid cells

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SIMCAL_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_window(self) -> "Settings":
        if self.DAY_END_HOUR <= self.DAY_START_HOUR:
            raise ValueError("DAY_END_HOUR must be after DAY_START_HOUR")
        return self


settings = Settings()
