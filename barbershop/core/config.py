from datetime import time

from pydantic_settings import BaseSettings, SettingsConfigDict

from barbershop.domain.entities.schedule_rules import ScheduleRules

_DEFAULT_RULES = ScheduleRules()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    BUSINESS_NAME: str = "Barbearia"
    BUSINESS_TIMEZONE: str = "America/Sao_Paulo"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    OPENING_TIME: time = _DEFAULT_RULES.opening_time
    WEEKDAY_CLOSING_TIME: time = _DEFAULT_RULES.weekday_closing_time
    SATURDAY_CLOSING_TIME: time = _DEFAULT_RULES.saturday_closing_time
    LUNCH_START: time = _DEFAULT_RULES.lunch_start
    LUNCH_END: time = _DEFAULT_RULES.lunch_end
    SLOT_STEP_MINUTES: int = _DEFAULT_RULES.slot_step_minutes
    CLOSED_WEEKDAYS: list[int] = sorted(_DEFAULT_RULES.closed_weekdays, reverse=True)  # Sunday, Monday
    BOOKING_WINDOW_DAYS: int = _DEFAULT_RULES.booking_window_days
    DEFAULT_APPOINTMENT_MINUTES: int = _DEFAULT_RULES.default_appointment_minutes

    ADMIN_EARLIEST_TIME: time = _DEFAULT_RULES.admin_earliest_time
    ADMIN_LATEST_TIME: time = _DEFAULT_RULES.admin_latest_time

    STORE_PROVIDER: str = "memory"  # "memory", "json", "firebase"
    DATA_FILE: str = "./data/store.json"
    FIREBASE_DATABASE_URL: str | None = None
    FIREBASE_AUTH_TOKEN: str | None = None
    FIREBASE_TIMEOUT_SECONDS: float = 10.0

    def schedule_rules(self) -> ScheduleRules:
        return ScheduleRules(
            opening_time=self.OPENING_TIME,
            weekday_closing_time=self.WEEKDAY_CLOSING_TIME,
            saturday_closing_time=self.SATURDAY_CLOSING_TIME,
            lunch_start=self.LUNCH_START,
            lunch_end=self.LUNCH_END,
            slot_step_minutes=self.SLOT_STEP_MINUTES,
            closed_weekdays=frozenset(self.CLOSED_WEEKDAYS),
            booking_window_days=self.BOOKING_WINDOW_DAYS,
            default_appointment_minutes=self.DEFAULT_APPOINTMENT_MINUTES,
            admin_earliest_time=self.ADMIN_EARLIEST_TIME,
            admin_latest_time=self.ADMIN_LATEST_TIME,
        )


settings = Settings()
