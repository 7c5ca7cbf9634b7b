import logging
from typing import Any, ClassVar, FrozenSet

from pydantic_settings import BaseSettings, SettingsConfigDict

_logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Application
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # Environment
    # Suggested values: dev|staging|prod.
    ENV: str = "dev"

    # Observability
    METRICS_ENABLED: bool = True

    # Netting engine
    NETTING_ENABLED: bool = True
    # Maximum number of edges in an enumerated cycle.
    NETTING_MAX_CYCLE_LENGTH: int = 4
    # Hard cap on cycles discovered per SCC (counted before rotation dedup).
    NETTING_MAX_CYCLES: int = 10_000
    # Wall-clock budget for a whole netting run; 0 disables the deadline.
    NETTING_TIMEOUT_MS: int = 0
    # Canonicalize cycles by rotation and process each geometric cycle once.
    NETTING_DEDUPLICATE_ROTATIONS: bool = True
    # Upper bound on intents accepted by one netting run.
    NETTING_MAX_INTENTS: int = 10_000

    # Rate limiting (in-memory, best-effort)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 60
    RATE_LIMIT_REQUESTS_PER_WINDOW: int = 120

    # --- Guardrails ---
    _POSITIVE_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {
            "NETTING_MAX_CYCLE_LENGTH",
            "NETTING_MAX_CYCLES",
            "NETTING_MAX_INTENTS",
            "RATE_LIMIT_WINDOW_SECONDS",
            "RATE_LIMIT_REQUESTS_PER_WINDOW",
        }
    )

    def model_post_init(self, __context: Any) -> None:
        # Runs on every Settings() instantiation (including module-level `settings = Settings()`).
        self._guardrail_netting_bounds()

    def _guardrail_netting_bounds(self) -> None:
        """Fail-fast on bounds that would make cycle enumeration unbounded or empty."""
        problems = sorted(name for name in self._POSITIVE_FIELDS if int(getattr(self, name)) < 1)
        if self.NETTING_TIMEOUT_MS < 0:
            problems.append("NETTING_TIMEOUT_MS")

        if problems:
            fields = ", ".join(problems)
            raise RuntimeError(
                "Refusing to start with non-positive netting/rate-limit bounds: "
                f"{fields}. "
                "Set positive values via environment variables "
                "(NETTING_TIMEOUT_MS may be 0 to disable the deadline)."
            )

        if self.NETTING_MAX_CYCLE_LENGTH > 8:
            _logger.warning(
                "event=config.netting_max_cycle_length_high value=%s",
                self.NETTING_MAX_CYCLE_LENGTH,
            )


settings = Settings()


def get_settings() -> Settings:
    """Return the global settings instance.

    Provided as a callable for FastAPI Depends() and test mocking convenience.
    """
    return settings
