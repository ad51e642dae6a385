from pydantic import BaseModel
import os


def _split_csv(value: str) -> frozenset[str]:
    return frozenset(part.strip() for part in value.split(",") if part.strip())


class Settings(BaseModel):
    vpic_base_url: str = os.getenv("VPIC_BASE_URL", "https://vpic.nhtsa.dot.gov/api")
    vpic_timeout: float = float(os.getenv("VPIC_TIMEOUT", "15.0"))
    vpic_max_attempts: int = int(os.getenv("VPIC_MAX_ATTEMPTS", "1"))
    vpic_backoff_base: float = float(os.getenv("VPIC_BACKOFF_BASE", "0.5"))
    decode_rate_limit_max_calls: int = int(os.getenv("DECODE_RATE_LIMIT_MAX_CALLS", "5"))
    decode_rate_limit_window_seconds: float = float(os.getenv("DECODE_RATE_LIMIT_WINDOW_SECONDS", "60"))
    known_orgs: frozenset[str] = _split_csv(os.getenv("KNOWN_ORGS", "Hondaorg,civichonda"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
