import os
import yaml
from typing import Optional
from pydantic import BaseModel

# Hardcoded fallback when neither the request nor INTERVIEW_MODEL names a model
DEFAULT_MODEL = "llama-3.3-70b-versatile"
GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"

# Load model catalog
MODELS_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "models.yml")
with open(MODELS_CONFIG_PATH, "r") as f:
    models_config = yaml.safe_load(f)

MODEL_CATALOG = models_config["available_models"]
MODEL_USAGE = models_config["usage"]


class Settings(BaseModel):
    groq_api_key: str = ""
    interview_model: Optional[str] = None
    groq_api_url: str = GROQ_API_URL
    request_timeout: float = 60.0
    temperature: float = 0.7
    max_tokens: int = 300
    max_history_turns: int = 20
    log_dir: str = "logs"
    log_level: str = "INFO"

    @property
    def default_model(self) -> str:
        return self.interview_model or DEFAULT_MODEL


def load_settings() -> Settings:
    """
    Build settings from the environment.
    Called at startup, after load_dotenv(), so .env values are visible here.
    """
    return Settings(
        groq_api_key=os.getenv("GROQ_API_KEY", "").strip(),
        interview_model=os.getenv("INTERVIEW_MODEL", "").strip() or None,
        groq_api_url=os.getenv("GROQ_API_URL", GROQ_API_URL),
        request_timeout=float(os.getenv("GROQ_TIMEOUT_SECONDS", "60")),
        temperature=float(os.getenv("INTERVIEW_TEMPERATURE", "0.7")),
        max_tokens=int(os.getenv("INTERVIEW_MAX_TOKENS", "300")),
        max_history_turns=int(os.getenv("INTERVIEW_MAX_HISTORY_TURNS", "20")),
        log_dir=os.getenv("LOG_DIR", "logs"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def resolve_model(requested: Optional[str], settings: Settings) -> str:
    """Request parameter > INTERVIEW_MODEL > DEFAULT_MODEL."""
    if requested and requested.strip():
        return requested.strip()
    return settings.default_model
