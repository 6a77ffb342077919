"""Runtime settings, read from the environment when the package is imported."""
import logging
import os
from pathlib import Path

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ENV_FILE_VAR = "SWARM_ENV_FILE"


def load_env_file(path: Path) -> int:
    """Copy KEY=VALUE lines from `path` into os.environ without overriding.

    Quotes around values are dropped and `export ` prefixes are allowed.
    Returns how many variables were set.
    """
    if not path.is_file():
        return 0
    loaded = 0
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export "):]
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key, value = key.strip(), value.strip().strip("'\"")
        if key and key not in os.environ:
            os.environ[key] = value
            loaded += 1
    return loaded


_env_file = Path(os.getenv(ENV_FILE_VAR, ".env"))
_loaded = load_env_file(_env_file)


class Settings(BaseModel):
    # Completion service (any OpenAI-compatible endpoint)
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "").strip()
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").strip()

    # Model used by agents that don't name one
    default_model: str = os.getenv("SWARM_DEFAULT_MODEL", "gpt-4")
    max_tokens: int = int(os.getenv("SWARM_MAX_TOKENS", "512"))
    request_timeout_s: float = float(os.getenv("SWARM_REQUEST_TIMEOUT", "60"))

    # Reserved argument key under which context variables reach tool handlers
    context_variables_key: str = os.getenv("SWARM_CONTEXT_KEY", "context_variables")

settings = Settings()

if _loaded:
    logger.debug(f"Config: {_loaded} variables loaded from {_env_file}")
if not settings.openai_api_key:
    logger.warning("Config: OPENAI_API_KEY is not set; completion requests will fail unless a client is supplied")
