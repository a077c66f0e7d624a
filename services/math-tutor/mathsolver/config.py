import os
from typing import List, Optional
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()

DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1"
DEFAULT_MODEL = "google/gemini-2.5-flash"


class Settings(BaseModel):
    gateway_url: str = DEFAULT_GATEWAY_URL
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    history_limit: int = 20
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.environ.get("CORS_ORIGINS", "*")
        return cls(
            gateway_url=os.environ.get("AI_GATEWAY_URL", DEFAULT_GATEWAY_URL),
            # The hosted gateway historically issued LOVABLE_API_KEY
            api_key=os.environ.get("AI_GATEWAY_API_KEY") or os.environ.get("LOVABLE_API_KEY"),
            model=os.environ.get("AI_MODEL", DEFAULT_MODEL),
            history_limit=int(os.environ.get("HISTORY_LIMIT", "20")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


settings = Settings.from_env()
