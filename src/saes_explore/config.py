from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    # Explanation service (OpenAI)
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API key")
    openai_model: str = Field(default="gpt-4.1-mini")
    explain_max_output_tokens: int = Field(default=300, ge=16, le=4096)
    explain_temperature: float = Field(default=0.3, ge=0.0, le=2.0)

    @property
    def explain_enabled(self) -> bool:
        return bool(self.openai_api_key)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        openai_model=os.getenv("SAES_EXPLAIN_MODEL", "gpt-4.1-mini"),
        explain_max_output_tokens=int(os.getenv("SAES_EXPLAIN_MAX_TOKENS", "300")),
        explain_temperature=float(os.getenv("SAES_EXPLAIN_TEMPERATURE", "0.3")),
    )
