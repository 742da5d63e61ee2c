from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class LLMConfig:
    api_key: str = os.getenv("GROQ_API_KEY", "")
    model: str = os.getenv("DONDE_RECOMMEND_MODEL", "llama-3.3-70b-versatile")
    intent_model: str = os.getenv("DONDE_INTENT_MODEL", "llama-3.1-8b-instant")
    timeout: float = 8.0
    intent_timeout: float = 3.0
    max_tokens: int = 512
    intent_max_tokens: int = 250
    temperature: float = 0.7
    intent_temperature: float = 0.1
    enabled: bool = os.getenv("DONDE_LLM_ENABLED", "1") != "0"


DEFAULT_LLM_CONFIG = LLMConfig()
