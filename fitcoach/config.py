from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv
load_dotenv()


HF_BASE_URL = os.getenv("HF_BASE_URL", "https://router.huggingface.co/v1")
CHAT_MODEL = os.getenv("CHAT_MODEL", "zai-org/GLM-4.6:novita")
IMAGE_MODEL_URL = os.getenv(
    "IMAGE_MODEL_URL",
    "https://router.huggingface.co/hf-inference/models/stabilityai/stable-diffusion-xl-base-1.0",
)
PLAN_STORE_PATH = os.getenv("PLAN_STORE_PATH", os.path.join("data", "plan_store.json"))


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class CoachConfig:
    hf_token: str | None = field(default_factory=lambda: os.getenv("HF_TOKEN") or None)
    base_url: str = HF_BASE_URL
    chat_model: str = CHAT_MODEL
    max_tokens: int = field(default_factory=lambda: int(_env_float("MAX_TOKENS", 1400)))
    temperature: float = field(default_factory=lambda: _env_float("TEMPERATURE", 0.5))
    image_model_url: str = IMAGE_MODEL_URL
    # fixed wait before the single retry when the hosted model is still loading
    retry_delay_sec: float = field(default_factory=lambda: _env_float("RETRY_DELAY_SEC", 20.0))
    request_timeout: float = field(default_factory=lambda: _env_float("REQUEST_TIMEOUT", 120.0))
    plan_store_path: str = PLAN_STORE_PATH
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
