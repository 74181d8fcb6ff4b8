from __future__ import annotations

import logging
from typing import Optional

from .config import CoachConfig
from .llm import CoachLLM, ModelCallError
from .models import Plan, UserProfile
from .normalizer import default_plan, normalize_plan
from .prompts import build_prompt

logger = logging.getLogger(__name__)


class Planner:
    def __init__(self, cfg: Optional[CoachConfig] = None, llm: Optional[CoachLLM] = None) -> None:
        self.cfg = cfg or CoachConfig()
        self.llm = llm or CoachLLM(self.cfg)

    def generate_plan(self, profile: UserProfile) -> Plan:
        prompt = build_prompt(profile)
        try:
            raw_text = self.llm.complete(prompt)
        except ModelCallError as e:
            # Always render something: a failed model call yields the static plan
            logger.error("Generation Error: %s", e)
            return default_plan(profile)
        return normalize_plan(raw_text, profile)
