import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from .models import Plan

logger = logging.getLogger(__name__)

PLAN_KEY = "aiPlan"


class PlanStore:
    """Single plan snapshot kept on disk under a fixed key.

    Every new generation overwrites it; the results view reads it once.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def save(self, plan: Plan) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({PLAN_KEY: plan.model_dump()}, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def load(self) -> Optional[Plan]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                stored = json.load(f).get(PLAN_KEY)
            if stored is None:
                return None
            return Plan.model_validate(stored)
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            logger.warning("Ignoring unreadable plan snapshot at %s: %s", self.path, e)
            return None

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)
