from __future__ import annotations

import logging
import time
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from .config import CoachConfig
from .prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


class ModelCallError(RuntimeError):
    """The hosted model could not produce a completion."""


def _is_loading(err: Exception) -> bool:
    return "loading" in str(err).lower()


class CoachLLM:
    """Chat-completion client for the Hugging Face router (OpenAI-compatible)."""

    def __init__(self, cfg: Optional[CoachConfig] = None, chat: Any = None) -> None:
        self.cfg = cfg or CoachConfig()
        self._chat = chat

    @property
    def chat(self) -> Any:
        # Built on first use so the API imports without credentials
        if self._chat is None:
            if not self.cfg.hf_token:
                raise ModelCallError("HF_TOKEN is not set")
            self._chat = ChatOpenAI(
                model=self.cfg.chat_model,
                base_url=self.cfg.base_url,
                api_key=self.cfg.hf_token,
                max_tokens=self.cfg.max_tokens,
                temperature=self.cfg.temperature,
                timeout=self.cfg.request_timeout,
                max_retries=0,
            )
        return self._chat

    def _invoke(self, prompt: str) -> str:
        messages = [SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)]
        answer = self.chat.invoke(messages)
        content = getattr(answer, "content", answer)
        return content if isinstance(content, str) else str(content)

    def complete(self, prompt: str) -> str:
        try:
            text = self._invoke(prompt)
        except ModelCallError:
            raise
        except Exception as e:
            if not _is_loading(e):
                raise ModelCallError(f"Model call failed: {e}") from e
            logger.info("Model is loading, retrying in %s seconds...", self.cfg.retry_delay_sec)
            time.sleep(self.cfg.retry_delay_sec)
            try:
                text = self._invoke(prompt)
            except Exception as retry_err:
                raise ModelCallError(f"Model call failed after retry: {retry_err}") from retry_err

        text = text.strip()
        if not text:
            raise ModelCallError("Empty model output")
        return text
