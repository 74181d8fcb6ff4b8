from __future__ import annotations

import base64
import logging
import time
from typing import Optional

import requests

from .config import CoachConfig
from .models import ImageResponse

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE = "https://placehold.co/512x512?text=Image+Not+Available"

FOOD_KEYWORDS = [
    "salad", "chicken", "paneer", "tofu", "oats", "smoothie", "soup", "sandwich", "rice",
    "dal", "vegetable", "fruit", "juice", "snack", "meal", "breakfast", "lunch", "dinner",
]


def is_food(prompt: str) -> bool:
    lower = prompt.lower()
    return any(word in lower for word in FOOD_KEYWORDS)


def build_image_prompt(prompt: str) -> str:
    if is_food(prompt):
        return (
            f"High-quality, realistic food photography of {prompt}. "
            "Focus on healthy, appetizing presentation suitable for a fitness diet plan."
        )
    return (
        f"High-quality realistic photograph of a person performing {prompt} exercise "
        "in a gym or home workout setting. Focus on correct human posture and fitness environment."
    )


class ImageGenerationError(RuntimeError):
    pass


class ImageGenerator:
    """Text-to-image via the hosted Stable Diffusion XL endpoint.

    ``generate`` never raises: any failure yields the placeholder image and the
    error text, so a plan view can always render something.
    """

    def __init__(self, cfg: Optional[CoachConfig] = None) -> None:
        self.cfg = cfg or CoachConfig()

    def _call_model(self, inputs: str) -> requests.Response:
        return requests.post(
            self.cfg.image_model_url,
            headers={
                "Authorization": f"Bearer {self.cfg.hf_token}",
                "Content-Type": "application/json",
            },
            json={"inputs": inputs},
            timeout=self.cfg.request_timeout,
        )

    def _fetch_image(self, prompt: str) -> bytes:
        inputs = build_image_prompt(prompt)
        resp = self._call_model(inputs)
        if resp.status_code != 200:
            if "loading" not in resp.text.lower():
                raise ImageGenerationError(resp.text)
            logger.info("Image model is loading, retrying in %s seconds...", self.cfg.retry_delay_sec)
            time.sleep(self.cfg.retry_delay_sec)
            resp = self._call_model(inputs)
        if not resp.ok:
            raise ImageGenerationError(f"Hugging Face Error: {resp.text}")
        return resp.content

    def generate(self, prompt: str) -> ImageResponse:
        try:
            data = self._fetch_image(prompt)
        except (requests.RequestException, ImageGenerationError) as e:
            logger.error("Image generation failed: %s", e)
            return ImageResponse(image=PLACEHOLDER_IMAGE, error=str(e))
        encoded = base64.b64encode(data).decode("ascii")
        return ImageResponse(image=f"data:image/png;base64,{encoded}")
