import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from .config import CoachConfig
from .images import ImageGenerator
from .logging_config import configure_logging
from .models import ImageRequest, ImageResponse, Plan, UserProfile
from .planner import Planner

config = CoachConfig()
configure_logging(log_level=config.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="AI Fitness Coach API", version="0.1.0")

# CORS (allow Streamlit on localhost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

planner = Planner(config)
images = ImageGenerator(config)

@app.get("/health")
def health():
    return {"status": "ok"}

@app.post("/api/generate", response_model=Plan)
def generate(profile: UserProfile):
    try:
        return planner.generate_plan(profile)
    except Exception as e:
        logger.exception("Plan generation crashed")
        raise HTTPException(status_code=500, detail=f"Failed to generate plan: {e}")


@app.post("/api/image", response_model=ImageResponse)
def generate_image(body: ImageRequest):
    return images.generate(body.prompt)
