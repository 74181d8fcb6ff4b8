import json
import os
import pytest
from fastapi.testclient import TestClient

# Import the FastAPI app
from fitcoach import main
from fitcoach.llm import ModelCallError
from fitcoach.main import app
from fitcoach.models import MEAL_KEYS, ImageResponse

client = TestClient(app)


class FakeLLM:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def complete(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def make_profile(**overrides):
    base = {
        "name": "Priya",
        "age": 28,
        "gender": "female",
        "height": 165,
        "weight": 60,
        "goal": "Muscle Gain",
        "level": "Beginner",
        "location": "Gym",
        "diet": "Veg",
        "medical": None,
    }
    base.update(overrides)
    return base


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_generate_plan_basic_structure(monkeypatch):
    reply = 'Here you go: {"name": "Priya", "workout_plan": [{"day": "Day 1", "exercises": [{"name": "Squats", "sets": 3, "reps": "12", "rest": "60 sec"}]}], "tips": ["Sleep well",]}'
    fake = FakeLLM(reply=reply)
    monkeypatch.setattr(main.planner, "llm", fake)

    resp = client.post("/api/generate", json=make_profile())
    assert resp.status_code == 200, resp.text
    data = resp.json()

    assert set(data.keys()) == {"name", "fitness_goal", "workout_plan", "diet_plan", "tips", "motivation"}
    assert data["name"] == "Priya"
    assert data["fitness_goal"] == "Muscle Gain"
    assert data["workout_plan"][0]["exercises"][0] == {"name": "Squats", "sets": "3", "reps": "12", "rest": "60 sec"}
    assert set(data["diet_plan"].keys()) == set(MEAL_KEYS)
    assert data["tips"] == ["Sleep well"]

    # The prompt carries the user's attributes
    assert "Name: Priya" in fake.prompts[0]
    assert "Medical Notes: None" in fake.prompts[0]


def test_generate_plan_falls_back_when_model_fails(monkeypatch):
    monkeypatch.setattr(main.planner, "llm", FakeLLM(error=ModelCallError("boom")))

    resp = client.post("/api/generate", json=make_profile(goal="Maintenance"))
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["name"] == "Priya"
    assert data["fitness_goal"] == "Maintenance"
    assert [d["day"] for d in data["workout_plan"]] == ["Day 1", "Day 2"]
    assert len(data["tips"]) == 3


def test_generate_plan_unexpected_error_is_500(monkeypatch):
    monkeypatch.setattr(main.planner, "llm", FakeLLM(error=KeyError("weird")))
    resp = client.post("/api/generate", json=make_profile())
    assert resp.status_code == 500
    assert "Failed to generate plan" in resp.json()["detail"]


def test_validation_error_for_missing_name():
    payload = make_profile()
    del payload["name"]
    resp = client.post("/api/generate", json=payload)
    assert resp.status_code == 422


def test_form_values_may_arrive_as_strings(monkeypatch):
    fake = FakeLLM(reply=json.dumps({"motivation": "Go!"}))
    monkeypatch.setattr(main.planner, "llm", fake)
    resp = client.post("/api/generate", json=make_profile(age="31", height="180", weight="82"))
    assert resp.status_code == 200, resp.text
    assert "Height: 180 cm" in fake.prompts[0]
    assert resp.json()["motivation"] == "Go!"


def test_image_endpoint_returns_generator_result(monkeypatch):
    monkeypatch.setattr(main.images, "generate", lambda prompt: ImageResponse(image=f"data:image/png;base64,{prompt}"))
    resp = client.post("/api/image", json={"prompt": "Push-ups"})
    assert resp.status_code == 200
    assert resp.json() == {"image": "data:image/png;base64,Push-ups", "error": None}


@pytest.mark.skipif(not os.getenv("HF_TOKEN"), reason="HF_TOKEN not set")
def test_live_generate():
    from fitcoach.planner import Planner
    from fitcoach.models import UserProfile

    plan = Planner().generate_plan(UserProfile(**make_profile()))
    assert plan.name
    assert set(plan.diet_plan.model_dump().keys()) == set(MEAL_KEYS)
