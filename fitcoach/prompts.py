"""Prompt text sent to the plan-generation model.

The schema is spelled out inline so the model is biased towards JSON that
``normalizer.normalize_plan`` can parse without repair.
"""
from langchain_core.prompts import PromptTemplate

from .models import UserProfile


SYSTEM_PROMPT = "You must reply ONLY with valid JSON — no markdown, no extra text, and no explanations."

# Literal braces are doubled for the f-string template format.
PLAN_TEMPLATE = PromptTemplate.from_template(
    """
You are an expert certified fitness coach and nutritionist.
Return a JSON object only — do NOT include markdown or extra text.

Schema:
{{
  "name": string,
  "fitness_goal": string,
  "workout_plan": [
    {{
      "day": string,
      "exercises": [
        {{ "name": string, "sets": string, "reps": string, "rest": string }}
      ]
    }}
  ],
  "diet_plan": {{
    "breakfast": string[],
    "lunch": string[],
    "dinner": string[],
    "snacks": string[]
  }},
  "tips": string[],
  "motivation": string
}}

Now generate a personalized 7-day plan for:
Name: {name}
Age: {age}
Gender: {gender}
Height: {height} cm
Weight: {weight} kg
Goal: {goal}
Fitness Level: {level}
Workout Location: {location}
Diet Preference: {diet}
Medical Notes: {medical}

Only respond with valid JSON strictly matching the schema."""
)


def build_prompt(profile: UserProfile) -> str:
    return PLAN_TEMPLATE.format(
        name=profile.name,
        age=profile.age,
        gender=profile.gender,
        height=profile.height,
        weight=profile.weight,
        goal=profile.goal,
        level=profile.level,
        location=profile.location,
        diet=profile.diet,
        medical=profile.medical or "None",
    )
