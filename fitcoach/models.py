from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

MEAL_KEYS = ("breakfast", "lunch", "dinner", "snacks")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    raise ValueError(f"expected text, got {type(value).__name__}")


def _as_text_list(value: Any) -> Any:
    # Models sometimes answer a list field with a single string
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [_as_text(v) for v in value if v is not None]
    return value


class UserProfile(BaseModel):
    name: str
    age: Union[int, float, str]
    gender: str
    height: Union[int, float, str] = Field(description="centimetres")
    weight: Union[int, float, str] = Field(description="kilograms")
    goal: str = Field(default="Weight Loss", description="Weight Loss | Muscle Gain | Maintenance")
    level: str = Field(default="Beginner", description="Beginner | Intermediate | Advanced")
    location: str = Field(default="Home", description="Home | Gym | Outdoor")
    diet: str = Field(default="Veg", description="Veg | Non-Veg | Vegan | Keto")
    medical: Optional[str] = None


class Exercise(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    sets: str = ""
    reps: str = ""
    rest: str = ""

    @field_validator("name", "sets", "reps", "rest", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _as_text(v)


class Day(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: str = ""
    exercises: List[Exercise] = Field(default_factory=list)

    @field_validator("day", mode="before")
    @classmethod
    def _coerce_day(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("exercises", mode="before")
    @classmethod
    def _coerce_exercises(cls, v: Any) -> Any:
        return [] if v is None else v


class DietPlan(BaseModel):
    """Exactly four meal slots; anything else the model invents is dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    breakfast: List[str] = Field(default_factory=list)
    lunch: List[str] = Field(default_factory=list)
    dinner: List[str] = Field(default_factory=list)
    snacks: List[str] = Field(default_factory=list)

    @field_validator(*MEAL_KEYS, mode="before")
    @classmethod
    def _coerce_items(cls, v: Any) -> Any:
        return _as_text_list(v)


class Plan(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    fitness_goal: str
    workout_plan: List[Day]
    diet_plan: DietPlan
    tips: List[str]
    motivation: str

    @field_validator("name", "fitness_goal", "motivation", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str:
        return _as_text(v)

    @field_validator("tips", mode="before")
    @classmethod
    def _coerce_tips(cls, v: Any) -> Any:
        return _as_text_list(v)


class ImageRequest(BaseModel):
    prompt: str


class ImageResponse(BaseModel):
    image: str
    error: Optional[str] = None
