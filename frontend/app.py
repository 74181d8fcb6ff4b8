import json
import os
import sys
import requests
import streamlit as st
from typing import List, Dict, Any
from dotenv import load_dotenv
from pathlib import Path

load_dotenv()

# Ensure project root is on sys.path when running on Streamlit Cloud
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

# If BACKEND_URL is not set, run in local mode (call Python modules directly)
BACKEND_URL = os.getenv("BACKEND_URL", "").strip()
LOCAL_MODE = BACKEND_URL == ""

if LOCAL_MODE:
    # Load secrets into environment before the config reads os.environ
    try:
        for key in ("HF_TOKEN", "CHAT_MODEL", "PLAN_STORE_PATH"):
            if key in st.secrets:
                os.environ[key] = str(st.secrets[key]).strip()
    except FileNotFoundError:
        pass

from fitcoach.config import CoachConfig
from fitcoach.logging_config import configure_logging
from fitcoach.models import Plan, UserProfile
from fitcoach.storage import PlanStore

if "config" not in st.session_state:
    st.session_state.config = CoachConfig()
config: CoachConfig = st.session_state.config
configure_logging(log_level=config.log_level)
store = PlanStore(config.plan_store_path)

if LOCAL_MODE:
    from fitcoach.images import ImageGenerator
    from fitcoach.planner import Planner
    if "planner" not in st.session_state:
        st.session_state.planner = Planner(config)
    if "images" not in st.session_state:
        st.session_state.images = ImageGenerator(config)


def request_image(prompt: str) -> Dict[str, Any]:
    if LOCAL_MODE:
        return st.session_state.images.generate(prompt).model_dump()
    r = requests.post(f"{BACKEND_URL}/api/image", json={"prompt": prompt}, timeout=120)
    r.raise_for_status()
    return r.json()


def image_button(label: str, key: str) -> None:
    if st.button("Generate image", key=key):
        with st.spinner(f"Generating image for {label}..."):
            try:
                result = request_image(label)
            except requests.RequestException as e:
                st.error(f"Image request failed: {e}")
                return
        st.image(result.get("image"), caption=label, width=320)
        if result.get("error"):
            st.caption("Image service unavailable, showing a placeholder.")


st.set_page_config(page_title="AI Fitness Coach", page_icon="💪", layout="wide")

st.title("💪 AI Fitness Coach")
st.caption("Get your personalized workout & diet plan powered by AI.")

with st.sidebar:
    st.header("Configuration")
    mode_label = "Local (in-app)" if LOCAL_MODE else f"Remote: {BACKEND_URL}"
    st.write(f"Mode: {mode_label}")
    if LOCAL_MODE:
        if st.button("Health Check"):
            st.success("Local mode OK: running planner in-process")
    else:
        if st.button("Health Check"):
            try:
                r = requests.get(f"{BACKEND_URL}/health", timeout=5)
                st.success(f"API OK: {r.json()}")
            except requests.RequestException as e:
                st.error(f"API not reachable: {e}")
    if st.button("Clear saved plan"):
        store.clear()
        st.session_state.pop("plan", None)

st.subheader("Tell us about you")
with st.form("profile"):
    col1, col2 = st.columns(2)
    with col1:
        name = st.text_input("Full Name")
        age = st.number_input("Age", min_value=1, max_value=120, value=25)
        gender = st.text_input("Gender")
        height = st.number_input("Height (cm)", min_value=50, max_value=250, value=170)
        weight = st.number_input("Weight (kg)", min_value=20, max_value=300, value=70)
    with col2:
        goal = st.selectbox("Goal", ["Weight Loss", "Muscle Gain", "Maintenance"], index=0)
        level = st.selectbox("Fitness Level", ["Beginner", "Intermediate", "Advanced"], index=0)
        location = st.selectbox("Workout Location", ["Home", "Gym", "Outdoor"], index=0)
        diet = st.selectbox("Diet Preference", ["Veg", "Non-Veg", "Vegan", "Keto"], index=0)
    medical = st.text_area("Mention any medical history, stress level, or special notes...")
    submitted = st.form_submit_button("Generate My Plan", type="primary")

if submitted:
    payload = {
        "name": name.strip(),
        "age": int(age),
        "gender": gender.strip(),
        "height": int(height),
        "weight": int(weight),
        "goal": goal,
        "level": level,
        "location": location,
        "diet": diet,
        "medical": medical.strip() or None,
    }
    try:
        with st.spinner("Generating Plan..."):
            if LOCAL_MODE:
                plan = st.session_state.planner.generate_plan(UserProfile(**payload))
            else:
                resp = requests.post(f"{BACKEND_URL}/api/generate", json=payload, timeout=180)
                resp.raise_for_status()
                plan = Plan.model_validate(resp.json())
    except requests.HTTPError as e:
        st.error(f"Server error: {e.response.text}")
        st.stop()
    except requests.RequestException as e:
        st.error(f"Error generating plan. Please try again. ({e})")
        st.stop()
    store.save(plan)
    st.session_state.pop("plan", None)
    st.success("Plan generated!")

# The snapshot is read once per session and reused across reruns
if "plan" not in st.session_state:
    st.session_state.plan = store.load()
plan = st.session_state.plan

if plan is None:
    st.info("No plan found. Please generate one first.")
    st.stop()

data: Dict[str, Any] = plan.model_dump()

st.header(f"{data['name']}'s plan")
st.markdown(f"**Goal:** {data['fitness_goal']}")

st.subheader("🏋️ Workout Plan")
schedule: List[Dict[str, Any]] = data["workout_plan"]
total_ex = sum(len(d.get("exercises", [])) for d in schedule)
st.caption(f"Plan contains {total_ex} exercises across {len(schedule)} day(s).")
for d_idx, day in enumerate(schedule):
    with st.expander(day.get("day") or f"Day {d_idx + 1}"):
        exercises = day.get("exercises", [])
        if not exercises:
            st.info("Rest day.")
        for e_idx, ex in enumerate(exercises):
            meta = [
                f"{ex['sets']} sets" if ex.get("sets") else "",
                f"{ex['reps']} reps" if ex.get("reps") else "",
                f"rest {ex['rest']}" if ex.get("rest") else "",
            ]
            meta_str = " · ".join([m for m in meta if m])
            st.markdown(f"**{ex.get('name')}**" + (f"  \\\n_{meta_str}_" if meta_str else ""))
            image_button(ex.get("name") or "exercise", key=f"ex-{d_idx}-{e_idx}")

st.subheader("🥗 Diet Plan")
for meal, items in data["diet_plan"].items():
    st.markdown(f"**{meal.title()}**")
    if not items:
        st.caption("Nothing planned.")
    for i_idx, item in enumerate(items):
        st.write(f"- {item}")
        image_button(item, key=f"meal-{meal}-{i_idx}")

st.subheader("💡 Tips")
for tip in data["tips"]:
    st.write(f"- {tip}")

st.subheader("🔥 Motivation")
st.write(data["motivation"])

st.download_button(
    "Download Plan (JSON)",
    data=json.dumps(data, indent=2, ensure_ascii=False),
    file_name="fitness_plan.json",
    mime="application/json",
)
