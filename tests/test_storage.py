import json

from fitcoach.normalizer import default_plan, normalize_plan
from fitcoach.storage import PLAN_KEY, PlanStore


def test_fresh_store_loads_nothing(tmp_path):
    assert PlanStore(str(tmp_path / "plan.json")).load() is None


def test_save_then_load(tmp_path):
    store = PlanStore(str(tmp_path / "nested" / "plan.json"))
    plan = default_plan()
    store.save(plan)
    assert store.load() == plan


def test_new_generation_overwrites_snapshot(tmp_path):
    path = tmp_path / "plan.json"
    store = PlanStore(str(path))
    store.save(default_plan())
    newer = normalize_plan('{"name": "Robin", "motivation": "Again!"}')
    store.save(newer)
    assert store.load() == newer
    assert list(json.loads(path.read_text(encoding="utf-8")).keys()) == [PLAN_KEY]


def test_corrupt_snapshot_is_ignored(tmp_path):
    path = tmp_path / "plan.json"
    path.write_text("{not json", encoding="utf-8")
    assert PlanStore(str(path)).load() is None
    path.write_text(json.dumps({PLAN_KEY: {"name": "x"}}), encoding="utf-8")
    assert PlanStore(str(path)).load() is None


def test_clear_removes_snapshot(tmp_path):
    store = PlanStore(str(tmp_path / "plan.json"))
    store.save(default_plan())
    store.clear()
    assert store.load() is None
    store.clear()
