"""
Integration tests for the training-planner cycle engine.

Each test exercises the full pipeline: register / generate → record_day →
carry-over → cycle spawn, plus persistence through UserStore.
Hand-computed expected values are included in comments.
"""

import copy
from datetime import date

import pytest

from training_planner.core.adaptation import (
    get_current_plan,
    plan_state,
    record_day,
    register_user,
    start_next_plan,
    update_preferences,
)
from training_planner.core.metrics import completion_ratio
from training_planner.core.models import Day, User, UserPreferences
from training_planner.core.planner import generate_plan
from training_planner.core.tracker import record_completion
from training_planner.io.serializers import (
    ValidationError,
    invalid_completed_entries,
    json_to_user,
    parse_completed_values,
    user_to_json,
)
from training_planner.io.user_store import UserStore

START = date(2024, 1, 1)


# ===========================================================================
# Helpers
# ===========================================================================

def _full_values(day: Day) -> list[float]:
    """Amounts that meet every target of the day."""
    return [1 if ex.is_rest else ex.target for ex in day.exercises]


def _make_user(difficulty: float = 1.0, equipment: dict | None = None) -> User:
    prefs = UserPreferences(difficulty=difficulty)
    if equipment is not None:
        prefs = UserPreferences(difficulty=difficulty, equipment=equipment)
    return register_user("ana", START, prefs)


# ===========================================================================
# Carry-over
# ===========================================================================

class TestDayRecording:
    """Recording a single day."""

    def test_end_to_end_example(self):
        """
        Day 0: squats 30 (done 20), push-ups 40, press 24, diamonds 20, plank 60 sec.
        Ratio = (20 + 40 + 24 + 20 + 60) / 174 = 164/174; 10 squats move to day 1.
        """
        user = _make_user()
        plan = user.plans[0]
        assert plan.days[0].exercises[0].name == "Genuflexiuni cu gantere"
        assert plan.days[0].exercises[0].target == 30

        values = _full_values(plan.days[0])
        values[0] = 20
        result = record_day(user, plan, 0, values, "greu azi")

        assert result.carry_over_produced
        assert result.next_plan is None
        day1 = plan.days[1].exercises
        assert len(day1) == 6
        assert day1[-1].name == "Genuflexiuni cu gantere (recuperare)"
        assert day1[-1].target == 10
        assert day1[-1].completed == 0
        assert plan.days[0].completion == pytest.approx(164 / 174)
        assert plan.days[0].feedback == "greu azi"
        assert len(user.plans) == 1

    def test_only_day_and_next_day_change(self):
        user = _make_user()
        plan = user.plans[0]
        before = copy.deepcopy(plan)

        record_day(user, plan, 10, [0, 0])

        for i, (old, new) in enumerate(zip(before.days, plan.days)):
            if i in (10, 11):
                continue
            assert old == new
        unmet = sum(ex.target for ex in before.days[10].exercises)
        carried = plan.days[11].exercises[len(before.days[11].exercises):]
        assert sum(ex.target for ex in carried) == unmet

    def test_carry_over_follows_existing_exercises_in_source_order(self):
        user = _make_user()
        plan = user.plans[0]
        record_day(user, plan, 0, [0, 40, 0, 20, 0])
        names = [ex.name for ex in plan.days[1].exercises[5:]]
        assert names == [
            "Genuflexiuni cu gantere (recuperare)",
            "Shoulder press cu gantere (recuperare)",
            "Plank (recuperare)",
        ]

    def test_carry_over_is_recursive_one_day_at_a_time(self):
        """10 squats left on day 0; 4 of them done on day 1 → 6 land on day 2."""
        user = _make_user()
        plan = user.plans[0]
        values = _full_values(plan.days[0])
        values[0] = 20
        record_day(user, plan, 0, values)

        day1_values = _full_values(plan.days[1])
        day1_values[-1] = 4
        record_day(user, plan, 1, day1_values)

        last = plan.days[2].exercises[-1]
        assert last.name == "Genuflexiuni cu gantere (recuperare) (recuperare)"
        assert last.target == 6
        assert all(
            "recuperare" not in ex.name for ex in plan.days[3].exercises
        )

    def test_missing_values_count_as_zero(self):
        user = _make_user()
        plan = user.plans[0]
        record_day(user, plan, 2, [30])  # walk done, stretching missing
        assert plan.days[2].exercises[1].completed == 0
        assert plan.days[3].exercises[-1].name == "Stretching (recuperare)"

    def test_full_completion_produces_no_carry_over(self):
        user = _make_user()
        plan = user.plans[0]
        result = record_day(user, plan, 4, _full_values(plan.days[4]))
        assert not result.carry_over_produced
        assert plan.days[4].completion == 1
        assert len(plan.days[5].exercises) == 2

    def test_over_target_stored_but_capped(self):
        user = _make_user()
        plan = user.plans[0]
        record_day(user, plan, 2, [60, 10])
        assert plan.days[2].exercises[0].completed == 60
        assert completion_ratio(plan.days[2]) == 1

    def test_record_completion_returns_flag(self):
        plan = generate_plan(START, 1.0)
        assert record_completion(plan, 0, []) is True
        assert record_completion(plan, 6, [1]) is False

    def test_rerecord_replaces_completed(self):
        user = _make_user()
        plan = user.plans[0]
        record_day(user, plan, 4, [0, 0, 0, 0, 0])
        record_day(user, plan, 4, _full_values(plan.days[4]))
        assert plan.days[4].completion == 1


class TestPreconditions:
    """Failures leave the plan and the history untouched."""

    @pytest.mark.parametrize("bad_index", [-1, 30, 100])
    def test_out_of_range_day(self, bad_index):
        user = _make_user()
        plan = user.plans[0]
        before = copy.deepcopy(plan)
        with pytest.raises(IndexError):
            record_day(user, plan, bad_index, [1, 2, 3])
        assert plan == before
        assert len(user.plans) == 1

    def test_corrupted_baseline_difficulty(self):
        user = _make_user()
        plan = user.plans[0]
        before = copy.deepcopy(plan)
        user.preferences.difficulty = -1.0
        with pytest.raises(ValueError):
            record_day(user, plan, 29, [])
        assert plan == before
        assert len(user.plans) == 1

    def test_next_plan_overflow_leaves_plan_untouched(self):
        """Nearly empty cycle → factor 0.8; targets × 8e306 overflow while generating."""
        user = _make_user()
        plan = user.plans[0]
        record_day(user, plan, 28, [0, 0])
        before = copy.deepcopy(plan)
        user.preferences.difficulty = 1e307

        with pytest.raises(ValueError):
            record_day(user, plan, 29, [1, 1, 1, 1, 1], "gata")

        assert plan == before
        assert plan.days[29].feedback == ""
        assert len(user.plans) == 1

    def test_update_preferences_rejects_overflowing_difficulty(self):
        user = _make_user()
        with pytest.raises(ValueError):
            update_preferences(user, UserPreferences(difficulty=1e307))
        assert user.preferences.difficulty == 1.0


# ===========================================================================
# Cycle end
# ===========================================================================

class TestCycleSpawn:
    """Recording the last day closes the cycle."""

    def test_last_day_unmet_is_dropped(self):
        user = _make_user()
        plan = user.plans[0]
        before = copy.deepcopy(plan)

        result = record_day(user, plan, 29, [0, 0, 0, 0, 0])

        assert result.carry_over == []
        assert not result.carry_over_produced
        for old, new in zip(before.days[:29], plan.days[:29]):
            assert old == new
        assert all("recuperare" not in ex.name for ex in result.next_plan.days[0].exercises)

    def test_perfect_cycle_hardens(self):
        user = _make_user()
        plan = user.plans[0]
        for i in range(30):
            result = record_day(user, plan, i, _full_values(plan.days[i]))
            if i < 29:
                assert result.next_plan is None

        assert len(user.plans) == 2
        new_plan = user.plans[1]
        assert result.next_plan is new_plan
        assert new_plan.start_date == date(2024, 1, 31)
        assert new_plan.end_date == date(2024, 2, 29)
        assert len(new_plan.days) == 30
        assert new_plan.difficulty == pytest.approx(1.1)
        # 30 × 1.1 = 33
        assert new_plan.days[0].exercises[0].target == 33
        assert user.plans[0] is plan

    def test_empty_cycle_eases(self):
        user = _make_user()
        plan = user.plans[0]
        for i in range(30):
            record_day(user, plan, i, [])

        new_plan = user.plans[-1]
        assert new_plan.difficulty == pytest.approx(0.8)
        # 30 × 0.8 = 24
        assert new_plan.days[0].exercises[0].target == 24

    def test_early_last_day_still_spawns_with_baseline(self):
        """Only day 30 recorded: average 1/30 → factor 0.8; baseline 1.2 → 0.96."""
        user = _make_user(difficulty=1.2)
        plan = user.plans[0]
        result = record_day(user, plan, 29, _full_values(plan.days[29]))

        assert result.next_plan is not None
        assert result.next_plan.difficulty == pytest.approx(0.96)
        assert len(user.plans) == 2

    def test_preferences_apply_to_next_plan_only(self):
        user = _make_user()
        plan = user.plans[0]
        snapshot = copy.deepcopy(plan)

        update_preferences(
            user,
            UserPreferences(difficulty=1.0, equipment={"gantere": False, "banda": True, "vesta": True}),
        )
        assert plan == snapshot

        record_day(user, plan, 29, [])
        squat = user.plans[-1].days[0].exercises[0]
        assert squat.name == "Genuflexiuni cu gantere (adaptat)"
        # 30 → 15 (no dumbbells) → × 0.8 = 12
        assert squat.target == 12


class TestCurrentPlan:
    def test_active_until_end_date(self):
        user = _make_user()
        plan = user.plans[0]
        assert get_current_plan(user, date(2024, 1, 30)) is plan
        assert plan_state(plan, date(2024, 1, 30)) == "ACTIVE"
        assert get_current_plan(user, date(2024, 1, 31)) is None
        assert plan_state(plan, date(2024, 1, 31)) == "EXPIRED"

    def test_spawned_plan_becomes_current(self):
        user = _make_user()
        record_day(user, user.plans[0], 29, [])
        assert get_current_plan(user, date(2024, 1, 31)) is user.plans[1]
        assert get_current_plan(user, date(2024, 1, 15)) is user.plans[1]

    def test_start_next_plan_requires_expiry(self):
        user = _make_user()
        with pytest.raises(ValueError):
            start_next_plan(user, date(2024, 1, 10))
        assert len(user.plans) == 1

        new_plan = start_next_plan(user, date(2024, 3, 5))
        assert new_plan.start_date == date(2024, 3, 5)
        assert new_plan.difficulty == 1.0
        assert user.plans[-1] is new_plan

    def test_register_generates_first_plan(self):
        user = register_user("mihai", START)
        assert len(user.plans) == 1
        assert user.plans[0].start_date == START
        assert user.preferences.difficulty == 1.0


# ===========================================================================
# Persistence
# ===========================================================================

class TestSerialization:
    def test_user_round_trip(self):
        user = _make_user(equipment={"gantere": False, "banda": True})
        values = _full_values(user.plans[0].days[0])
        values[0] = 12.5
        record_day(user, user.plans[0], 0, values, "ok")

        restored = json_to_user(user_to_json(user))
        assert restored == user

    def test_invalid_json(self):
        with pytest.raises(ValidationError):
            json_to_user("{not json")

    def test_invalid_unit(self):
        text = user_to_json(_make_user()).replace('"unit": "reps"', '"unit": "laps"', 1)
        with pytest.raises(ValidationError):
            json_to_user(text)

    def test_parse_completed_values(self):
        assert parse_completed_values("20, ,30") == [20.0, None, 30.0]
        assert parse_completed_values("") == []
        assert parse_completed_values("20,abc") == [20.0, None]
        assert invalid_completed_entries("20, abc, ,x") == ["abc", "x"]


class TestUserStore:
    def test_save_and_load(self, tmp_path):
        store = UserStore(tmp_path)
        user = _make_user()
        store.save_user(user)

        assert store.exists("ana")
        assert store.load_user("ana") == user
        assert store.list_users() == ["ana"]

    def test_missing_user(self, tmp_path):
        assert UserStore(tmp_path).load_user("nobody") is None
        assert UserStore(tmp_path).list_users() == []

    def test_corrupt_document(self, tmp_path):
        store = UserStore(tmp_path)
        store.users_dir.mkdir(parents=True)
        store.user_path("ana").write_text("[]", encoding="utf-8")
        with pytest.raises(ValidationError):
            store.load_user("ana")

    @pytest.mark.parametrize("bad_id", ["", "../x", ".hidden", "a/b"])
    def test_invalid_user_id(self, tmp_path, bad_id):
        with pytest.raises(ValidationError):
            UserStore(tmp_path).user_path(bad_id)

    def test_save_overwrites_without_temp_files(self, tmp_path):
        store = UserStore(tmp_path)
        user = _make_user()
        store.save_user(user)
        record_day(user, user.plans[0], 29, [])
        store.save_user(user)

        assert len(store.load_user("ana").plans) == 2
        assert [p.name for p in store.users_dir.iterdir()] == ["ana.json"]
