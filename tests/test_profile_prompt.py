"""Tests for unit conversion, profile updates and prompt building."""

import pytest
from pydantic import ValidationError

from fitcoach.core.profile.models import AdminUserUpdate, ProfileUpdate, UserProfile
from fitcoach.core.profile.units import HeightStandard, from_metric, to_metric
from fitcoach.core.service.prompt import (
    MEDICAL_INSTRUCTION,
    TRAINER_PERSONA,
    build_customization_prompt,
    build_system_prompt,
    format_measurements,
)


def _profile(**overrides) -> UserProfile:
    data = dict(
        id="usr_1",
        email="sam@example.com",
        name="Sam",
        age=34,
        weight=80.0,
        height=182.0,
        sex="male",
        fitness_goals=["Build muscle", "Improve endurance"],
        experience_level="intermediate",
        unit_system="metric",
    )
    data.update(overrides)
    return UserProfile(**data)


class TestUnits:
    def test_standard_to_metric_rounds(self):
        assert to_metric(70, 154, "standard") == (178, 70)

    def test_feet_and_inches_input(self):
        assert to_metric(HeightStandard(5, 10), 154, "standard") == (178, 70)

    def test_metric_is_passthrough(self):
        assert to_metric(182.5, 80.2, "metric") == (182.5, 80.2)

    def test_metric_to_standard(self):
        height, weight = from_metric(178, 70, "standard")
        assert height == HeightStandard(feet=5, inches=10)
        assert height.total_inches == 70
        assert weight == 154

    def test_from_metric_passthrough(self):
        assert from_metric(182.0, 80.0, "metric") == (182.0, 80.0)


class TestProfileUpdate:
    def test_only_set_fields_are_changed(self):
        update = ProfileUpdate.model_validate({"name": "Alex", "age": 40})
        assert update.changes() == {"name": "Alex", "age": 40}

    def test_null_clears_optional_fields_only(self):
        update = ProfileUpdate.model_validate(
            {"name": None, "medical_conditions": None, "image_url": None}
        )
        assert update.changes() == {"medical_conditions": None, "image_url": None}

    def test_unknown_keys_are_ignored(self):
        update = ProfileUpdate.model_validate({"email": "x@y.z", "is_admin": True})
        assert update.changes() == {}

    def test_admin_update_can_grant_admin(self):
        update = AdminUserUpdate.model_validate({"is_admin": True})
        assert update.changes() == {"is_admin": True}

    @pytest.mark.parametrize(
        "payload",
        [
            {"age": 5},
            {"age": 200},
            {"weight": 0},
            {"height": -1},
            {"sex": "unknown"},
            {"unit_system": "imperial"},
            {"experience_level": "pro"},
        ],
    )
    def test_invalid_values_are_rejected(self, payload):
        with pytest.raises(ValidationError):
            ProfileUpdate.model_validate(payload)


class TestPrompts:
    def test_metric_measurements(self):
        assert format_measurements(_profile()) == ("80kg", "182cm")

    def test_standard_measurements_show_metric_in_brackets(self):
        profile = _profile(unit_system="standard", height=70, weight=154)
        assert format_measurements(profile) == ("154lbs (70kg)", "70in (178cm)")

    def test_system_prompt_contains_profile(self):
        prompt = build_system_prompt(_profile())
        assert prompt.startswith(TRAINER_PERSONA)
        assert "Name: Sam" in prompt
        assert "Age: 34" in prompt
        assert "Weight: 80kg" in prompt
        assert "Height: 182cm" in prompt
        assert "Goals: Build muscle, Improve endurance" in prompt
        assert "Experience: intermediate" in prompt
        assert "(metric)" in prompt
        assert "Medical Conditions" not in prompt
        assert MEDICAL_INSTRUCTION not in prompt

    def test_medical_conditions_add_instruction(self):
        prompt = build_system_prompt(_profile(medical_conditions="bad left knee"))
        assert "Medical Conditions & Additional Goals: bad left knee" in prompt
        assert prompt.rstrip().endswith(MEDICAL_INSTRUCTION)

    def test_customization_prompt_embeds_template(self):
        template = "# Week 1\n- Squat 3x5"
        prompt = build_customization_prompt(template)
        assert template in prompt
        assert "maintain the markdown format" in prompt
