"""Shared fixtures: a sample profile and in-memory repositories."""

import pytest

from fakes import (
    TEST_PBKDF2_ITERATIONS,
    FakeMessageRepository,
    FakeProgramRepository,
    FakeSessionRepository,
    FakeSettingsRepository,
    FakeUserProgramRepository,
    FakeUserRepository,
    make_profile,
)
from fitcoach.configs.system import AuthConfig
from fitcoach.core.profile.models import UserProfile


@pytest.fixture
def profile() -> UserProfile:
    return make_profile()


@pytest.fixture
def auth_config() -> AuthConfig:
    return AuthConfig(
        pbkdf2_iterations=TEST_PBKDF2_ITERATIONS, admin_emails=["Boss@Example.com"]
    )


@pytest.fixture
def users() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def sessions() -> FakeSessionRepository:
    return FakeSessionRepository()


@pytest.fixture
def messages() -> FakeMessageRepository:
    return FakeMessageRepository()


@pytest.fixture
def programs() -> FakeProgramRepository:
    return FakeProgramRepository()


@pytest.fixture
def user_programs() -> FakeUserProgramRepository:
    return FakeUserProgramRepository()


@pytest.fixture
def settings_repo() -> FakeSettingsRepository:
    return FakeSettingsRepository(
        {
            "openai_api_key": "",
            "openai_model": "",
            "max_context_messages": "10",
            "max_response_length": "2000",
            "ai_disclaimer": "Not medical advice.",
            "app_title": "FitCoach",
            "app_logo_url": "",
        }
    )
