"""Tests for program, admin, settings and profile services."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest
from langchain_core.language_models import GenericFakeChatModel
from langchain_core.messages import AIMessage

from fakes import T0, make_profile
from fitcoach.configs.system import LLMConfig
from fitcoach.core.admin.service import AdminService
from fitcoach.core.admin.settings import SettingsService
from fitcoach.core.errors import (
    GenerationFailed,
    InvalidInput,
    LLMNotConfigured,
    NotFound,
)
from fitcoach.core.llm.deps import get_llm
from fitcoach.core.pdf.storage import PdfStorage
from fitcoach.core.profile.models import AdminUserUpdate, ProfileUpdate
from fitcoach.core.profile.service import ProfileService
from fitcoach.core.programs.customizer import ProgramCustomizer
from fitcoach.core.programs.models import ProgramDefinition
from fitcoach.core.programs.service import ProgramService

DEFINITION = ProgramDefinition(
    name="Beginner Strength",
    description="Three full-body sessions per week",
    template="# Week 1\n- Squats: 3x8",
)


@pytest.fixture
def storage(tmp_path) -> PdfStorage:
    return PdfStorage(tmp_path)


@pytest.fixture
def program_service(programs, user_programs, storage) -> ProgramService:
    return ProgramService(programs, user_programs, storage)


class TestProgramService:
    @pytest.mark.asyncio
    async def test_save_and_export_pdf(self, program_service, user_programs, storage):
        program = await program_service.create_program(DEFINITION)
        saved = await program_service.save_customization(
            "usr_sam", program.id, "# Plan\n- Goblet squat 3x10"
        )

        path = await program_service.export_pdf(saved, make_profile())

        assert path == f"usr_sam/{saved.id}.pdf"
        assert (await user_programs.get(saved.id)).pdf_path == path
        assert storage.read(path).startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_export_failure_is_logged_not_raised(self, program_service):
        program = await program_service.create_program(DEFINITION)
        saved = await program_service.save_customization("usr_sam", program.id, "x")

        with patch(
            "fitcoach.core.programs.service.render_program_pdf",
            side_effect=RuntimeError("broken"),
        ):
            assert await program_service.export_pdf(saved, make_profile()) is None

    @pytest.mark.asyncio
    async def test_get_pdf_renders_on_demand(self, program_service, user_programs):
        program = await program_service.create_program(DEFINITION)
        saved = await program_service.save_customization("usr_sam", program.id, "x")

        pdf = await program_service.get_pdf("usr_sam", saved.id, make_profile())

        assert pdf.startswith(b"%PDF")
        assert (await user_programs.get(saved.id)).pdf_path is not None

    @pytest.mark.asyncio
    async def test_other_users_programs_are_not_found(self, program_service):
        program = await program_service.create_program(DEFINITION)
        saved = await program_service.save_customization("usr_sam", program.id, "x")

        with pytest.raises(NotFound):
            await program_service.get_user_program("usr_other", saved.id)
        with pytest.raises(NotFound):
            await program_service.delete_user_program("usr_other", saved.id)

    @pytest.mark.asyncio
    async def test_save_for_unknown_program(self, program_service):
        with pytest.raises(NotFound):
            await program_service.save_customization("usr_sam", "prog_missing", "x")

    @pytest.mark.asyncio
    async def test_update_plan(self, program_service, user_programs):
        program = await program_service.create_program(DEFINITION)
        saved = await program_service.save_customization("usr_sam", program.id, "v1")

        updated = await program_service.update_user_program("usr_sam", saved.id, "v2")

        assert updated.customized_plan == "v2"
        assert (await user_programs.get(saved.id)).customized_plan == "v2"

    @pytest.mark.asyncio
    async def test_delete_program_removes_stored_pdfs(
        self, program_service, storage
    ):
        program = await program_service.create_program(DEFINITION)
        saved = await program_service.save_customization("usr_sam", program.id, "x")
        path = await program_service.export_pdf(saved, make_profile())

        await program_service.delete_program(program.id)

        assert storage.read(path) is None
        with pytest.raises(NotFound):
            await program_service.get_program(program.id)

    @pytest.mark.asyncio
    async def test_update_and_delete_unknown_program(self, program_service):
        with pytest.raises(NotFound):
            await program_service.update_program("prog_missing", DEFINITION)
        with pytest.raises(NotFound):
            await program_service.delete_program("prog_missing")


class TestProgramCustomizer:
    @pytest.mark.asyncio
    async def test_customize_returns_llm_plan(self, programs):
        program = await programs.create(DEFINITION)
        llm = GenericFakeChatModel(
            messages=iter([AIMessage(content="  # Week 1\n- Goblet squats: 3x10  ")])
        )

        plan = await ProgramCustomizer(llm).customize(program, make_profile())

        assert plan == "# Week 1\n- Goblet squats: 3x10"

    @pytest.mark.asyncio
    async def test_goals_are_required(self, programs):
        program = await programs.create(DEFINITION)
        llm = AsyncMock()
        with pytest.raises(InvalidInput):
            await ProgramCustomizer(llm).customize(
                program, make_profile(fitness_goals=[])
            )
        llm.ainvoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_reply_fails(self, programs):
        program = await programs.create(DEFINITION)
        llm = GenericFakeChatModel(messages=iter([AIMessage(content="   ")]))
        with pytest.raises(GenerationFailed):
            await ProgramCustomizer(llm).customize(program, make_profile())

    @pytest.mark.asyncio
    async def test_prompt_contains_profile_and_template(self, programs):
        program = await programs.create(DEFINITION)
        llm = AsyncMock()
        llm.ainvoke.return_value = AIMessage(content="plan")

        await ProgramCustomizer(llm).customize(program, make_profile())

        [prompt] = llm.ainvoke.call_args.args
        assert "Name: Sam" in prompt[0].content
        assert DEFINITION.template in prompt[1].content


class TestSettingsService:
    @pytest.mark.asyncio
    async def test_missing_setting_is_empty(self, settings_repo):
        assert await SettingsService(settings_repo).get_setting("nope") == ""

    @pytest.mark.asyncio
    async def test_read_failure_is_empty(self, settings_repo):
        settings_repo.get_value = AsyncMock(side_effect=RuntimeError("db down"))
        assert await SettingsService(settings_repo).get_setting("app_title") == ""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "raw, expected",
        [("4", 4), (" 6 ", 6), ("abc", 10), ("", 10), ("0", 10), ("-2", 10)],
    )
    async def test_int_setting_falls_back(self, settings_repo, raw, expected):
        settings_repo.values["max_context_messages"] = raw
        service = SettingsService(settings_repo)
        assert await service.get_int_setting("max_context_messages", 10) == expected

    @pytest.mark.asyncio
    async def test_update_records_admin(self, settings_repo):
        setting = await SettingsService(settings_repo).update_setting(
            "app_title", "Gym Buddy", "usr_admin"
        )
        assert setting.value == "Gym Buddy"
        assert setting.updated_by == "usr_admin"

    @pytest.mark.asyncio
    async def test_unknown_key_cannot_be_created(self, settings_repo):
        with pytest.raises(NotFound):
            await SettingsService(settings_repo).update_setting("new_key", "x", None)

    @pytest.mark.asyncio
    async def test_public_settings_only_expose_branding(self, settings_repo):
        public = await SettingsService(settings_repo).public_settings()
        assert public == {
            "app_title": "FitCoach",
            "app_logo_url": "",
            "ai_disclaimer": "Not medical advice.",
        }


class TestGetLlm:
    @pytest.mark.asyncio
    async def test_missing_api_key(self, settings_repo):
        with pytest.raises(LLMNotConfigured, match="API key"):
            await get_llm(LLMConfig(), SettingsService(settings_repo))

    @pytest.mark.asyncio
    async def test_missing_model(self, settings_repo):
        settings_repo.values["openai_api_key"] = "sk-test"
        with pytest.raises(LLMNotConfigured, match="model"):
            await get_llm(LLMConfig(), SettingsService(settings_repo))

    @pytest.mark.asyncio
    async def test_settings_override_static_config(self, settings_repo):
        settings_repo.values.update(
            openai_api_key="sk-test", openai_model="gpt-4o-mini"
        )
        llm = await get_llm(
            LLMConfig(api_key="sk-static", model_name="static-model"),
            SettingsService(settings_repo),
        )
        assert llm.model_name == "gpt-4o-mini"
        assert llm.max_tokens == 2000

    @pytest.mark.asyncio
    async def test_static_config_is_the_fallback(self, settings_repo):
        llm = await get_llm(
            LLMConfig(api_key="sk-static", model_name="static-model"),
            SettingsService(settings_repo),
        )
        assert llm.model_name == "static-model"


class TestAdminService:
    @pytest.mark.asyncio
    async def test_stats(self, users, messages):
        await users.create(make_profile(id="usr_a", email="a@example.com"), "h")
        await users.create(make_profile(id="usr_b", email="b@example.com"), "h")
        await users.create(make_profile(id="usr_c", email="c@example.com"), "h")
        await messages.add("usr_a", "hi", "user")
        await messages.add("usr_a", "hello", "ai")
        await messages.add("usr_b", "hey", "user")
        await messages.add("usr_b", "hey there", "ai")

        stats = await AdminService(users, messages).stats(now=T0 + timedelta(days=1))

        assert stats.total_users == 3
        assert stats.active_users == 2
        assert stats.total_messages == 4
        assert stats.average_messages_per_user == 1

    @pytest.mark.asyncio
    async def test_stats_window_excludes_old_activity(self, users, messages):
        await users.create(make_profile(), "h")
        await messages.add("usr_sam", "hi", "user")

        stats = await AdminService(users, messages).stats(now=T0 + timedelta(days=8))

        assert stats.active_users == 0

    @pytest.mark.asyncio
    async def test_stats_without_users(self, users, messages):
        stats = await AdminService(users, messages).stats()
        assert stats.average_messages_per_user == 0

    @pytest.mark.asyncio
    async def test_admin_can_grant_admin(self, users, messages):
        await users.create(make_profile(), "h")
        updated = await AdminService(users, messages).update_user(
            "usr_sam", AdminUserUpdate(is_admin=True, age=40), "usr_admin"
        )
        assert updated.is_admin is True
        assert updated.age == 40

    @pytest.mark.asyncio
    async def test_unknown_user(self, users, messages):
        service = AdminService(users, messages)
        with pytest.raises(NotFound):
            await service.update_user("usr_x", AdminUserUpdate(age=40), "usr_admin")
        with pytest.raises(NotFound):
            await service.delete_user("usr_x", "usr_admin")


class TestProfileService:
    @pytest.mark.asyncio
    async def test_update_profile(self, users):
        await users.create(make_profile(), "h")
        updated = await ProfileService(users).update_profile(
            "usr_sam",
            ProfileUpdate(unit_system="standard", weight=176, height=72),
        )
        assert (updated.unit_system, updated.weight, updated.height) == (
            "standard",
            176,
            72,
        )

    @pytest.mark.asyncio
    async def test_empty_update_returns_profile(self, users):
        await users.create(make_profile(), "h")
        user = await ProfileService(users).update_profile("usr_sam", ProfileUpdate())
        assert user.id == "usr_sam"

    @pytest.mark.asyncio
    async def test_unknown_user(self, users):
        with pytest.raises(NotFound):
            await ProfileService(users).get_profile("usr_missing")
