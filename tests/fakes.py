"""In-memory stand-ins for the database repositories.

Method names and return types mirror ``fitcoach.infra.db``; tests wire
them in directly or through ``app.dependency_overrides``.
"""

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from fitcoach.core.admin.models import SystemSetting
from fitcoach.core.context.models import ContextMessage, Sender
from fitcoach.core.profile.models import UserProfile
from fitcoach.core.programs.models import Program, ProgramDefinition, UserProgram
from fitcoach.infra.id_utils import (
    PREFIX_MESSAGE,
    PREFIX_PROGRAM,
    PREFIX_USER_PROGRAM,
    generate_id,
)

T0 = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

# Keeps password hashing fast in tests.
TEST_PBKDF2_ITERATIONS = 1_000


def make_profile(**overrides) -> UserProfile:
    data = dict(
        id="usr_sam",
        email="sam@example.com",
        name="Sam",
        age=34,
        weight=80.0,
        height=182.0,
        sex="male",
        fitness_goals=["Build muscle"],
        experience_level="intermediate",
        unit_system="metric",
    )
    data.update(overrides)
    return UserProfile(**data)


class FakeUserRepository:
    def __init__(self) -> None:
        self.users: dict[str, UserProfile] = {}
        self.hashes: dict[str, str] = {}

    async def get(self, user_id: str) -> UserProfile | None:
        return self.users.get(user_id)

    async def get_credentials(self, email: str) -> tuple[UserProfile, str] | None:
        for user in self.users.values():
            if user.email == email:
                return user, self.hashes[user.id]
        return None

    async def exists_email(self, email: str) -> bool:
        return any(u.email == email for u in self.users.values())

    async def create(self, profile: UserProfile, password_hash: str) -> UserProfile:
        user = profile.model_copy(update={"created_at": datetime.now(timezone.utc)})
        self.users[user.id] = user
        self.hashes[user.id] = password_hash
        return user

    async def update(
        self, user_id: str, changes: Mapping[str, Any]
    ) -> UserProfile | None:
        if user_id not in self.users:
            return None
        self.users[user_id] = self.users[user_id].model_copy(update=dict(changes))
        return self.users[user_id]

    async def delete(self, user_id: str) -> bool:
        self.hashes.pop(user_id, None)
        return self.users.pop(user_id, None) is not None

    async def list_all(self) -> list[UserProfile]:
        return list(reversed(self.users.values()))

    async def count(self) -> int:
        return len(self.users)


class FakeSessionRepository:
    def __init__(self) -> None:
        self.sessions: dict[str, tuple[str, datetime]] = {}

    async def create(self, token: str, user_id: str, expires_at: datetime) -> None:
        self.sessions[token] = (user_id, expires_at)

    async def get_user_id(self, token: str, now: datetime | None = None) -> str | None:
        now = now or datetime.now(timezone.utc)
        found = self.sessions.get(token)
        if found is None or found[1] <= now:
            return None
        return found[0]

    async def delete(self, token: str) -> None:
        self.sessions.pop(token, None)

    async def purge_expired(self, now: datetime | None = None) -> int:
        now = now or datetime.now(timezone.utc)
        expired = [t for t, (_, exp) in self.sessions.items() if exp <= now]
        for token in expired:
            del self.sessions[token]
        return len(expired)


class FakeMessageRepository:
    """Stores messages one second apart starting at ``T0``."""

    def __init__(self) -> None:
        self.rows: list[tuple[str, ContextMessage]] = []
        self.fail_history = False

    def _clock(self) -> datetime:
        return T0 + timedelta(seconds=len(self.rows))

    async def list_for_user(self, user_id: str) -> list[ContextMessage]:
        return [m for owner, m in self.rows if owner == user_id]

    async def load_history(self, user_id: str) -> list[ContextMessage]:
        if self.fail_history:
            return []
        return await self.list_for_user(user_id)

    async def add(self, user_id: str, content: str, sender: Sender) -> ContextMessage:
        message = ContextMessage(
            id=generate_id(PREFIX_MESSAGE),
            content=content,
            sender=sender,
            timestamp=self._clock(),
        )
        self.rows.append((user_id, message))
        return message

    async def update_content(self, message_id: str, content: str) -> None:
        self.rows = [
            (owner, _replace(m, content) if m.id == message_id else m)
            for owner, m in self.rows
        ]

    async def delete(self, message_id: str) -> None:
        self.rows = [(owner, m) for owner, m in self.rows if m.id != message_id]

    async def clear_for_user(self, user_id: str) -> int:
        before = len(self.rows)
        self.rows = [(owner, m) for owner, m in self.rows if owner != user_id]
        return before - len(self.rows)

    async def count(self) -> int:
        return len(self.rows)

    async def count_active_users(self, since: datetime) -> int:
        return len(
            {
                owner
                for owner, m in self.rows
                if m.sender == "user" and m.timestamp >= since
            }
        )


def _replace(message: ContextMessage, content: str) -> ContextMessage:
    return ContextMessage(
        id=message.id,
        content=content,
        sender=message.sender,
        timestamp=message.timestamp,
    )


class FakeProgramRepository:
    def __init__(self) -> None:
        self.programs: dict[str, Program] = {}

    async def list_all(self) -> list[Program]:
        return list(self.programs.values())

    async def get(self, program_id: str) -> Program | None:
        return self.programs.get(program_id)

    async def create(self, definition: ProgramDefinition) -> Program:
        program = Program(id=generate_id(PREFIX_PROGRAM), **definition.model_dump())
        self.programs[program.id] = program
        return program

    async def update(
        self, program_id: str, definition: ProgramDefinition
    ) -> Program | None:
        if program_id not in self.programs:
            return None
        program = Program(id=program_id, **definition.model_dump())
        self.programs[program_id] = program
        return program

    async def delete(self, program_id: str) -> bool:
        return self.programs.pop(program_id, None) is not None


class FakeUserProgramRepository:
    def __init__(self) -> None:
        self.items: dict[str, UserProgram] = {}

    async def list_for_user(self, user_id: str) -> list[UserProgram]:
        return [p for p in self.items.values() if p.user_id == user_id]

    async def list_for_program(self, program_id: str) -> list[UserProgram]:
        return [p for p in self.items.values() if p.program_id == program_id]

    async def get(self, user_program_id: str) -> UserProgram | None:
        return self.items.get(user_program_id)

    async def create(
        self, user_id: str, program_id: str, customized_plan: str
    ) -> UserProgram:
        item = UserProgram(
            id=generate_id(PREFIX_USER_PROGRAM),
            user_id=user_id,
            program_id=program_id,
            customized_plan=customized_plan,
        )
        self.items[item.id] = item
        return item

    async def update_plan(self, user_program_id: str, customized_plan: str) -> None:
        item = self.items[user_program_id]
        self.items[user_program_id] = item.model_copy(
            update={"customized_plan": customized_plan}
        )

    async def set_pdf_path(self, user_program_id: str, pdf_path: str | None) -> None:
        if user_program_id in self.items:
            item = self.items[user_program_id]
            self.items[user_program_id] = item.model_copy(update={"pdf_path": pdf_path})

    async def delete(self, user_program_id: str) -> None:
        self.items.pop(user_program_id, None)


class FakeSettingsRepository:
    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self.values = dict(values or {})
        self.updated_by: dict[str, str | None] = {}

    async def list_all(self) -> list[SystemSetting]:
        return [
            SystemSetting(key=k, value=v, updated_by=self.updated_by.get(k))
            for k, v in sorted(self.values.items())
        ]

    async def get_value(self, key: str) -> str | None:
        return self.values.get(key)

    async def get_values(self, keys: tuple[str, ...]) -> dict[str, str]:
        return {k: self.values[k] for k in keys if k in self.values}

    async def update(
        self, key: str, value: str, updated_by: str | None
    ) -> SystemSetting | None:
        if key not in self.values:
            return None
        self.values[key] = value
        self.updated_by[key] = updated_by
        return SystemSetting(key=key, value=value, updated_by=updated_by)
