"""Program templates and user customizations."""

from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from fitcoach.core.programs import models as domain
from fitcoach.infra.id_utils import PREFIX_PROGRAM, PREFIX_USER_PROGRAM, generate_id

from .models import Program, UserProgram


def _to_program(row: Program) -> domain.Program:
    return domain.Program(
        id=row.id,
        name=row.name,
        description=row.description,
        image_url=row.image_url,
        template=row.template,
        metadata=row.program_metadata,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _definition_columns(definition: domain.ProgramDefinition) -> dict:
    data = definition.model_dump(exclude={"metadata"})
    data["program_metadata"] = (
        definition.metadata.model_dump(exclude_none=True)
        if definition.metadata
        else None
    )
    return data


class ProgramRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_all(self) -> list[domain.Program]:
        """Programs, newest first."""
        async with self._session_factory() as session:
            rows = await session.scalars(
                select(Program).order_by(Program.created_at.desc())
            )
            return [_to_program(row) for row in rows]

    async def get(self, program_id: str) -> domain.Program | None:
        async with self._session_factory() as session:
            row = await session.get(Program, program_id)
            return _to_program(row) if row else None

    async def create(self, definition: domain.ProgramDefinition) -> domain.Program:
        now = datetime.now(timezone.utc)
        row = Program(
            id=generate_id(PREFIX_PROGRAM),
            created_at=now,
            updated_at=now,
            **_definition_columns(definition),
        )
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
        return _to_program(row)

    async def update(
        self, program_id: str, definition: domain.ProgramDefinition
    ) -> domain.Program | None:
        async with self._session_factory() as session:
            row = await session.get(Program, program_id)
            if row is None:
                return None
            for key, value in _definition_columns(definition).items():
                setattr(row, key, value)
            row.updated_at = datetime.now(timezone.utc)
            await session.commit()
            return _to_program(row)

    async def delete(self, program_id: str) -> bool:
        async with self._session_factory() as session:
            result = await session.execute(
                delete(Program).where(Program.id == program_id)
            )
            await session.commit()
            return result.rowcount > 0


class UserProgramRepository:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_for_user(self, user_id: str) -> list[domain.UserProgram]:
        async with self._session_factory() as session:
            rows = await session.scalars(
                select(UserProgram)
                .where(UserProgram.user_id == user_id)
                .order_by(UserProgram.created_at.desc())
            )
            return [domain.UserProgram.model_validate(row) for row in rows]

    async def list_for_program(self, program_id: str) -> list[domain.UserProgram]:
        async with self._session_factory() as session:
            rows = await session.scalars(
                select(UserProgram).where(UserProgram.program_id == program_id)
            )
            return [domain.UserProgram.model_validate(row) for row in rows]

    async def get(self, user_program_id: str) -> domain.UserProgram | None:
        async with self._session_factory() as session:
            row = await session.get(UserProgram, user_program_id)
            return domain.UserProgram.model_validate(row) if row else None

    async def create(
        self, user_id: str, program_id: str, customized_plan: str
    ) -> domain.UserProgram:
        row = UserProgram(
            id=generate_id(PREFIX_USER_PROGRAM),
            user_id=user_id,
            program_id=program_id,
            customized_plan=customized_plan,
            created_at=datetime.now(timezone.utc),
        )
        async with self._session_factory() as session:
            session.add(row)
            await session.commit()
        return domain.UserProgram.model_validate(row)

    async def update_plan(self, user_program_id: str, customized_plan: str) -> None:
        async with self._session_factory() as session:
            await session.execute(
                update(UserProgram)
                .where(UserProgram.id == user_program_id)
                .values(customized_plan=customized_plan)
            )
            await session.commit()

    async def set_pdf_path(self, user_program_id: str, pdf_path: str | None) -> None:
        async with self._session_factory() as session:
            await session.execute(
                update(UserProgram)
                .where(UserProgram.id == user_program_id)
                .values(pdf_path=pdf_path)
            )
            await session.commit()

    async def delete(self, user_program_id: str) -> None:
        async with self._session_factory() as session:
            await session.execute(
                delete(UserProgram).where(UserProgram.id == user_program_id)
            )
            await session.commit()
