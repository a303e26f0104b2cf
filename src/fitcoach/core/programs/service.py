"""Program catalogue and users' customized programs, including PDF export."""

import asyncio
import logging

from fitcoach.core.errors import NotFound, PdfRenderError
from fitcoach.core.pdf.renderer import render_program_pdf
from fitcoach.core.pdf.storage import PdfStorage
from fitcoach.core.profile.models import UserProfile
from fitcoach.infra.db.programs import ProgramRepository, UserProgramRepository

from .models import Program, ProgramDefinition, UserProgram

logger = logging.getLogger(__name__)

DEFAULT_PDF_TITLE = "Workout Program"


class ProgramService:
    def __init__(
        self,
        programs: ProgramRepository,
        user_programs: UserProgramRepository,
        storage: PdfStorage,
    ) -> None:
        self._programs = programs
        self._user_programs = user_programs
        self._storage = storage

    # -- catalogue ---------------------------------------------------------

    async def list_programs(self) -> list[Program]:
        return await self._programs.list_all()

    async def get_program(self, program_id: str) -> Program:
        program = await self._programs.get(program_id)
        if program is None:
            raise NotFound(f"Program {program_id} not found")
        return program

    async def create_program(self, definition: ProgramDefinition) -> Program:
        program = await self._programs.create(definition)
        logger.info("Program %s created (%s)", program.id, program.name)
        return program

    async def update_program(
        self, program_id: str, definition: ProgramDefinition
    ) -> Program:
        program = await self._programs.update(program_id, definition)
        if program is None:
            raise NotFound(f"Program {program_id} not found")
        return program

    async def delete_program(self, program_id: str) -> None:
        """Delete a program, its user customizations and their PDFs."""
        for user_program in await self._user_programs.list_for_program(program_id):
            if user_program.pdf_path:
                await asyncio.to_thread(self._storage.delete, user_program.pdf_path)
        if not await self._programs.delete(program_id):
            raise NotFound(f"Program {program_id} not found")
        logger.info("Program %s deleted", program_id)

    # -- user programs -----------------------------------------------------

    async def list_user_programs(self, user_id: str) -> list[UserProgram]:
        return await self._user_programs.list_for_user(user_id)

    async def get_user_program(self, user_id: str, user_program_id: str) -> UserProgram:
        user_program = await self._user_programs.get(user_program_id)
        if user_program is None or user_program.user_id != user_id:
            raise NotFound(f"Program {user_program_id} not found")
        return user_program

    async def save_customization(
        self, user_id: str, program_id: str, customized_plan: str
    ) -> UserProgram:
        await self.get_program(program_id)
        user_program = await self._user_programs.create(
            user_id, program_id, customized_plan
        )
        logger.info("Saved program %s for user %s", user_program.id, user_id)
        return user_program

    async def update_user_program(
        self, user_id: str, user_program_id: str, customized_plan: str
    ) -> UserProgram:
        user_program = await self.get_user_program(user_id, user_program_id)
        await self._user_programs.update_plan(user_program_id, customized_plan)
        return user_program.model_copy(update={"customized_plan": customized_plan})

    async def delete_user_program(self, user_id: str, user_program_id: str) -> None:
        user_program = await self.get_user_program(user_id, user_program_id)
        if user_program.pdf_path:
            await asyncio.to_thread(self._storage.delete, user_program.pdf_path)
        await self._user_programs.delete(user_program_id)

    # -- PDF export --------------------------------------------------------

    async def _render_and_store(
        self, user_program: UserProgram, profile: UserProfile
    ) -> tuple[str, bytes]:
        program = await self._programs.get(user_program.program_id)
        title = program.name if program else DEFAULT_PDF_TITLE
        pdf = await asyncio.to_thread(
            render_program_pdf,
            user_program.customized_plan,
            title,
            profile.name,
        )
        path = await asyncio.to_thread(
            self._storage.save, user_program.user_id, user_program.id, pdf
        )
        await self._user_programs.set_pdf_path(user_program.id, path)
        return path, pdf

    async def export_pdf(
        self, user_program: UserProgram, profile: UserProfile
    ) -> str | None:
        """Render and store the PDF; meant to run as a background task.

        Failures are logged, never raised: the program itself is saved.
        """
        try:
            path, _ = await self._render_and_store(user_program, profile)
        except Exception:
            logger.warning(
                "PDF export failed for user program %s", user_program.id, exc_info=True
            )
            return None
        return path

    async def get_pdf(
        self, user_id: str, user_program_id: str, profile: UserProfile
    ) -> bytes:
        """Stored PDF bytes, rendering on demand when none is stored yet."""
        user_program = await self.get_user_program(user_id, user_program_id)
        if user_program.pdf_path:
            data = await asyncio.to_thread(self._storage.read, user_program.pdf_path)
            if data is not None:
                return data
            logger.warning(
                "PDF %s missing from storage; re-rendering", user_program.pdf_path
            )
        try:
            _, pdf = await self._render_and_store(user_program, profile)
        except PdfRenderError:
            raise
        except Exception as exc:
            raise PdfRenderError("Failed to store PDF") from exc
        return pdf
