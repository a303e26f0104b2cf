from typing import Annotated

from fastapi import Depends
from langchain_core.language_models import BaseChatModel

from fitcoach.core.llm.deps import get_llm
from fitcoach.core.pdf.storage import PdfStorage, get_pdf_storage
from fitcoach.infra.db import (
    ProgramRepository,
    UserProgramRepository,
    get_program_repository,
    get_user_program_repository,
)

from .customizer import ProgramCustomizer
from .service import ProgramService


def get_program_service(
    programs: Annotated[ProgramRepository, Depends(get_program_repository)],
    user_programs: Annotated[
        UserProgramRepository, Depends(get_user_program_repository)
    ],
    storage: Annotated[PdfStorage, Depends(get_pdf_storage)],
) -> ProgramService:
    return ProgramService(programs, user_programs, storage)


def get_program_customizer(
    llm: Annotated[BaseChatModel, Depends(get_llm)],
) -> ProgramCustomizer:
    return ProgramCustomizer(llm)
