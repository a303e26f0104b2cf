"""Program browsing, customization and the user's saved programs."""

from fastapi import APIRouter, BackgroundTasks, Response, status

from fitcoach.core.programs.models import Program, UserProgram

from .deps import CurrentUserDep, ProgramCustomizerDep, ProgramServiceDep
from .models import CustomizeResponse, SaveProgramRequest, UpdateProgramRequest

PDF_MEDIA_TYPE = "application/pdf"

router = APIRouter(prefix="/api/v1/programs", tags=["programs"])


@router.get("")
async def list_programs(
    _user: CurrentUserDep, programs: ProgramServiceDep
) -> list[Program]:
    return await programs.list_programs()


@router.post("/{program_id}/customize")
async def customize_program(
    program_id: str,
    user: CurrentUserDep,
    programs: ProgramServiceDep,
    customizer: ProgramCustomizerDep,
) -> CustomizeResponse:
    """Generate a customized plan for review; nothing is saved yet."""
    program = await programs.get_program(program_id)
    plan = await customizer.customize(program, user)
    return CustomizeResponse(program_id=program.id, customized_plan=plan)


@router.get("/mine")
async def list_my_programs(
    user: CurrentUserDep, programs: ProgramServiceDep
) -> list[UserProgram]:
    return await programs.list_user_programs(user.id)


@router.post("/mine", status_code=status.HTTP_201_CREATED)
async def save_my_program(
    body: SaveProgramRequest,
    user: CurrentUserDep,
    programs: ProgramServiceDep,
    background: BackgroundTasks,
) -> UserProgram:
    user_program = await programs.save_customization(
        user.id, body.program_id, body.customized_plan
    )
    background.add_task(programs.export_pdf, user_program, user)
    return user_program


@router.put("/mine/{user_program_id}")
async def update_my_program(
    user_program_id: str,
    body: UpdateProgramRequest,
    user: CurrentUserDep,
    programs: ProgramServiceDep,
    background: BackgroundTasks,
) -> UserProgram:
    user_program = await programs.update_user_program(
        user.id, user_program_id, body.customized_plan
    )
    background.add_task(programs.export_pdf, user_program, user)
    return user_program


@router.delete("/mine/{user_program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_program(
    user_program_id: str, user: CurrentUserDep, programs: ProgramServiceDep
) -> None:
    await programs.delete_user_program(user.id, user_program_id)


@router.get("/mine/{user_program_id}/pdf")
async def download_my_program(
    user_program_id: str, user: CurrentUserDep, programs: ProgramServiceDep
) -> Response:
    pdf = await programs.get_pdf(user.id, user_program_id, user)
    return Response(
        content=pdf,
        media_type=PDF_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{user_program_id}.pdf"'
        },
    )
