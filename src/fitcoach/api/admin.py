"""Admin endpoints: users, programs, settings and statistics."""

from fastapi import APIRouter, UploadFile, status
from fastapi.responses import JSONResponse

from fitcoach.core.admin.models import SystemSetting, UserStats
from fitcoach.core.errors import InvalidInput
from fitcoach.core.profile.models import AdminUserUpdate, UserProfile
from fitcoach.core.programs.models import Program, ProgramDefinition
from fitcoach.core.programs.yaml_loader import parse_program_yaml

from .deps import (
    AdminServiceDep,
    AdminUserDep,
    ProgramServiceDep,
    SettingsServiceDep,
)
from .models import SettingUpdateRequest

MAX_UPLOAD_BYTES = 1024 * 1024

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.get("/stats")
async def stats(_admin: AdminUserDep, admin: AdminServiceDep) -> UserStats:
    return await admin.stats()


# -- users -------------------------------------------------------------------


@router.get("/users")
async def list_users(_admin: AdminUserDep, admin: AdminServiceDep) -> list[UserProfile]:
    return await admin.list_users()


@router.put("/users/{user_id}")
async def update_user(
    user_id: str,
    body: AdminUserUpdate,
    current: AdminUserDep,
    admin: AdminServiceDep,
) -> UserProfile:
    return await admin.update_user(user_id, body, current.id)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str, current: AdminUserDep, admin: AdminServiceDep
) -> None:
    if user_id == current.id:
        raise InvalidInput("Admins cannot delete their own account")
    await admin.delete_user(user_id, current.id)


# -- programs ----------------------------------------------------------------


@router.post("/programs", status_code=status.HTTP_201_CREATED)
async def create_program(
    body: ProgramDefinition, _admin: AdminUserDep, programs: ProgramServiceDep
) -> Program:
    return await programs.create_program(body)


@router.post("/programs/upload", status_code=status.HTTP_201_CREATED, response_model=None)
async def upload_program(
    file: UploadFile, _admin: AdminUserDep, programs: ProgramServiceDep
) -> Program | JSONResponse:
    """Create a program from a YAML definition file.

    Validation problems come back as 422 with a list of
    ``{field, message, line}`` errors.
    """
    raw = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(raw) > MAX_UPLOAD_BYTES:
        raise InvalidInput("Program file is too large")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidInput("Program file must be UTF-8 text") from exc

    parsed = parse_program_yaml(text)
    if parsed.definition is None:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Invalid program file",
                "code": InvalidInput.code,
                "errors": [e.model_dump() for e in parsed.errors],
            },
        )
    return await programs.create_program(parsed.definition)


@router.put("/programs/{program_id}")
async def update_program(
    program_id: str,
    body: ProgramDefinition,
    _admin: AdminUserDep,
    programs: ProgramServiceDep,
) -> Program:
    return await programs.update_program(program_id, body)


@router.delete("/programs/{program_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_program(
    program_id: str, _admin: AdminUserDep, programs: ProgramServiceDep
) -> None:
    await programs.delete_program(program_id)


# -- settings ----------------------------------------------------------------


@router.get("/settings")
async def list_settings(
    _admin: AdminUserDep, settings: SettingsServiceDep
) -> list[SystemSetting]:
    return await settings.list_settings()


@router.put("/settings/{key}")
async def update_setting(
    key: str,
    body: SettingUpdateRequest,
    current: AdminUserDep,
    settings: SettingsServiceDep,
) -> SystemSetting:
    return await settings.update_setting(key, body.value, current.id)
