from fastapi import APIRouter, status

from .deps import AuthServiceDep, BearerTokenDep
from .models import LoginRequest, SessionResponse, SignupRequest

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(body: SignupRequest, auth: AuthServiceDep) -> SessionResponse:
    user, token = await auth.signup(body.email, body.password, body.name)
    return SessionResponse(token=token, user=user)


@router.post("/login")
async def login(body: LoginRequest, auth: AuthServiceDep) -> SessionResponse:
    user, token = await auth.login(body.email, body.password)
    return SessionResponse(token=token, user=user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(token: BearerTokenDep, auth: AuthServiceDep) -> None:
    await auth.logout(token)
