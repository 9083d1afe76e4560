from datetime import timedelta
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from .config import settings
from .database import Storage, get_storage
from .errors import AuthError, ConflictError, NotFoundError, ValidationError
from .security.tokens import TokenCodec
from .services.users_service import get_profile, login, register_user, update_profile

http_bearer = HTTPBearer(auto_error=False)
router = APIRouter(prefix="/api", tags=["auth"])

UNAUTHORIZED = "Unauthorized"


class RegisterRequest(BaseModel):
    username: str | None = None
    password: str | None = None
    full_name: str | None = Field(default=None, max_length=120)
    email: str | None = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    username: str | None = None
    password: str | None = None


class UpdateProfileRequest(BaseModel):
    full_name: str | None = Field(default=None, max_length=120)
    email: str | None = Field(default=None, max_length=255)
    password: str | None = Field(default=None, max_length=128)


class ProfileResponse(BaseModel):
    id: int
    username: str
    full_name: str
    email: str


class TokenResponse(BaseModel):
    token: str


@lru_cache
def get_token_codec() -> TokenCodec:
    return TokenCodec(
        settings.token_secret_key,
        ttl=timedelta(hours=settings.token_ttl_hours),
    )


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    codec: TokenCodec = Depends(get_token_codec),
) -> int:
    # Missing, malformed, forged and expired tokens are deliberately indistinguishable.
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    payload = codec.verify(credentials.credentials.strip())
    if payload is None:
        raise HTTPException(status_code=401, detail=UNAUTHORIZED)

    return payload.user_id


@router.post("/register", response_model=ProfileResponse, status_code=201)
async def register(
    payload: RegisterRequest,
    storage: Storage = Depends(get_storage),
) -> ProfileResponse:
    try:
        user = await register_user(
            storage,
            payload.username,
            payload.password,
            full_name=payload.full_name,
            email=payload.email,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return ProfileResponse(**user)


@router.post("/login", response_model=TokenResponse)
async def login_endpoint(
    payload: LoginRequest,
    storage: Storage = Depends(get_storage),
    codec: TokenCodec = Depends(get_token_codec),
) -> TokenResponse:
    try:
        token = await login(storage, codec, payload.username, payload.password)
    except AuthError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    return TokenResponse(token=token)


@router.get("/profile", response_model=ProfileResponse)
async def me(
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> ProfileResponse:
    try:
        user = await get_profile(storage, user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return ProfileResponse(**user)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile_endpoint(
    payload: UpdateProfileRequest,
    user_id: int = Depends(get_current_user_id),
    storage: Storage = Depends(get_storage),
) -> ProfileResponse:
    try:
        user = await update_profile(storage, user_id, payload.model_dump(exclude_unset=True))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    return ProfileResponse(**user)
