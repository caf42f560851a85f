from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from coastwatch import schemas
from coastwatch.api.deps import get_current_user_id
from coastwatch.core.database import get_db
from coastwatch.core.errors import format_success
from coastwatch.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

def _auth_payload(user, token: str) -> dict:
    return {"user": schemas.User.model_validate(user).dump(), "token": token}

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: schemas.RegisterRequest, db: AsyncSession = Depends(get_db)):
    user, token = await AuthService.register(
        db, email=body.email, password=body.password, name=body.name, role=body.role
    )
    return format_success(_auth_payload(user, token), "Registered")

@router.post("/login")
async def login(body: schemas.LoginRequest, db: AsyncSession = Depends(get_db)):
    user, token = await AuthService.login(db, email=body.email, password=body.password)
    return format_success(_auth_payload(user, token), "Logged in")

@router.get("/me")
async def me(user_id: int = Depends(get_current_user_id), db: AsyncSession = Depends(get_db)):
    user = await AuthService.current_user(db, user_id)
    return format_success({"user": schemas.User.model_validate(user).dump()})
