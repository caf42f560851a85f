import asyncio
from datetime import datetime, timedelta, timezone

from jose import jwt, JWTError
from loguru import logger
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from coastwatch.core.config import settings
from coastwatch.core.errors import BadRequest, Conflict, Forbidden, Internal, NotFound, Unauthorized
from coastwatch.models.user import User, Role
from coastwatch.services.validation import is_blank, parse_enum

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)


class AuthService:
    @staticmethod
    async def hash_password(password: str) -> str:
        return await asyncio.to_thread(pwd_context.hash, password)

    @staticmethod
    async def verify_password(password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(pwd_context.verify, password, password_hash)

    @staticmethod
    def issue_token(user_id: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "userId": user_id,
            "iss": settings.JWT_ISSUER,
            "iat": now,
            "exp": now + timedelta(days=settings.JWT_EXPIRE_DAYS),
        }
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def verify(token: str) -> int:
        """Return the user id bound to ``token``; Forbidden if it is not one we issued and still valid."""
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALGORITHM],
                issuer=settings.JWT_ISSUER,
            )
        except JWTError as e:
            logger.info(f"Rejected token: {e}")
            raise Forbidden("Invalid token")
        user_id = payload.get("userId")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
            raise Forbidden("Invalid token")
        return user_id

    @staticmethod
    async def register(db: AsyncSession, email, password, name=None, role=None):
        if is_blank(email) or is_blank(password):
            raise BadRequest("Email and password required")
        email = email.strip()
        user_role = Role.CITIZEN if is_blank(role) else parse_enum(Role, role, "role")

        try:
            result = await db.execute(select(User).where(User.email == email))
            if result.scalar_one_or_none():
                raise Conflict("Email in use")

            user = User(
                name=name.strip() if isinstance(name, str) and name.strip() else None,
                email=email,
                password_hash=await AuthService.hash_password(password),
                role=user_role,
            )
            db.add(user)
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise Conflict("Email in use")
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Database error during registration: {e}")
            raise Internal("Failed to register user")

        logger.info(f"Registered user id={user.id} role={user.role.value}")
        return user, AuthService.issue_token(user.id)

    @staticmethod
    async def login(db: AsyncSession, email, password):
        if is_blank(email) or is_blank(password):
            raise BadRequest("Email and password required")

        try:
            result = await db.execute(select(User).where(User.email == email.strip()))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Database error during login: {e}")
            raise Internal("Failed to log in")

        if not user or not await AuthService.verify_password(password, user.password_hash):
            logger.info("Login failed: invalid credentials")
            raise Unauthorized("Invalid credentials")

        logger.info(f"User id={user.id} logged in")
        return user, AuthService.issue_token(user.id)

    @staticmethod
    async def current_user(db: AsyncSession, user_id: int) -> User:
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Database error loading user {user_id}: {e}")
            raise Internal("Failed to fetch user")
        if user is None:
            raise NotFound("User not found")
        return user
