"""Authentication routes - test session minting and current user."""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr
from typing import Optional
import logging
import os

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from database import get_session
from dependencies import require_auth
from models import AuthSession, User, hash_token, generate_session_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


class MintSessionRequest(BaseModel):
    email: EmailStr


class MintSessionResponse(BaseModel):
    session_token: str
    user_id: int


class MeResponse(BaseModel):
    user_id: int
    email: Optional[str] = None


@router.post("/test/mint-session", response_model=MintSessionResponse)
async def mint_session(request: MintSessionRequest, session: AsyncSession = Depends(get_session)):
    """
    Test-only endpoint to mint a session without a login flow.
    Only enabled when E2E_TEST_MODE=1 env var is set.
    """
    if os.getenv("E2E_TEST_MODE") != "1":
        raise HTTPException(status_code=404, detail="Not Found")

    email = request.email.lower()

    result = await session.exec(select(User).where(User.email == email))
    user = result.first()
    if not user:
        user = User(email=email)
        session.add(user)
        await session.commit()
        await session.refresh(user)

    token = generate_session_token()
    session.add(AuthSession(
        email=email,
        user_id=user.id,
        session_token_hash=hash_token(token),
    ))
    await session.commit()
    logger.info("Minted test session", extra={"user_id": user.id})

    return {"session_token": token, "user_id": user.id}


@router.get("/auth/me", response_model=MeResponse)
async def me(auth_session: AuthSession = Depends(require_auth)):
    """Session check: 401 once the token is unknown, revoked or expired."""
    return {"user_id": auth_session.user_id, "email": auth_session.email}
