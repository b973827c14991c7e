from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from resume_builder.database import get_db
from resume_builder.dependencies import get_auth_verifier, require_token, require_user
from resume_builder.exceptions import AuthProviderError
from resume_builder.schemas.auth import (
    SigninRequest,
    SigninResponse,
    SignupRequest,
    SignupResponse,
    ThrottleResponse,
)
from resume_builder.schemas.document import SuccessResponse
from resume_builder.services.auth_service import AuthService

router = APIRouter(tags=["auth"])


@router.post("/signup", response_model=SignupResponse)
async def signup(
    req: SignupRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_verifier),
):
    try:
        user = auth.create_user(db, req.email, req.password, req.full_name)
    except AuthProviderError as exc:
        raise HTTPException(status_code=400, detail=f"Signup failed: {exc}")
    return SignupResponse(user=user)


@router.post("/signin", response_model=SigninResponse | ThrottleResponse)
async def signin(
    req: SigninRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_verifier),
):
    result = auth.sign_in(db, req.email, req.password)
    if result is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    if "error" in result:
        raise HTTPException(status_code=429, detail=result)
    return SigninResponse(**result)


@router.post("/signout", response_model=SuccessResponse, dependencies=[Depends(require_user)])
async def signout(
    token: str = Depends(require_token),
    auth: AuthService = Depends(get_auth_verifier),
):
    auth.sign_out(token)
    return SuccessResponse()
