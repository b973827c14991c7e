import logging

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from resume_builder.database import get_db
from resume_builder.services.auth_service import AuthService, auth_service
from resume_builder.services.document_repository import DocumentRepository
from resume_builder.services.kv_store import KeyValueStore, SqlKeyValueStore

logger = logging.getLogger("resume_builder.auth")


def get_auth_verifier() -> AuthService:
    return auth_service


def get_store(db: Session = Depends(get_db)) -> KeyValueStore:
    return SqlKeyValueStore(db)


def get_document_repository(store: KeyValueStore = Depends(get_store)) -> DocumentRepository:
    return DocumentRepository(store)


async def require_token(authorization: str | None = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return authorization[7:]


async def require_user(
    token: str = Depends(require_token),
    verifier: AuthService = Depends(get_auth_verifier),
) -> dict:
    user = verifier.verify(token)
    if user is None:
        logger.warning("Rejected bearer token")
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
