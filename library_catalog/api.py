import logging
from datetime import datetime, timezone
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import APIKeyHeader
from pydantic import BaseModel, Field, StrictInt

import library_catalog.database as database
from library_catalog.app_factory import build_service
from library_catalog.config import configure_logging, settings
from library_catalog.database import get_db_connection
from library_catalog.library_service import InvalidOperationError, LibraryService

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(title=f"{settings.app_name} API")

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Models ---
class BookOut(BaseModel):
    title: str
    copies: int


class BookCreate(BaseModel):
    title: str = Field(..., description="Title to add")
    copies: StrictInt = Field(..., description="Number of copies to add (must be positive)")


class MemberAction(BaseModel):
    member_id: int


class ActionResult(BaseModel):
    success: bool


# --- Dependencies ---
_service: LibraryService | None = None
_service_db_file: str | None = None


def get_service() -> LibraryService:
    """Shared LibraryService, rebuilt when DATABASE_FILE changes."""
    global _service, _service_db_file
    if _service is None or _service_db_file != database.DATABASE_FILE:
        if _service is not None:
            _service.close()
        _service = build_service(database.DATABASE_FILE)
        _service_db_file = database.DATABASE_FILE
    return _service


api_key_header = APIKeyHeader(name="X-API-Key")


def get_api_key(api_key: str = Security(api_key_header)):
    """Dependency that validates the API key."""
    if api_key == settings.api_key:
        return api_key
    raise HTTPException(status_code=403, detail="Could not validate credentials")


# --- Health ---
@app.get("/health")
def health():
    db_ok = True
    try:
        conn = get_db_connection()
        conn.execute("SELECT 1")
        conn.close()
    except Exception:
        logger.exception("Health check could not reach the database")
        db_ok = False
    return {
        "status": "healthy" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "db": db_ok,
    }


# --- Books ---
@app.get("/books", response_model=List[BookOut])
def list_books(service: LibraryService = Depends(get_service)):
    return [b.to_dict() for b in service.repository.get_all_books()]


@app.get("/books/available", response_model=List[BookOut])
def list_available_books(service: LibraryService = Depends(get_service)):
    return [b.to_dict() for b in service.get_available_books()]


@app.post("/books", response_model=BookOut, status_code=201, dependencies=[Depends(get_api_key)])
def add_book(payload: BookCreate, service: LibraryService = Depends(get_service)):
    try:
        service.add_book(payload.title, payload.copies)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    book = service.repository.find_book(payload.title)
    return book.to_dict()


@app.post("/books/{title:path}/borrow", response_model=ActionResult, dependencies=[Depends(get_api_key)])
def borrow_book(title: str, payload: MemberAction, service: LibraryService = Depends(get_service)):
    try:
        return {"success": service.borrow_book(payload.member_id, title)}
    except InvalidOperationError as e:
        raise HTTPException(status_code=403, detail=str(e))


@app.post("/books/{title:path}/return", response_model=ActionResult, dependencies=[Depends(get_api_key)])
def return_book(title: str, payload: MemberAction, service: LibraryService = Depends(get_service)):
    return {"success": service.return_book(payload.member_id, title)}
