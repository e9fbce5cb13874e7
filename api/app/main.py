import logging
import os
from typing import AsyncIterator, Dict, Optional

import httpx
from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import Settings, settings
from app.core.errors import StudyToolError, ValidationError
from app.core.logging import setup_logging
from app.ingestion.parser import extract_text, resolve_content_type
from app.ingestion.uploads import stored_upload
from app.schemas.study import GenerateRequest, GenerateResponse, UploadResponse
from app.studio.generator import generate_study_material

setup_logging(settings.log_level)
logger = logging.getLogger("api")

app = FastAPI(
    title="StudyDesk API",
    version="1.0.0",
    description="Upload notes -> extract text -> flashcards, quiz and summary.",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.allowed_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_settings() -> Settings:
    return settings


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient() as client:
        yield client


@app.exception_handler(StudyToolError)
async def _study_tool_error(request: Request, exc: StudyToolError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body",))
    msg = first.get("msg", "Invalid request")
    detail = f"{field}: {msg}" if field else msg
    return JSONResponse(status_code=400, content={"error": detail})


@app.get("/")
async def root() -> Dict[str, str]:
    return {"message": "StudyDesk API is running. See /docs, /health, /upload, /generate."}


@app.get("/health")
async def health(cfg: Settings = Depends(get_settings)) -> Dict[str, object]:
    return {
        "status": "ok",
        "env": cfg.app_env,
        "model": cfg.llm_model,
        "llm_configured": bool(cfg.llm_api_key.strip()),
    }


@app.post("/upload", response_model=UploadResponse)
async def upload(
    file: Optional[UploadFile] = File(None),
    cfg: Settings = Depends(get_settings),
) -> UploadResponse:
    """
    Upload -> temp file -> extract text -> temp file removed.
    """
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    content_type = resolve_content_type(file.filename, file.content_type)

    raw = await file.read()
    if not raw:
        raise ValidationError("Empty file")
    if len(raw) > cfg.max_upload_bytes:
        raise ValidationError(f"File too large. Maximum size is {cfg.max_upload_bytes // (1024 * 1024)} MB")

    suffix = os.path.splitext(file.filename)[1].lower()
    with stored_upload(raw, suffix=suffix, upload_dir=cfg.upload_dir) as path:
        text = extract_text(path, content_type)

    logger.info(
        "extracted name=%s content_type=%s size=%s chars=%s",
        file.filename,
        content_type,
        len(raw),
        len(text),
    )
    return UploadResponse(text=text, content_type=content_type, chars=len(text))


@app.post("/generate", response_model=GenerateResponse)
async def generate(
    req: GenerateRequest,
    cfg: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> GenerateResponse:
    """
    Extracted text -> one LLM call -> flashcards, quiz and summary.
    """
    text = (req.text or "").strip()
    if not text:
        raise ValidationError("No text provided")

    outcome = await generate_study_material(client, text, cfg)
    return GenerateResponse(
        result=outcome.material,
        truncated=outcome.truncated,
        input_chars=outcome.input_chars,
    )


def run() -> None:
    import uvicorn

    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
