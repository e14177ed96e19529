import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .analysis import ReadinessAnalyzer
from .config import AnalyzerSettings
from .constants import CHUNK_SIZE, GENERIC_ANALYSIS_ERROR, MAX_DECK_BYTES, MAX_REQUEST_BYTES
from .deck_extractor import (
    TOO_LARGE_MESSAGE,
    parse_deck,
    sanitize_filename,
    validate_deck_extension,
)
from .errors import AnalysisError, DeckExtractionError, DeckInputError, DeckTooLargeError, EmptyDeckError
from .models import AnalysisResult, AnalyzeRequest, HealthResponse, ParsedDeck


logger = logging.getLogger("uvicorn.error")

app = FastAPI(title="Seed Round Readiness Analyzer")

frontend_origins = os.getenv(
    "FRONTEND_ORIGINS",
    "http://localhost:3000,http://127.0.0.1:3000",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in frontend_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def enforce_upload_size(request, call_next):
    if request.method == "POST" and request.url.path == "/api/parse-deck":
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                if int(content_length) > MAX_REQUEST_BYTES:
                    return JSONResponse(status_code=413, content={"detail": TOO_LARGE_MESSAGE})
            except ValueError:
                pass
    return await call_next(request)


def get_settings() -> AnalyzerSettings:
    try:
        return AnalyzerSettings.from_env()
    except ValueError as exc:
        logger.error("invalid_settings error=%s", exc)
        raise HTTPException(status_code=500, detail=GENERIC_ANALYSIS_ERROR) from exc


def get_analyzer(settings: AnalyzerSettings = Depends(get_settings)) -> ReadinessAnalyzer:
    return ReadinessAnalyzer(settings)


async def write_upload_to_disk(
    upload: UploadFile,
    destination: Path,
    *,
    max_size_bytes: int = MAX_DECK_BYTES,
) -> int:
    total_bytes = 0
    destination.parent.mkdir(parents=True, exist_ok=True)

    with destination.open("wb") as output:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            total_bytes += len(chunk)
            if total_bytes > max_size_bytes:
                raise DeckTooLargeError(TOO_LARGE_MESSAGE)
            output.write(chunk)

    await upload.close()
    if total_bytes == 0:
        raise EmptyDeckError("Uploaded file is empty")
    return total_bytes


@app.get("/health", response_model=HealthResponse)
def health(settings: AnalyzerSettings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(status="ok", mode="live" if settings.has_credentials else "demo")


@app.post("/api/parse-deck", response_model=ParsedDeck)
async def parse_deck_upload(file: Optional[UploadFile] = File(None)) -> ParsedDeck:
    raw_name = file.filename if file is not None else None
    tmp_dir = Path(tempfile.mkdtemp(prefix="deck_"))
    try:
        validate_deck_extension(raw_name)
        deck_path = tmp_dir / sanitize_filename(raw_name)
        size_bytes = await write_upload_to_disk(file, deck_path)
        logger.info("deck_upload_saved filename=%s size_bytes=%d", deck_path.name, size_bytes)
        return await run_in_threadpool(parse_deck, deck_path, filename=raw_name)
    except DeckInputError as exc:
        logger.info("deck_upload_rejected reason=%s filename=%s", type(exc).__name__, raw_name)
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    except DeckExtractionError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)


@app.post("/api/analyze", response_model=AnalysisResult)
def analyze(
    payload: AnalyzeRequest,
    analyzer: ReadinessAnalyzer = Depends(get_analyzer),
) -> AnalysisResult:
    try:
        return analyzer.analyze(payload.questionnaire, payload.deck_content)
    except AnalysisError as exc:
        logger.warning("analysis_failed kind=%s error=%s", exc.kind, exc)
        raise HTTPException(status_code=500, detail=GENERIC_ANALYSIS_ERROR) from exc
    except Exception as exc:
        logger.exception("analysis_failed kind=unexpected")
        raise HTTPException(status_code=500, detail=GENERIC_ANALYSIS_ERROR) from exc
