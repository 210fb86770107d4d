"""File upload endpoint for offline audio analysis."""

import asyncio
import logging

from fastapi import APIRouter, File, HTTPException, Query, UploadFile

from swappy.analysis.engine import AnalysisEngine
from swappy.api.schemas import AudioAnalysisResponse
from swappy.config import settings
from swappy.errors import UnsupportedAudioError

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_EXTENSIONS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".aac", ".aiff"}


@router.post("/analyze", response_model=AudioAnalysisResponse)
async def analyze_file(
    file: UploadFile = File(...),
    sensitivity: float | None = Query(default=None),
    peak_threshold: float | None = Query(default=None),
    relative_threshold: float | None = Query(default=None),
):
    """Decode an uploaded audio file and return its beats and transients."""
    if file.filename:
        ext = "." + file.filename.rsplit(".", 1)[-1].lower() if "." in file.filename else ""
        if ext and ext not in ALLOWED_EXTENSIONS:
            logger.warning(f"Rejected upload {file.filename!r}: unsupported extension")
            raise HTTPException(400, f"Unsupported format. Use: {', '.join(sorted(ALLOWED_EXTENSIONS))}")

    content = await file.read()
    if len(content) > settings.max_upload_mb * 1024 * 1024:
        logger.warning(f"Rejected upload {file.filename!r}: {len(content)} bytes")
        raise HTTPException(400, f"File too large (max {settings.max_upload_mb} MB)")

    engine = AnalysisEngine(
        sensitivity=sensitivity,
        peak_threshold=peak_threshold,
        relative_threshold=relative_threshold,
    )
    try:
        # Run analysis in thread pool to avoid blocking
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, engine.analyze_file, content)
    except UnsupportedAudioError as e:
        logger.warning(f"Rejected upload {file.filename!r}: {e}")
        raise HTTPException(400, "Unsupported or corrupt audio file")
    except Exception:
        logger.exception("Analysis failed")
        raise HTTPException(500, "Analysis failed")

    return AudioAnalysisResponse(
        duration=result.info.duration,
        sample_rate=result.info.sample_rate,
        channels=result.info.channels,
        beats=result.beats,
        bpm=result.bpm,
        transients=result.transients,
    )
