"""
Signing API Routes

POST /api/sign/photo and POST /api/sign/movie attach content credentials to
uploaded media and return the result. Signing never fails the request: if
credentials cannot be attached the original bytes come back, flagged in the
X-Content-Credentials header.
"""

import asyncio
import logging
import math
import time
import uuid
from datetime import datetime
from pathlib import PurePath
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse, Response
from starlette.background import BackgroundTask

from credential_engine import Movie, Photo, SigningCoordinator

from app.config import settings
from app.middleware.file_size_validator import validate_file_size
from app.models import SigningStatus
from app.services.file_storage import FileStorageManager
from app.services.file_validator import validate_movie_upload, validate_photo_upload
from app.services.signing_service import get_coordinator

logger = logging.getLogger(__name__)

router = APIRouter()

storage = FileStorageManager(settings.STAGING_DIR)

CREDENTIALS_HEADER = "X-Content-Credentials"
COMPANION_HEADER = "X-Companion-Credentials"
SIGNED = "signed"
UNSIGNED = "unsigned"


def _host_capture_time(captured_at: Optional[datetime]) -> float:
    """Express a wall-clock capture instant on the host monotonic clock."""
    now = time.monotonic()
    if captured_at is None:
        return now
    try:
        if captured_at.tzinfo is None:
            captured_at = captured_at.astimezone()
        return now - (datetime.now().astimezone() - captured_at).total_seconds()
    except (OverflowError, ValueError) as e:
        # NaN leaves the photo without a timestamp, so it comes back unsigned
        logger.warning(f"Capture instant {captured_at} cannot be placed on the host clock: {e}")
        return math.nan


@router.post(
    "/sign/photo",
    summary="Sign Photo",
    description="""
Attach content credentials to a still photo, optionally with its live-motion companion clip.

**Form fields:**
- `file`: the photo (JPEG, HEIC, PNG, ...). The type is detected from the content.
- `companion`: optional `.mov`/`.mp4` live-motion clip, signed after the photo.
- `capturedAt`: optional ISO-8601 capture instant (defaults to time of upload).

**Response:** the photo bytes, signed when possible.
- `X-Content-Credentials`: `signed` or `unsigned`
- `X-Companion-Credentials`: `signed` or `unsigned` (only when a companion was sent)
""",
    responses={
        200: {"description": "Photo returned (see X-Content-Credentials)"},
        400: {"description": "Empty upload"},
        413: {"description": "File too large"},
        415: {"description": "Unsupported media type"},
    },
)
async def sign_photo(
    file: UploadFile = File(...),
    companion: Optional[UploadFile] = File(default=None),
    capturedAt: Optional[datetime] = Form(default=None),
    coordinator: SigningCoordinator = Depends(get_coordinator),
) -> Response:
    await validate_file_size(file)
    data = await file.read()
    content_type = validate_photo_upload(data, file.filename, coordinator.resolver)

    companion_movie = None
    if companion is not None:
        await validate_file_size(companion, field="companion")
        validate_movie_upload(companion.filename, coordinator.resolver)
        staged = await storage.save_upload(
            str(uuid.uuid4()), companion, PurePath(companion.filename).suffix
        )
        companion_movie = Movie(path=staged)

    photo = Photo(
        data=data,
        capture_time=_host_capture_time(capturedAt),
        companion=companion_movie,
    )

    logger.info(f"Signing photo {file.filename} ({content_type.mime}, {len(data)} bytes)")

    try:
        signed = await asyncio.get_event_loop().run_in_executor(
            None, coordinator.sign_photo, photo
        )
    finally:
        if companion_movie is not None:
            storage.remove(companion_movie.path)

    headers = {CREDENTIALS_HEADER: SIGNED if signed.data != photo.data else UNSIGNED}
    if companion_movie is not None:
        companion_signed = signed.companion != companion_movie
        headers[COMPANION_HEADER] = SIGNED if companion_signed else UNSIGNED
        if signed.companion is not None:
            storage.remove(signed.companion.path)

    return Response(content=signed.data, media_type=content_type.mime, headers=headers)


@router.post(
    "/sign/movie",
    summary="Sign Movie",
    description="""
Attach content credentials to a movie clip.

**Form fields:**
- `file`: the clip, `.mov` or `.mp4`. The type is taken from the extension.

**Response:** the clip, signed when possible, with `X-Content-Credentials`
set to `signed` or `unsigned`. Staged files are removed after the response.
""",
    responses={
        200: {"description": "Movie returned (see X-Content-Credentials)"},
        400: {"description": "Empty upload"},
        413: {"description": "File too large"},
        415: {"description": "Unsupported media type"},
    },
)
async def sign_movie(
    file: UploadFile = File(...),
    coordinator: SigningCoordinator = Depends(get_coordinator),
) -> FileResponse:
    await validate_file_size(file)
    content_type = validate_movie_upload(file.filename, coordinator.resolver)

    staged = await storage.save_upload(str(uuid.uuid4()), file, PurePath(file.filename).suffix)
    movie = Movie(path=staged)

    logger.info(f"Signing movie {file.filename} ({content_type.mime})")

    signed = await asyncio.get_event_loop().run_in_executor(None, coordinator.sign_movie, movie)
    status = SIGNED if signed.path != movie.path else UNSIGNED

    return FileResponse(
        path=str(signed.path),
        media_type=content_type.mime,
        filename=signed.path.name if status == SIGNED else file.filename,
        headers={CREDENTIALS_HEADER: status},
        background=BackgroundTask(storage.remove, movie.path, signed.path),
    )


@router.get(
    "/signing/status",
    response_model=SigningStatus,
    summary="Signing Configuration",
)
async def signing_status(
    coordinator: SigningCoordinator = Depends(get_coordinator),
) -> SigningStatus:
    registry = coordinator.resolver.registry
    return SigningStatus(
        identityComplete=coordinator.identity.is_complete,
        algorithm=coordinator.identity.algorithm,
        embedder=coordinator.embedder.embedder_name,
        titlePrefix=coordinator.builder.title_prefix,
        photoTypes=[ct.mime for ct in registry if ct.mime.startswith("image/")],
        movieTypes=[ct.mime for ct in registry if ct.mime.startswith("video/")],
    )
