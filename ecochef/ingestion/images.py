"""Image ingestion: turn camera stills or an uploaded file into roster entries.

Core Functions:
- strip_data_uri(): Drop a ``data:<mime>;base64,`` header from a token
- validate_image_format(): Check JPEG/PNG only (magic bytes, not extension)
- validate_image_size(): Check MAX_IMAGE_SIZE_MB limit
- encode_image_file(): Read a file into a base64 token (async)
- ImageIngestion.ingest(): Detect ingredients and append them to the roster (async)
"""

import asyncio
import base64
import re
from pathlib import Path
from typing import Iterable, Union

import filetype

from ecochef.controller.session import SessionContext
from ecochef.models.models import Outcome, ViewState
from ecochef.providers.gateway import ProviderGateway
from ecochef.utils.config import config
from ecochef.utils.errors import DetectionError, IngestionError
from ecochef.utils.logger import logger


DATA_URI_PREFIX = re.compile(r"^data:[^,]*?;base64,", re.IGNORECASE)

STATUS_ANALYZING = "Analizando imagen..."
STATUS_DETECTING = "Detectando ingredientes..."


def strip_data_uri(token: str) -> str:
    """Return the bare base64 payload of a token, with or without a data-URI header."""
    return DATA_URI_PREFIX.sub("", token.strip(), count=1)


def validate_image_format(image_bytes: bytes) -> bool:
    """Validate image format (JPEG or PNG only) from magic bytes."""
    kind = filetype.guess(image_bytes)
    if kind is None or kind.extension not in ("jpg", "jpeg", "png"):
        logger.warning(f"Invalid image format: {kind}. Only JPEG and PNG supported.")
        return False
    return True


def validate_image_size(image_bytes: bytes) -> bool:
    """Validate image size against MAX_IMAGE_SIZE_MB."""
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB")
        return False
    return True


async def encode_image_file(path: Union[str, Path]) -> str:
    """Read a user-selected image file into a base64 token.

    Args:
        path: Path to a JPEG or PNG file.

    Returns:
        Base64 payload without any header.

    Raises:
        IngestionError: If the file cannot be read, is empty, is not JPEG/PNG,
            or exceeds the size limit.
    """
    path = Path(path).expanduser()
    try:
        image_bytes = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        logger.error(f"Could not read image file {path}: {e}")
        raise IngestionError(details={"path": str(path)}) from e

    if not image_bytes:
        raise IngestionError(details={"path": str(path), "reason": "empty file"})
    if not validate_image_format(image_bytes):
        raise IngestionError(details={"path": str(path), "reason": "unsupported format"})
    if not validate_image_size(image_bytes):
        raise IngestionError(details={"path": str(path), "reason": "too large"})

    return base64.b64encode(image_bytes).decode("utf-8")


class ImageIngestion:
    """Sends images to detection and merges the result into the session roster."""

    def __init__(self, gateway: ProviderGateway) -> None:
        self.gateway = gateway

    async def ingest(
        self,
        session: SessionContext,
        images: Iterable[str],
        status: str = STATUS_DETECTING,
    ) -> Outcome:
        """Detect ingredients in the images and append them to the roster.

        On success the view moves to the ingredient roster. On failure the
        roster and view are left as they were and the normalized message is
        surfaced. The loading flag is cleared on every path.
        """
        images = [strip_data_uri(image) for image in images if image and image.strip()]
        if not images:
            session.notify(DetectionError.default_message)
            return Outcome.failure(DetectionError.default_message)

        session.notify(None)
        async with session.loading(status):
            try:
                names = await self.gateway.detect_ingredients(images)
            except DetectionError as e:
                session.notify(e.message)
                return Outcome.failure(e.message)

        session.roster.merge_detected(names)
        session.go_to(ViewState.INGREDIENTS)
        return Outcome.success()

    async def ingest_file(self, session: SessionContext, path: Union[str, Path]) -> Outcome:
        """Read an image file and ingest it as a single-image batch."""
        try:
            async with session.loading(STATUS_ANALYZING):
                token = await encode_image_file(path)
        except IngestionError as e:
            session.notify(e.message)
            return Outcome.failure(e.message)
        return await self.ingest(session, [token], status=STATUS_ANALYZING)
