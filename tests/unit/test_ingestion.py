"""Unit tests for image ingestion.

Tests cover:
- Data-URI stripping
- Image format and size validation
- File encoding
- Detection hand-off and roster merge
"""

import base64

import pytest

from ecochef.controller.session import SessionContext
from ecochef.ingestion.images import (
    ImageIngestion,
    encode_image_file,
    strip_data_uri,
    validate_image_format,
    validate_image_size,
)
from ecochef.models.models import Ingredient, ViewState
from ecochef.roster.roster import IngredientRoster
from ecochef.utils.errors import DetectionError, IngestionError

JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR" + b"\x00" * 32


class TestStripDataUri:
    def test_strips_header(self):
        assert strip_data_uri("data:image/png;base64,AAAA") == "AAAA"

    def test_bare_token_is_unchanged(self):
        assert strip_data_uri("AAAA") == "AAAA"


class TestValidateImageFormat:
    """Test image format validation."""

    def test_valid_jpeg(self):
        assert validate_image_format(JPEG_BYTES) is True

    def test_valid_png(self):
        assert validate_image_format(PNG_BYTES) is True

    def test_invalid_format(self):
        assert validate_image_format(b"GIF89a") is False

    def test_empty_bytes(self):
        assert validate_image_format(b"") is False


class TestValidateImageSize:
    def test_valid_size(self):
        assert validate_image_size(b"x" * (1024 * 1024)) is True

    def test_exceeds_limit(self):
        assert validate_image_size(b"x" * (6 * 1024 * 1024)) is False


class TestEncodeImageFile:
    async def test_encodes_jpeg_file(self, tmp_path):
        path = tmp_path / "fridge.jpg"
        path.write_bytes(JPEG_BYTES)

        token = await encode_image_file(path)

        assert base64.b64decode(token) == JPEG_BYTES

    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(IngestionError):
            await encode_image_file(tmp_path / "missing.jpg")

    async def test_unsupported_format_raises(self, tmp_path):
        path = tmp_path / "anim.gif"
        path.write_bytes(b"GIF89a" + b"\x00" * 32)

        with pytest.raises(IngestionError) as exc_info:
            await encode_image_file(path)

        assert exc_info.value.message == "Error al procesar la imagen. Inténtalo de nuevo."


class TestImageIngestion:
    """Detection results land in the roster; failures change nothing."""

    async def test_ingest_appends_and_moves_to_roster(self, mock_gateway):
        mock_gateway.detect_ingredients.return_value = ["tomate", "queso"]
        session = SessionContext(view=ViewState.CAMERA)

        outcome = await ImageIngestion(mock_gateway).ingest(session, ["imgA", "imgB"])

        assert outcome.ok is True
        mock_gateway.detect_ingredients.assert_awaited_once_with(["imgA", "imgB"])
        assert session.roster.names() == ["Tomate", "Queso"]
        assert session.view == ViewState.INGREDIENTS
        assert session.is_loading is False

    async def test_ingest_strips_data_uri_headers(self, mock_gateway):
        session = SessionContext()

        await ImageIngestion(mock_gateway).ingest(session, ["data:image/jpeg;base64,QUJD"])

        mock_gateway.detect_ingredients.assert_awaited_once_with(["QUJD"])

    async def test_ingest_failure_leaves_state_unchanged(self, mock_gateway):
        mock_gateway.detect_ingredients.side_effect = DetectionError()
        existing = Ingredient(id="x", name="Pan")
        session = SessionContext(view=ViewState.CAMERA, roster=IngredientRoster([existing]))

        outcome = await ImageIngestion(mock_gateway).ingest(session, ["img"])

        assert outcome.ok is False
        assert outcome.message == DetectionError.default_message
        assert session.message == DetectionError.default_message
        assert session.roster.items == [existing]
        assert session.view == ViewState.CAMERA
        assert session.is_loading is False

    async def test_ingest_without_images_does_not_call_gateway(self, mock_gateway):
        outcome = await ImageIngestion(mock_gateway).ingest(SessionContext(), [])

        assert outcome.ok is False
        mock_gateway.detect_ingredients.assert_not_awaited()

    async def test_loading_flag_is_set_during_detection(self, mock_gateway):
        session = SessionContext()
        seen = {}

        async def detect(images):
            seen["loading"] = session.is_loading
            seen["message"] = session.loading_message
            return ["huevo"]

        mock_gateway.detect_ingredients.side_effect = detect

        await ImageIngestion(mock_gateway).ingest(session, ["img"])

        assert seen == {"loading": True, "message": "Detectando ingredientes..."}

    async def test_ingest_file_reads_and_detects(self, mock_gateway, tmp_path):
        mock_gateway.detect_ingredients.return_value = ["leche"]
        path = tmp_path / "fridge.jpg"
        path.write_bytes(JPEG_BYTES)
        session = SessionContext()

        outcome = await ImageIngestion(mock_gateway).ingest_file(session, path)

        assert outcome.ok is True
        sent = mock_gateway.detect_ingredients.await_args.args[0]
        assert base64.b64decode(sent[0]) == JPEG_BYTES
        assert session.roster.names() == ["Leche"]

    async def test_ingest_file_error_stays_home(self, mock_gateway, tmp_path):
        session = SessionContext()

        outcome = await ImageIngestion(mock_gateway).ingest_file(session, tmp_path / "nope.png")

        assert outcome.ok is False
        assert session.view == ViewState.HOME
        assert session.is_loading is False
        mock_gateway.detect_ingredients.assert_not_awaited()
