"""Camera capture session backed by OpenCV.

The session exclusively owns one device handle and an ordered buffer of base64
JPEG stills. The handle must be released on every path that leaves the camera
view; ``stop()`` is idempotent and the context-manager forms call it on exit.
"""

import asyncio
import base64
from typing import Any, Callable, Optional

import cv2
import numpy as np

from ecochef.utils.config import config
from ecochef.utils.errors import CameraError
from ecochef.utils.logger import logger


DeviceOpener = Callable[[int], Any]


def encode_frame(frame: np.ndarray, quality: int) -> Optional[str]:
    """Encode a BGR frame to a base64 JPEG token at its native resolution.

    Returns:
        The token, or None if the frame is empty or OpenCV refuses to encode it.
    """
    if frame is None or frame.size == 0 or frame.shape[0] == 0 or frame.shape[1] == 0:
        return None
    success, buffer = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not success:
        return None
    return base64.b64encode(buffer.tobytes()).decode("utf-8")


class CaptureSession:
    """Live camera plus the stills captured since the session started.

    Args:
        camera_index: OpenCV device index (the environment-facing camera).
        jpeg_quality: Fixed JPEG quality for every still (1-100).
        opener: Callable returning a VideoCapture-like object exposing
            ``isOpened()``, ``read()`` and ``release()``.
    """

    def __init__(
        self,
        camera_index: Optional[int] = None,
        jpeg_quality: Optional[int] = None,
        opener: Optional[DeviceOpener] = None,
    ) -> None:
        self.camera_index = config.CAMERA_INDEX if camera_index is None else camera_index
        self.jpeg_quality = config.CAPTURE_JPEG_QUALITY if jpeg_quality is None else jpeg_quality
        self._opener = opener or cv2.VideoCapture
        self._device: Any = None
        self._buffer: list[str] = []
        # Bumped by stop(); an open that finishes under a newer generation is discarded
        self._generation = 0

    @property
    def is_active(self) -> bool:
        return self._device is not None

    @property
    def images(self) -> tuple[str, ...]:
        """Captured stills in capture order (read-only view)."""
        return tuple(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)

    async def start(self) -> bool:
        """Open the camera and begin a fresh session with an empty buffer.

        Returns:
            True once the device is held; False if stop() was called while
            the device was opening, in which case it has been released.

        Raises:
            CameraError: If permission is denied or the device cannot be opened.
        """
        # Never hold two handles at once
        self.stop()
        self.reset()
        generation = self._generation

        try:
            device = await asyncio.to_thread(self._opener, self.camera_index)
        except Exception as e:
            logger.error(f"Camera {self.camera_index} could not be opened: {e}")
            raise CameraError(details={"camera_index": self.camera_index}) from e

        if device is None or not device.isOpened():
            if device is not None:
                device.release()
            logger.error(f"Camera {self.camera_index} is not available")
            raise CameraError(details={"camera_index": self.camera_index})

        if generation != self._generation:
            device.release()
            logger.info(f"Camera {self.camera_index} released: stopped while opening")
            return False

        self._device = device
        logger.info(f"Camera {self.camera_index} started")
        return True

    def capture(self) -> bool:
        """Grab the current frame and append it to the buffer.

        Returns:
            True if a still was appended; False (silently) when no device is
            active or no decoded frame is available yet.
        """
        if self._device is None:
            return False

        ok, frame = self._device.read()
        if not ok or frame is None:
            logger.debug("Capture skipped: no decoded frame available")
            return False

        token = encode_frame(frame, self.jpeg_quality)
        if token is None:
            logger.debug("Capture skipped: frame has no pixels or could not be encoded")
            return False

        self._buffer.append(token)
        logger.debug(f"Captured still #{len(self._buffer)} ({frame.shape[1]}x{frame.shape[0]})")
        return True

    def stop(self) -> None:
        """Release the device, or abandon an open in progress. Safe to call any number of times."""
        self._generation += 1
        if self._device is None:
            return
        device, self._device = self._device, None
        device.release()
        logger.info(f"Camera {self.camera_index} stopped")

    def reset(self) -> None:
        """Clear the capture buffer."""
        self._buffer.clear()

    def drain(self) -> list[str]:
        """Hand over the buffered stills in capture order and clear the buffer."""
        images, self._buffer = self._buffer, []
        return images

    def __enter__(self) -> "CaptureSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    async def __aenter__(self) -> "CaptureSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.stop()
