"""Video source abstractions.

The tracking engine consumes frames through a small interface (`VideoSource`)
so a video file and the synthetic demo feed can be swapped freely.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import cv2
import numpy as np

from storeflow.core.types import Frame, FrameSize

logger = logging.getLogger(__name__)


class VideoSource(ABC):
    """Base interface for anything that can produce video frames."""

    @abstractmethod
    def read(self) -> Frame | None:
        """Return the next frame, or `None` when unavailable."""

        raise NotImplementedError

    @abstractmethod
    def frame_size(self) -> FrameSize:
        """Return the frame dimensions in pixels."""

        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        """Release any underlying resources."""

        raise NotImplementedError


class FileSource(VideoSource):
    """A `VideoSource` backed by `cv2.VideoCapture` on a video file."""

    def __init__(self, path: str) -> None:
        self.cap = cv2.VideoCapture(path)
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open video source: {path}")
        self._size = FrameSize(
            int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        logger.info("Opened video %s (%dx%d)", path, self._size.width, self._size.height)

    def read(self) -> Frame | None:
        ok, frame = self.cap.read()
        if not ok:
            return None
        return frame

    def frame_size(self) -> FrameSize:
        return self._size

    def close(self) -> None:
        self.cap.release()


class BlankSource(VideoSource):
    """Endless black frames of a fixed size, for synthetic detection sources."""

    def __init__(self, size: FrameSize) -> None:
        self._size = size
        self._frame = np.zeros((size.height, size.width, 3), dtype=np.uint8)

    def read(self) -> Frame | None:
        return self._frame

    def frame_size(self) -> FrameSize:
        return self._size

    def close(self) -> None:
        pass
