"""Single-process extraction: split ffmpeg's MJPEG stream into JPEG frames.

ffmpeg writes the thumbnails back to back on stdout with nothing between
them, so frame boundaries are recovered from the JPEG markers themselves:
SOI (FF D8) opens a frame and EOI (FF D9) closes it.
"""

from __future__ import annotations

import enum
import logging
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Callable, ClassVar

from bifgen.core.exceptions import DemuxError, ExtractionTimeout
from ._frame_source import FrameSource

logger = logging.getLogger(__name__)

SOI = b"\xff\xd8"
EOI = b"\xff\xd9"
CHUNK_SIZE = 32 * 1024


class DemuxState(enum.Enum):
    SEEKING = "seeking"
    CAPTURING = "capturing"


class MJPEGDemuxer:
    """Incremental JPEG splitter, fed with chunks of arbitrary size.

    State carried between chunks:
        state: SEEKING outside a frame, CAPTURING inside one.
        previous_byte: last byte seen, so markers may straddle two chunks.
        buffer: bytes of the frame being captured, starting with FF D8.

    A frame is handed to ``on_frame`` as soon as its FF D9 arrives. Bytes
    outside SOI..EOI are dropped, and so is a frame still open at ``finish()``.
    """

    def __init__(self, on_frame: Callable[[bytes], None]):
        self.on_frame = on_frame
        self.state = DemuxState.SEEKING
        self.previous_byte: int | None = None
        self.buffer = bytearray()
        self.frames_emitted = 0

    def feed(self, chunk: bytes) -> None:
        n = len(chunk)
        if n == 0:
            return
        pos = 0
        while pos < n:
            # Marker split across chunks: FF was the last byte of the previous one
            straddles = pos == 0 and self.previous_byte == 0xFF
            if self.state is DemuxState.SEEKING:
                if straddles and chunk[0] == 0xD8:
                    start = 1
                else:
                    i = chunk.find(SOI, pos)
                    if i < 0:
                        break
                    start = i + 2
                self.buffer = bytearray(SOI)
                self.state = DemuxState.CAPTURING
                self.previous_byte = 0xD8
                pos = start
            else:
                if straddles and chunk[0] == 0xD9:
                    end = 1
                else:
                    i = chunk.find(EOI, pos)
                    if i < 0:
                        self.buffer += chunk[pos:]
                        break
                    end = i + 2
                self.buffer += chunk[pos:end]
                self.previous_byte = 0xD9
                pos = end
                self._emit()
        self.previous_byte = chunk[-1]

    def _emit(self) -> None:
        frame = bytes(self.buffer)
        self.buffer = bytearray()
        self.state = DemuxState.SEEKING
        self.frames_emitted += 1
        self.on_frame(frame)

    def finish(self) -> None:
        """End of stream: drop any frame that never saw its EOI marker."""
        if self.state is DemuxState.CAPTURING:
            logger.debug(f"Discarding incomplete trailing frame ({len(self.buffer)} bytes)")
        self.buffer = bytearray()
        self.state = DemuxState.SEEKING


class StreamDemuxer(FrameSource):
    """Runs one ffmpeg emitting thumbnails at 1/interval Hz and demuxes them."""

    mode: ClassVar[str] = "stream"

    def build_command(self, video_path: Path, interval: float) -> list[str]:
        return [
            self.ffmpeg_bin,
            "-loglevel", "error",
            "-i", str(video_path),
            "-vf", f"fps=1/{interval!r},{self.profile.scale_filter()}",
            "-q:v", str(self.profile.quality),
            "-f", "image2pipe",
            "-vcodec", "mjpeg",
            "pipe:1",
        ]

    def demux(
        self,
        video_path: Path,
        interval: float,
        on_frame: Callable[[bytes], None],
        timeout: float | None = None,
    ) -> int:
        """Stream every thumbnail of ``video_path`` to ``on_frame``.

        An exception raised by ``on_frame`` kills ffmpeg and propagates.
        Returns the number of frames emitted.

        Raises:
            DemuxError: ffmpeg could not start or exited non-zero.
            ExtractionTimeout: ``timeout`` seconds elapsed; ffmpeg is killed.
        """
        cmd = self.build_command(video_path, interval)
        logger.info(f"Running: {' '.join(cmd)}")
        demuxer = MJPEGDemuxer(on_frame)

        with tempfile.TemporaryFile() as stderr_file:
            try:
                proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=stderr_file)
            except OSError as e:
                raise DemuxError(-1, f"failed to start {self.ffmpeg_bin}: {e}") from e

            expired = threading.Event()
            timer = None
            if timeout is not None:
                def _expire() -> None:
                    expired.set()
                    proc.kill()

                timer = threading.Timer(timeout, _expire)
                timer.daemon = True
                timer.start()

            try:
                while True:
                    chunk = proc.stdout.read1(CHUNK_SIZE)
                    if not chunk:
                        break
                    demuxer.feed(chunk)
            except BaseException:
                proc.kill()
                proc.wait()
                raise
            finally:
                if timer is not None:
                    timer.cancel()
                proc.stdout.close()

            demuxer.finish()
            returncode = proc.wait()

            if expired.is_set():
                raise ExtractionTimeout(timeout)
            if returncode != 0:
                stderr_file.seek(0)
                detail = stderr_file.read()[-300:].decode("utf-8", errors="replace").strip()
                raise DemuxError(returncode, detail)

        logger.info(f"Demuxed {demuxer.frames_emitted} frames from stream")
        return demuxer.frames_emitted
