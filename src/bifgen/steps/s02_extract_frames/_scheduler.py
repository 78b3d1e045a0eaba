"""Drive a frame source over every timestamp of an extraction job.

Three regimes, same failure semantics:

* per-frame, ``workers <= 1``: timestamps in index order on the calling
  thread; progress is reported in index order.
* per-frame, ``workers > 1``: a pool of threads pulls indices from a work
  queue and pushes results to a result queue. The calling thread is the only
  consumer of that queue and the only writer of the ordered frame list, so
  progress is reported in *completion* order.
* stream: one ffmpeg, frames numbered in emission order.

A failed frame is logged and kept as an absent slot; only a job where no
frame at all succeeded is an error.
"""

from __future__ import annotations

import logging
import queue
import threading
import time

from bifgen.core.contracts import ExtractionJob, Frame, ProgressCallback
from bifgen.core.exceptions import ExtractionError, ExtractionTimeout, NoFramesExtracted
from ._frame_source import FrameSource

logger = logging.getLogger(__name__)


class ExtractionScheduler:
    def __init__(self, source: FrameSource):
        self.source = source

    def run(
        self,
        job: ExtractionJob,
        progress: ProgressCallback = None,
        timeout: float | None = None,
    ) -> list[Frame]:
        """Extract all frames of ``job`` and return them in index order.

        Raises:
            NoFramesExtracted: every frame failed.
            ExtractionTimeout: ``timeout`` seconds elapsed first. Frames
                aggregated so far are attached to the exception.
        """
        deadline = time.monotonic() + timeout if timeout is not None else None

        if self.source.mode == "stream":
            frames = self._run_stream(job, progress, timeout)
        elif job.workers <= 1:
            frames = self._run_sequential(job, progress, timeout, deadline)
        else:
            frames = self._run_parallel(job, progress, timeout, deadline)

        success_count = sum(1 for f in frames if f.ok)
        if success_count == 0:
            raise NoFramesExtracted(len(frames) or job.frame_count)
        logger.info(f"Extracted {success_count}/{len(frames)} frames")
        return frames

    # ── per-frame ────────────────────────────────────────────────────

    def _attempt(self, job: ExtractionJob, index: int, deadline: float | None, who: str = "") -> bytes | None:
        """Extract one frame; ``None`` on failure."""
        timestamp = job.timestamp(index)
        try:
            return self.source.extract(job.video_path, timestamp, timeout=_remaining(deadline))
        except ExtractionError as e:
            logger.warning(f"{who}Frame {index} (t={timestamp:.1f}s) failed: {e}")
            return None

    def _run_sequential(
        self, job: ExtractionJob, progress: ProgressCallback, timeout: float | None, deadline: float | None
    ) -> list[Frame]:
        total = job.frame_count
        frames = [Frame(index=i) for i in range(total)]
        for i in range(total):
            if _remaining(deadline) == 0:
                raise ExtractionTimeout(timeout, frames)
            frames[i] = Frame(index=i, data=self._attempt(job, i, deadline))
            if progress:
                progress(i + 1, total)
        return frames

    def _run_parallel(
        self, job: ExtractionJob, progress: ProgressCallback, timeout: float | None, deadline: float | None
    ) -> list[Frame]:
        total = job.frame_count
        work: queue.Queue[int] = queue.Queue()
        for i in range(total):
            work.put(i)
        results: queue.Queue[tuple[int, bytes | None, BaseException | None]] = queue.Queue()
        stop = threading.Event()

        workers = [
            threading.Thread(
                target=self._worker,
                args=(worker_id, job, work, results, stop, deadline),
                name=f"bif-worker-{worker_id}",
                daemon=True,
            )
            for worker_id in range(min(job.workers, total))
        ]
        logger.info(f"Starting {len(workers)} workers for {total} frames")
        for t in workers:
            t.start()

        frames = [Frame(index=i) for i in range(total)]
        completed = 0
        try:
            while completed < total:
                try:
                    # Zero remaining still drains results that are already queued
                    index, data, error = results.get(timeout=_remaining(deadline))
                except queue.Empty:
                    raise ExtractionTimeout(timeout, frames) from None
                if error is not None:
                    raise error
                frames[index] = Frame(index=index, data=data)
                completed += 1
                if progress:
                    progress(completed, total)
        finally:
            stop.set()

        for t in workers:
            t.join()
        return frames

    def _worker(
        self,
        worker_id: int,
        job: ExtractionJob,
        work: queue.Queue,
        results: queue.Queue,
        stop: threading.Event,
        deadline: float | None,
    ) -> None:
        while not stop.is_set() and _remaining(deadline) != 0:
            try:
                index = work.get_nowait()
            except queue.Empty:
                return
            try:
                data = self._attempt(job, index, deadline, who=f"[Worker {worker_id}] ")
            except Exception as e:
                # Unexpected: hand it to the aggregator instead of losing the slot
                results.put((index, None, e))
                return
            results.put((index, data, None))

    # ── stream ───────────────────────────────────────────────────────

    def _run_stream(self, job: ExtractionJob, progress: ProgressCallback, timeout: float | None) -> list[Frame]:
        frames: list[Frame] = []

        def on_frame(data: bytes) -> None:
            frames.append(Frame(index=len(frames), data=data))
            if progress:
                # Probed count is an estimate here; never report done > total
                progress(len(frames), max(job.frame_count, len(frames)))

        try:
            self.source.demux(job.video_path, job.interval, on_frame, timeout=timeout)
        except ExtractionTimeout:
            raise ExtractionTimeout(timeout, frames) from None
        return frames


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())
