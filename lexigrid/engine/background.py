"""Run generation jobs off the calling thread."""

from __future__ import annotations

import itertools
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from ..core.models import Word
from ..utils.logger import get_logger
from .generator import GenerationReport, GeneratorConfig, PuzzleGenerator


LOGGER = get_logger(__name__)


class GenerationJob:
    """Handle for a submitted job: poll, wait, or cancel it."""

    def __init__(self, job_id: int, future: "Future[GenerationReport]", cancel_event: threading.Event) -> None:
        self.job_id = job_id
        self._future = future
        self._cancel_event = cancel_event

    def cancel(self) -> None:
        """Ask the job to stop.

        A running job returns its best-so-far report, flagged ``cancelled``.
        A job still queued is dropped and :meth:`result` raises
        ``concurrent.futures.CancelledError``.
        """

        LOGGER.info("Cancelling generation job %d", self.job_id)
        self._cancel_event.set()
        self._future.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> GenerationReport:
        return self._future.result(timeout=timeout)


class BackgroundGenerator:
    """Thread pool running each job on its own :class:`PuzzleGenerator`.

    Generators own their random source, so jobs never share one. Only
    unfinished jobs are tracked; a finished job is released once its
    future completes. Use as a context manager or call :meth:`shutdown`.
    """

    def __init__(self, config: Optional[GeneratorConfig] = None, max_workers: int = 2) -> None:
        self.config = config or GeneratorConfig()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="lexigrid")
        self._pending: Dict[int, GenerationJob] = {}
        self._job_ids = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def pending_jobs(self) -> List[GenerationJob]:
        with self._lock:
            return list(self._pending.values())

    def submit(self, words: Iterable[Word], config: Optional[GeneratorConfig] = None) -> GenerationJob:
        job_config = config or self.config
        word_list = list(words)
        cancel_event = threading.Event()
        with self._lock:
            job_id = next(self._job_ids)
            if job_config.seed is not None and config is None and job_id > 1:
                # Distinct but reproducible seeds for repeated submissions.
                job_config = replace(job_config, seed=f"{job_config.seed}:{job_id}")
            future = self._executor.submit(self._run, job_id, word_list, job_config, cancel_event)
            job = GenerationJob(job_id, future, cancel_event)
            self._pending[job_id] = job
        # Registered outside the lock: an already finished future runs the callback at once.
        future.add_done_callback(lambda _: self._release(job_id))
        LOGGER.info("Submitted generation job %d with %d words", job_id, len(word_list))
        return job

    def _release(self, job_id: int) -> None:
        with self._lock:
            self._pending.pop(job_id, None)

    @staticmethod
    def _run(
        job_id: int, words: List[Word], config: GeneratorConfig, cancel_event: threading.Event
    ) -> GenerationReport:
        try:
            return PuzzleGenerator(config).generate(words, cancel_event=cancel_event)
        except Exception:
            LOGGER.exception("Generation job %d failed", job_id)
            raise

    def cancel_all(self) -> None:
        with self._lock:
            jobs = list(self._pending.values())
        for job in jobs:
            job.cancel()

    def shutdown(self, wait: bool = True, cancel_pending: bool = False) -> None:
        if cancel_pending:
            self.cancel_all()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "BackgroundGenerator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True, cancel_pending=exc_type is not None)
