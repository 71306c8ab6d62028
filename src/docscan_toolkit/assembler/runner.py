"""
Module: assembler.runner

Purpose:
    Run assemblies off the caller's (UI) thread. Each submission returns an
    AssemblyJob whose future resolves to an AssemblyResult or raises the
    assembly error; the job can be cancelled between pages.

Key Classes:
    - AssemblyRunner: Thread pool-based assembly executor
    - AssemblyJob: Handle for one submitted assembly

Dependencies:
    - concurrent.futures: Thread pool execution
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from docscan_toolkit.core.errors import AssemblyCancelled
from docscan_toolkit.core.models import CapturedImage, PageSize

from .config import AssemblyConfig
from .controller import AssemblyResult, ProgressCallback, assemble

logger = logging.getLogger(__name__)


@dataclass
class AssemblyJob:
    """
    Handle for a submitted assembly.
    
    Attributes:
        output_path: Destination of the document
        future: Resolves to AssemblyResult or raises AssemblyError
        cancel_event: Set by cancel()
    """
    output_path: Path
    future: Future
    cancel_event: threading.Event = field(default_factory=threading.Event)
    
    def cancel(self) -> None:
        """Request early termination; partial output is discarded."""
        self.cancel_event.set()
        self.future.cancel()
    
    def result(self, timeout: Optional[float] = None) -> AssemblyResult:
        """Block for the result, re-raising any assembly error."""
        try:
            return self.future.result(timeout=timeout)
        except CancelledError as e:
            # Cancelled before the worker picked it up
            raise AssemblyCancelled(0) from e
    
    def done(self) -> bool:
        return self.future.done()


class AssemblyRunner:
    """
    Thread pool-based executor for assemblies.
    
    Usage:
        with AssemblyRunner() as runner:
            job = runner.submit(store.snapshot(), Path("scan.pdf"),
                                on_done=lambda job: notify(job))
            ...
            job.cancel()  # optional
    
    A single worker (the default) also serializes jobs in submission
    order, which satisfies the one-assembly-per-path rule for callers
    that submit everything through one runner.
    
    Attributes:
        max_workers: Maximum concurrent assemblies.
    """
    
    def __init__(self, max_workers: int = 1):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="docscan-assembly",
        )
        self._jobs: List[AssemblyJob] = []
        self._jobs_lock = threading.Lock()
    
    def submit(
        self,
        images: Sequence[CapturedImage],
        output_path: Path,
        page_size: Optional[PageSize] = None,
        *,
        config: Optional[AssemblyConfig] = None,
        progress: Optional[ProgressCallback] = None,
        on_done: Optional[Callable[[AssemblyJob], None]] = None,
    ) -> AssemblyJob:
        """
        Queue an assembly.
        
        The image sequence is copied immediately, so the caller may keep
        mutating its own collection.
        
        Args:
            images: Ordered images to assemble
            output_path: Destination file
            page_size: Optional page size override
            config: Assembly configuration
            progress: Called from the worker thread with (done, total)
            on_done: Called with the job once it succeeds, fails or is cancelled
            
        Returns:
            AssemblyJob handle
        """
        snapshot = tuple(images)
        cancel_event = threading.Event()
        future = self._executor.submit(
            assemble,
            snapshot,
            Path(output_path),
            page_size,
            config=config,
            cancel_event=cancel_event,
            progress=progress,
        )
        job = AssemblyJob(output_path=Path(output_path), future=future, cancel_event=cancel_event)
        with self._jobs_lock:
            self._jobs.append(job)
        logger.debug(f"Queued assembly of {len(snapshot)} images into {output_path}")
        
        # Registered first so the job is forgotten before on_done runs
        future.add_done_callback(lambda _f: self._forget(job))
        if on_done is not None:
            future.add_done_callback(lambda _f: on_done(job))
        return job
    
    def wait_all(self, timeout: Optional[float] = None) -> int:
        """
        Wait for all pending jobs to finish.
        
        Jobs that finished earlier are already forgotten; their outcome
        was delivered through the job handle and on_done.
        
        Args:
            timeout: Max seconds to wait per job (None = indefinite).
            
        Returns:
            Number of the awaited jobs that completed successfully.
        """
        with self._jobs_lock:
            jobs = list(self._jobs)
        completed = 0
        for job in jobs:
            try:
                job.result(timeout=timeout)
                completed += 1
            except AssemblyCancelled:
                logger.info(f"Assembly of {job.output_path} was cancelled")
            except Exception as e:
                logger.error(f"Assembly of {job.output_path} failed: {e}")
        return completed
    
    @property
    def pending_jobs(self) -> tuple[AssemblyJob, ...]:
        """Submitted jobs that have not finished yet."""
        with self._jobs_lock:
            return tuple(self._jobs)
    
    def _forget(self, job: AssemblyJob) -> None:
        with self._jobs_lock:
            if job in self._jobs:
                self._jobs.remove(job)
    
    def shutdown(self) -> None:
        """Wait for in-flight jobs and stop the worker threads."""
        self.wait_all()
        self._executor.shutdown(wait=True)
    
    def __enter__(self) -> "AssemblyRunner":
        return self
    
    def __exit__(self, *args) -> None:
        self.shutdown()
