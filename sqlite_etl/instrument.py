"""
Step instrumentation.

Every pipeline step runs through ``track``, which times the step, samples
process memory before and after it, and prints both figures whether the
step succeeded or failed.
"""
import os
import time
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import psutil

from .errors import PipelineError

logger = logging.getLogger(__name__)


class ResourceSampler(Protocol):
    def sample_kb(self) -> int:
        ...


class PsutilSampler:
    """Samples the resident set size of the current process."""

    def __init__(self, pid: Optional[int] = None):
        self.process = psutil.Process(pid or os.getpid())

    def sample_kb(self) -> int:
        return self.process.memory_info().rss // 1024


@dataclass
class StepResult:
    """Outcome of one instrumented step."""

    name: str
    ok: bool
    message: str
    elapsed_seconds: float = 0.0
    memory_used_kb: int = 0


def memory_delta(before_kb: int, after_kb: int) -> int:
    # Memory can shrink between samples when the collector runs.
    return max(0, after_kb - before_kb)


def track(
    operation_name: str,
    operation: Callable[[], str],
    sampler: Optional[ResourceSampler] = None,
    clock: Callable[[], float] = time.perf_counter,
    echo: Callable[[str], None] = print
) -> StepResult:
    """
    Run an operation and report its elapsed time and memory usage.

    Args:
        operation_name: Name printed in the report lines (e.g. "Extract")
        operation: Callable returning a status message or raising PipelineError
        sampler: Memory sampler (default: PsutilSampler for this process)
        clock: Monotonic clock returning seconds
        echo: Output function for the report lines

    Returns:
        StepResult carrying the operation's message or error and both metrics
    """
    if sampler is None:
        sampler = PsutilSampler()

    start_time = clock()
    initial_memory = sampler.sample_kb()
    ok = False
    message = ""
    try:
        message = operation()
        ok = True
    except PipelineError as e:
        message = str(e)
        logger.error(f"{operation_name} failed: {e}")
    finally:
        final_memory = sampler.sample_kb()
        elapsed_time = clock() - start_time
        memory_used = memory_delta(initial_memory, final_memory)

        echo(f"{operation_name} completed in: {elapsed_time:.2f}s")
        echo(f"Memory used during {operation_name}: {memory_used} KB")

    return StepResult(
        name=operation_name,
        ok=ok,
        message=message,
        elapsed_seconds=elapsed_time,
        memory_used_kb=memory_used,
    )
