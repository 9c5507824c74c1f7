"""Service for running optimizations off the caller's thread.

Each run executes its GeneticOptimizer on a dedicated daemon thread and
talks to the caller only through a bounded event queue: progress events
first, then exactly one terminal OptimizationResult. When the caller falls
behind, the oldest queued progress event is dropped; the terminal result is
never dropped.
"""

import logging
import queue
import threading
import uuid
from collections import OrderedDict
from typing import Iterator, Optional, Union

from shiftplan.config import Config
from shiftplan.logger import JSONLogger
from shiftplan.models.shift import OptimizerError, ShiftCatalog
from shiftplan.models.financial import FinancialConfiguration
from shiftplan.models.optimization import OptimizationResult, ProgressEvent, RunStatus
from shiftplan.genetic.config import GeneticConfig
from shiftplan.genetic.optimizer import GeneticOptimizer
from shiftplan.validator import ensure_valid

logger = logging.getLogger(__name__)

Event = Union[ProgressEvent, OptimizationResult]


class RunNotFound(OptimizerError):
    """Raised when a run id is unknown or was pruned from history."""

    def __init__(self, run_id: str):
        super().__init__(f"Unknown run: {run_id}")
        self.run_id = run_id


class OptimizationHandle:
    """Caller-side view of one optimization run."""

    def __init__(
        self,
        optimizer: GeneticOptimizer,
        queue_size: int = 16,
        json_logger: Optional[JSONLogger] = None,
        run_id: Optional[str] = None,
    ):
        self.run_id = run_id or uuid.uuid4().hex
        self.status = RunStatus.IDLE
        self.latest_progress: Optional[ProgressEvent] = None

        self._optimizer = optimizer
        self._json_logger = json_logger
        self._events: "queue.Queue[Event]" = queue.Queue(maxsize=max(1, queue_size))
        self._put_lock = threading.Lock()
        self._cancel_event = threading.Event()
        self._done_event = threading.Event()
        self._result: Optional[OptimizationResult] = None
        self._drained = False
        self._thread = threading.Thread(
            target=self._run, name=f"optimizer-{self.run_id[:8]}", daemon=True
        )

    def start(self) -> "OptimizationHandle":
        self.status = RunStatus.RUNNING
        self._thread.start()
        logger.info(f"Run {self.run_id} started")
        return self

    @property
    def done(self) -> bool:
        return self._done_event.is_set()

    def cancel(self) -> None:
        """Request cooperative cancellation; no-op once the run is terminal."""
        if self.status.is_terminal or self._cancel_event.is_set():
            return
        logger.info(f"Run {self.run_id} cancellation requested")
        self._cancel_event.set()

    def result(self, timeout: Optional[float] = None) -> OptimizationResult:
        """
        Block until the run is terminal.

        Args:
            timeout: Seconds to wait (None waits forever)

        Returns:
            Terminal OptimizationResult

        Raises:
            TimeoutError: If the run is still going after timeout
        """
        if not self._done_event.wait(timeout):
            raise TimeoutError(f"Run {self.run_id} still running after {timeout}s")
        return self._result

    def events(self, timeout: Optional[float] = None) -> Iterator[Event]:
        """
        Iterate queued events, ending with the terminal result.

        Intended for a single consumer.

        Args:
            timeout: Seconds to wait for each event (None waits forever)

        Raises:
            TimeoutError: If no event arrives within timeout
        """
        if self._drained:
            yield self._result
            return
        while True:
            try:
                event = self._events.get(timeout=timeout)
            except queue.Empty:
                raise TimeoutError(f"No event from run {self.run_id} within {timeout}s")
            yield event
            if isinstance(event, OptimizationResult):
                self._drained = True
                return

    def _publish(self, event: Event) -> None:
        with self._put_lock:
            while True:
                try:
                    self._events.put_nowait(event)
                    return
                except queue.Full:
                    try:
                        dropped = self._events.get_nowait()
                        logger.debug(f"Run {self.run_id}: dropped progress for gen {dropped.generation}")
                    except queue.Empty:
                        pass

    def _on_progress(self, event: ProgressEvent) -> None:
        self.latest_progress = event
        self._publish(event)
        if self._json_logger is not None:
            self._json_logger.log_progress(self.run_id, event)

    def _run(self) -> None:
        try:
            result = self._optimizer.run(
                progress_callback=self._on_progress,
                cancel_event=self._cancel_event,
            )
        except Exception as e:
            logger.exception(f"Run {self.run_id} failed: {e}")
            result = OptimizationResult(status=RunStatus.FAILED, error=str(e))

        self._result = result
        self.status = result.status
        self._publish(result)
        if self._json_logger is not None:
            self._json_logger.log_result(self.run_id, result)
        self._done_event.set()


def optimize(
    config: FinancialConfiguration,
    shift_catalog: Optional[ShiftCatalog] = None,
    ga_params: Optional[GeneticConfig] = None,
    seed: Optional[int] = None,
    queue_size: int = 16,
    json_logger: Optional[JSONLogger] = None,
) -> OptimizationHandle:
    """
    Validate a configuration and start optimizing it in the background.

    Args:
        config: Financial configuration
        shift_catalog: Shift catalog (default values when omitted)
        ga_params: Genetic algorithm parameters (defaults when omitted)
        seed: Seed for a reproducible run
        queue_size: Progress events buffered before the oldest is dropped
        json_logger: Optional JSON lines trace

    Returns:
        Running OptimizationHandle

    Raises:
        InvalidConfiguration: Before any generation runs
    """
    catalog = shift_catalog or ShiftCatalog()
    ga_config = ga_params or GeneticConfig()
    ensure_valid(config, catalog, ga_config)

    optimizer = GeneticOptimizer(config, catalog, ga_config, seed)
    return OptimizationHandle(optimizer, queue_size, json_logger).start()


def run_optimization(
    config: FinancialConfiguration,
    shift_catalog: Optional[ShiftCatalog] = None,
    ga_params: Optional[GeneticConfig] = None,
    seed: Optional[int] = None,
    timeout: Optional[float] = None,
) -> OptimizationResult:
    """Run an optimization and wait for its terminal result."""
    handle = optimize(config, shift_catalog, ga_params, seed)
    return handle.result(timeout)


class OptimizationService:
    """Service for managing concurrent optimization runs."""

    def __init__(self, config: Optional[Config] = None):
        """Initialize optimization service."""
        self.config = config or Config()
        self.json_logger: Optional[JSONLogger] = None
        if self.config.PROGRESS_LOG_FILE:
            self.json_logger = JSONLogger(self.config.PROGRESS_LOG_FILE)
        self._runs: "OrderedDict[str, OptimizationHandle]" = OrderedDict()
        self._lock = threading.Lock()

    def start_run(
        self,
        config: FinancialConfiguration,
        shift_catalog: Optional[ShiftCatalog] = None,
        ga_params: Optional[GeneticConfig] = None,
        seed: Optional[int] = None,
    ) -> OptimizationHandle:
        """
        Start a run and register it for polling.

        Raises:
            InvalidConfiguration: If the inputs fail validation
        """
        handle = optimize(
            config,
            shift_catalog,
            ga_params,
            seed,
            queue_size=self.config.EVENT_QUEUE_SIZE,
            json_logger=self.json_logger,
        )
        with self._lock:
            self._runs[handle.run_id] = handle
            self._prune()
        return handle

    def run_sync(
        self,
        config: FinancialConfiguration,
        shift_catalog: Optional[ShiftCatalog] = None,
        ga_params: Optional[GeneticConfig] = None,
        seed: Optional[int] = None,
    ) -> OptimizationResult:
        """Run to completion on a worker thread and return the result."""
        handle = optimize(
            config,
            shift_catalog,
            ga_params,
            seed,
            queue_size=self.config.EVENT_QUEUE_SIZE,
            json_logger=self.json_logger,
        )
        return handle.result()

    def get_run(self, run_id: str) -> OptimizationHandle:
        """
        Look up a run.

        Raises:
            RunNotFound: If the run id is unknown
        """
        with self._lock:
            handle = self._runs.get(run_id)
        if handle is None:
            raise RunNotFound(run_id)
        return handle

    def cancel_run(self, run_id: str) -> OptimizationHandle:
        """Cancel a run (idempotent)."""
        handle = self.get_run(run_id)
        handle.cancel()
        return handle

    def active_runs(self) -> int:
        with self._lock:
            return sum(1 for handle in self._runs.values() if not handle.done)

    def close(self, timeout: Optional[float] = 10.0) -> None:
        """Cancel unfinished runs, wait for them, then close the progress trace."""
        with self._lock:
            handles = [handle for handle in self._runs.values() if not handle.done]
        for handle in handles:
            handle.cancel()
        for handle in handles:
            handle.result(timeout)
        if self.json_logger is not None:
            self.json_logger.close()
            self.json_logger = None
        logger.info(f"Optimization service closed ({len(handles)} runs cancelled)")

    def _prune(self) -> None:
        """Forget the oldest finished runs beyond MAX_RUN_HISTORY."""
        excess = len(self._runs) - self.config.MAX_RUN_HISTORY
        if excess <= 0:
            return
        for run_id in [run_id for run_id, handle in self._runs.items() if handle.done][:excess]:
            del self._runs[run_id]
            logger.debug(f"Pruned run {run_id} from history")
