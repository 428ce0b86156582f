"""Fixed-rate scheduler driving all synchronizers and the reload trigger."""

import logging
import threading
import time
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

from ..exceptions import DeployerError, SchedulerStateError
from ..utils import DEFAULT_TICK_INTERVAL_MS, INITIAL_DELAY_MS, strip_archive_suffix

logger = logging.getLogger(__name__)


class SynchronizerProtocol(Protocol):
    """Anything the scheduler can run once per tick."""

    interval_ms: int

    def run(self) -> int: ...


class DeployerProtocol(Protocol):
    """Remote service able to reload a deployed application."""

    def reload(self, application_path: str) -> object: ...


class SchedulerState(str, Enum):
    """Lifecycle of a scheduler: created -> running -> stopped."""

    CREATED = "created"
    RUNNING = "running"
    STOPPED = "stopped"


class SyncScheduler:
    """Runs every synchronizer in order on one background thread.

    Ticks are scheduled at a fixed rate: tick N+1 is due one interval after
    the nominal start of tick N. A tick that overruns its interval delays the
    next one instead of overlapping it, and overdue ticks then run back to
    back until the schedule has caught up.

    Synchronizers run sequentially so at most one reload is requested per
    tick, and only after every copy of that tick has finished.

    Examples:
        >>> scheduler = SyncScheduler(
        ...     [Synchronizer(unit)],
        ...     deployer=DeployerClient(),
        ...     reload_on_update=True,
        ...     deployed_artifact=Path("/opt/tomee/webapps/app.war"),
        ... )
        >>> scheduler.start()
        >>> scheduler.stop()
    """

    def __init__(
        self,
        synchronizers: Iterable[SynchronizerProtocol],
        deployer: Optional[DeployerProtocol] = None,
        reload_on_update: bool = False,
        deployed_artifact: Optional[Path] = None,
        initial_delay_ms: int = INITIAL_DELAY_MS,
        interval_ms: Optional[int] = None,
        name: str = "pylivesync-synchronizer",
    ):
        """Initialize scheduler.

        Args:
            synchronizers: Synchronizers in configuration order
            deployer: Remote deployer used for reloads
            reload_on_update: Whether to reload the application after changes
            deployed_artifact: Deployed archive or directory of the application
            initial_delay_ms: Minimum delay before the first tick
            interval_ms: Explicit tick interval; computed from the
                synchronizers when not given
            name: Name of the worker thread
        """
        self.synchronizers = list(synchronizers)
        self.deployer = deployer
        self.reload_on_update = reload_on_update
        self.deployed_artifact = deployed_artifact
        self.initial_delay_ms = initial_delay_ms
        self.name = name
        self.tick_interval_ms = (
            interval_ms if interval_ms is not None else self.compute_interval_ms()
        )
        self.tick_count = 0

        self._state = SchedulerState.CREATED
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def state(self) -> SchedulerState:
        """Current lifecycle state."""
        return self._state

    @property
    def is_running(self) -> bool:
        """True between start() and stop()."""
        return self._state == SchedulerState.RUNNING

    def compute_interval_ms(self) -> int:
        """Return the largest synchronizer interval, or the default without any."""
        if not self.synchronizers:
            return DEFAULT_TICK_INTERVAL_MS
        return max(s.interval_ms for s in self.synchronizers)

    @property
    def first_delay_ms(self) -> int:
        """Delay before the first tick."""
        if self.tick_interval_ms > self.initial_delay_ms:
            return self.tick_interval_ms
        return self.initial_delay_ms

    def start(self) -> None:
        """Start ticking on a background thread.

        Raises:
            SchedulerStateError: If the scheduler was already started or stopped
        """
        with self._lock:
            if self._state != SchedulerState.CREATED:
                raise SchedulerStateError(
                    f"Can't start a scheduler that is {self._state.value}"
                )

            logger.info(
                f"Starting synchronizer with an update interval of "
                f"{self.tick_interval_ms} ms"
            )
            self._thread = threading.Thread(
                target=self._run_loop,
                args=(self.first_delay_ms / 1000, self.tick_interval_ms / 1000),
                name=self.name,
                daemon=True,
            )
            self._state = SchedulerState.RUNNING
            self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """Cancel all pending ticks.

        A tick already in progress runs to completion. Calling stop() on a
        scheduler that was never started, or a second time, does nothing.

        Args:
            timeout: Seconds to wait for an in-progress tick (None waits forever)
        """
        with self._lock:
            if self._state != SchedulerState.RUNNING:
                return
            self._state = SchedulerState.STOPPED
            self._stop_event.set()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("Synchronizer stopped")

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the worker thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _run_loop(self, first_delay: float, interval: float) -> None:
        next_run = time.monotonic() + first_delay
        while not self._stop_event.wait(max(0.0, next_run - time.monotonic())):
            try:
                self.run_tick()
            except Exception:
                logger.exception("Synchronization tick failed")
            next_run += interval

    def run_tick(self) -> int:
        """Run every synchronizer once and reload the application on changes.

        A failing synchronizer is logged and does not prevent the following
        ones from running.

        Returns:
            Total number of files copied during this tick
        """
        total_changed = 0
        for synchronizer in self.synchronizers:
            try:
                total_changed += synchronizer.run()
            except Exception as e:
                logger.exception(f"{synchronizer!r} failed: {e}")

        self.tick_count += 1
        if total_changed > 0 and self.reload_on_update:
            self.reload()
        return total_changed

    def reload(self) -> bool:
        """Ask the deployer to reload the tracked application.

        Returns:
            True if the reload call succeeded
        """
        artifact = self.deployed_artifact
        if artifact is None or not artifact.exists():
            logger.debug(f"No deployed artifact to reload ({artifact})")
            return False

        if self.deployer is None:
            logger.warning("Reload on update is enabled but no deployer is set")
            return False

        path = strip_archive_suffix(str(artifact.absolute()))
        logger.info(f"Reloading {path}")
        try:
            self.deployer.reload(path)
        except DeployerError as e:
            logger.error(f"Reload of {path} failed: {e}")
            return False
        return True
