"""
Multi-Wind Scheduler - periodic refresh with bounded retry

Two independent asyncio timers drive acquisitions:

1. Periodic timer: fires every update_interval and always fetches. Each tick
   opens a new scheduling period (retry budget reset).
2. Retry timer: armed after a failed acquisition while the retry budget for
   the current period is not used up; fires once after retry_delay.

The timers do not coordinate. A retry can fire while a periodic fetch is
still in flight, in which case the last response to arrive wins. Pass
single_flight=True to skip a retry while another fetch is running.

All state lives in a SchedulerState owned by one WindScheduler instance.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, Optional, Set

from multi_wind.acquisition import AcquisitionResult, acquire_once
from multi_wind.config import ProviderConfig, WindConfig
from multi_wind.models import WindObservation
from multi_wind.resilience import AcquisitionError, RetryState, categorize_error

logger = logging.getLogger(__name__)

AcquireFunc = Callable[[ProviderConfig], Awaitable[AcquisitionResult]]
DataCallback = Callable[[WindObservation], None]
ErrorCallback = Callable[[Optional[AcquisitionError]], None]


class SchedulerStatus(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RETRY_PENDING = "retry_pending"


@dataclass
class SchedulerState:
    """Everything the scheduler knows between cycles."""
    retry: RetryState
    status: SchedulerStatus = SchedulerStatus.IDLE
    observation: Optional[WindObservation] = None
    error: Optional[AcquisitionError] = None
    last_update: Optional[datetime] = None
    loaded: bool = False
    in_flight: int = 0


class WindScheduler:
    """
    Keeps the current WindObservation fresh.

    Args:
        config: Provider and location
        wind_config: Interval, retry and timeout settings
        on_data: Called with every new observation
        on_error: Called on every failed cycle. Receives None (a generic
            failure signal) unless detailed_errors is set, in which case it
            receives the AcquisitionError.
        acquire: Coroutine performing one cycle (defaults to acquire_once)
        detailed_errors: Pass the typed error to on_error
        single_flight: Skip a retry while another fetch is in flight
    """

    def __init__(
        self,
        config: ProviderConfig,
        wind_config: Optional[WindConfig] = None,
        on_data: Optional[DataCallback] = None,
        on_error: Optional[ErrorCallback] = None,
        acquire: Optional[AcquireFunc] = None,
        detailed_errors: bool = False,
        single_flight: bool = False,
    ):
        self.config = config
        self.wind_config = wind_config or WindConfig()
        self.on_data = on_data
        self.on_error = on_error
        self.detailed_errors = detailed_errors
        self.single_flight = single_flight
        self.state = SchedulerState(retry=RetryState.from_config(self.wind_config.retry))

        self._acquire = acquire or self._default_acquire
        self._cycles: Set[asyncio.Task] = set()
        self._retry_timers: Set[asyncio.Task] = set()
        self._periodic_task: Optional[asyncio.Task] = None

    async def _default_acquire(self, config: ProviderConfig) -> AcquisitionResult:
        return await acquire_once(config, timeout=self.wind_config.timeout_seconds)

    # -- lifecycle -----------------------------------------------------

    def start(self) -> None:
        """Fetch immediately, then every update_interval. Needs a running loop."""
        logger.info(
            f"[WindScheduler] Starting: {self.config.provider.value} "
            f"every {self.wind_config.update_interval_seconds}s"
        )
        self._spawn_cycle("startup")
        self._periodic_task = asyncio.ensure_future(self._periodic_loop())

    async def run(self) -> None:
        """Start and keep running until stop() is called."""
        self.start()
        try:
            await self._periodic_task
        except asyncio.CancelledError:
            logger.info("[WindScheduler] Stopped")

    def stop(self) -> None:
        """Cancel the periodic timer, pending retries and in-flight fetches."""
        if self._periodic_task is not None:
            self._periodic_task.cancel()
        for task in list(self._retry_timers) + list(self._cycles):
            task.cancel()
        self.state.status = SchedulerStatus.IDLE

    async def drain(self) -> None:
        """Wait until no fetch is in flight and no retry is pending."""
        while True:
            pending = [t for t in self._cycles | self._retry_timers if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # -- triggers ------------------------------------------------------

    def request_acquisition(self, config: Optional[ProviderConfig] = None) -> asyncio.Task:
        """Run one extra acquisition cycle, optionally with a new config."""
        if config is not None:
            self.config = config
        return self._spawn_cycle("request")

    def tick(self) -> asyncio.Task:
        """Periodic refresh: open a new scheduling period and fetch."""
        self.state.retry.reset()
        return self._spawn_cycle("periodic")

    async def _periodic_loop(self) -> None:
        while True:
            await asyncio.sleep(self.wind_config.update_interval_seconds)
            self.tick()

    def _spawn_cycle(self, reason: str) -> asyncio.Task:
        logger.debug(f"[WindScheduler] Acquisition triggered ({reason})")
        task = asyncio.ensure_future(self._run_cycle(self.config))
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)
        return task

    def _retry_pending(self) -> bool:
        return any(not t.done() for t in self._retry_timers)

    def _arm_retry(self) -> None:
        task = asyncio.ensure_future(self._retry_after(self.state.retry.retry_delay_seconds))
        self._retry_timers.add(task)
        task.add_done_callback(self._retry_timers.discard)
        self.state.status = SchedulerStatus.RETRY_PENDING

    async def _retry_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        if self.single_flight and self.state.in_flight > 0:
            logger.info("[WindScheduler] Fetch already in flight, skipping retry")
            return
        logger.info(
            f"[WindScheduler] Retrying wind data fetch "
            f"(attempt {self.state.retry.attempt_count + 1})"
        )
        self._spawn_cycle("retry")

    # -- results -------------------------------------------------------

    async def _run_cycle(self, config: ProviderConfig) -> None:
        self.state.in_flight += 1
        self.state.status = SchedulerStatus.FETCHING
        try:
            result = await self._acquire(config)
        except AcquisitionError as e:
            result = AcquisitionResult(error=e)
        except Exception as e:
            logger.error(f"[WindScheduler] Unexpected acquisition error: {e}", exc_info=True)
            result = AcquisitionResult(error=AcquisitionError(str(e)))
        finally:
            self.state.in_flight -= 1

        if result.ok:
            self._handle_success(result.observation)
        else:
            self._handle_failure(result.error or AcquisitionError("unknown failure"))

    def _handle_success(self, observation: WindObservation) -> None:
        self.state.loaded = True
        self.state.observation = observation
        self.state.error = None
        self.state.last_update = datetime.now()
        self.state.retry.reset()
        if self.state.in_flight == 0 and not self._retry_pending():
            self.state.status = SchedulerStatus.IDLE

        if self.on_data is not None:
            try:
                self.on_data(observation)
            except Exception as e:
                logger.error(f"[WindScheduler] on_data callback failed: {e}", exc_info=True)

    def _handle_failure(self, error: AcquisitionError) -> None:
        error_type, error_msg = categorize_error(error)
        logger.error(f"[WindScheduler] Failed to fetch wind data: {error_type.value} - {error_msg}")

        self.state.loaded = True
        self.state.observation = None
        self.state.error = error

        if self.state.retry.record_failure():
            self._arm_retry()
        else:
            logger.error(
                f"[WindScheduler] Maximum retry attempts reached "
                f"({self.state.retry.max_retries}), waiting for next refresh"
            )
            if self.state.in_flight == 0 and not self._retry_pending():
                self.state.status = SchedulerStatus.IDLE

        if self.on_error is not None:
            try:
                self.on_error(error if self.detailed_errors else None)
            except Exception as e:
                logger.error(f"[WindScheduler] on_error callback failed: {e}", exc_info=True)
