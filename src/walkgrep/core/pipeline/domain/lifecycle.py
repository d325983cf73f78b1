"""Pipeline component lifecycle management.

This module provides functions for managing the lifecycle of one search:
- Starting the worker pools and the dispatcher
- Waiting for the stop signal and joining every worker
- Closing the result stream exactly once
"""

from __future__ import annotations

import logging
import threading
import time

from walkgrep.core.pipeline.components import (
    DirectoryExpanderPool,
    FileScannerPool,
    PathDispatcher,
    ResultStream,
)
from walkgrep.core.pipeline.domain.coordinator import Coordinator
from walkgrep.shared.constants import Pipeline
from walkgrep.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from walkgrep.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


def start_pipeline_components(
    dispatcher: PathDispatcher,
    expander_pool: DirectoryExpanderPool,
    scanner_pool: FileScannerPool,
    coordinator: Coordinator,
) -> None:
    """Start the worker pools, then the dispatcher.

    The dispatch unit is registered before any thread starts so the
    in-flight counter cannot reach zero while roots are still pending.

    Raises:
        InfrastructureError: If a thread cannot be started.
    """
    context = ErrorContext(
        operation="start_pipeline_components",
        additional_data={
            "expanders": expander_pool.num_workers,
            "scanners": scanner_pool.num_workers,
        },
    )
    start_time = time.time()

    coordinator.add_work()
    try:
        expander_pool.start()
        scanner_pool.start()
        dispatcher.start()
    except RuntimeError as e:
        coordinator.stop_event.set()
        error = InfrastructureError(
            ErrorCode.PIPELINE_EXECUTION_ERROR,
            f"Failed to start pipeline components: {e}",
            context,
            original_error=e,
        )
        log_operation_error(logger, error, operation="start_pipeline_components")
        raise error from e

    log_operation_success(
        logger=logger,
        operation="start_pipeline_components",
        duration_ms=(time.time() - start_time) * 1000,
        context=context,
    )


def shutdown_pipeline_components(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    dispatcher: PathDispatcher,
    expander_pool: DirectoryExpanderPool,
    scanner_pool: FileScannerPool,
    results: ResultStream,
    timeout: float = Pipeline.SHUTDOWN_TIMEOUT,
) -> bool:
    """Join every worker and close the result stream.

    Must only be called once the stop event is set; every worker then
    returns within one poll interval of finishing its current unit.

    Returns:
        True if all threads terminated within the timeout.
    """
    start_time = time.time()

    dispatcher.join(timeout=timeout)
    expander_pool.join(timeout=timeout)
    scanner_pool.join(timeout=timeout)

    still_alive = (
        int(dispatcher.is_alive())
        + expander_pool.get_alive_worker_count()
        + scanner_pool.get_alive_worker_count()
    )
    if still_alive:
        error = InfrastructureError(
            ErrorCode.PIPELINE_SHUTDOWN_ERROR,
            f"{still_alive} worker thread(s) did not stop within {timeout}s",
            ErrorContext(
                operation="shutdown_pipeline_components",
                additional_data={"alive_workers": still_alive, "timeout": timeout},
            ),
        )
        log_operation_error(logger, error, level=logging.WARNING)

    results.close()

    log_operation_success(
        logger=logger,
        operation="shutdown_pipeline_components",
        duration_ms=(time.time() - start_time) * 1000,
        result_info={"alive_workers": still_alive},
    )
    return still_alive == 0


class Supervisor(threading.Thread):
    """Thread that tears the pipeline down once the stop signal is raised.

    Args:
        coordinator: Shared run state.
        dispatcher: The root dispatcher thread.
        expander_pool: Directory expander workers.
        scanner_pool: File scanner workers.
        results: The result stream to close.
        timeout: Per-thread join timeout.
    """

    def __init__(  # pylint: disable=too-many-arguments,too-many-positional-arguments
        self,
        coordinator: Coordinator,
        dispatcher: PathDispatcher,
        expander_pool: DirectoryExpanderPool,
        scanner_pool: FileScannerPool,
        results: ResultStream,
        timeout: float = Pipeline.SHUTDOWN_TIMEOUT,
    ) -> None:
        super().__init__(name="walkgrep-supervisor", daemon=True)
        self.coordinator = coordinator
        self.dispatcher = dispatcher
        self.expander_pool = expander_pool
        self.scanner_pool = scanner_pool
        self.results = results
        self.timeout = timeout
        self.finished = threading.Event()

    def run(self) -> None:
        try:
            self.coordinator.stop_event.wait()
            logger.debug("Stop signal raised, shutting pipeline down")
            shutdown_pipeline_components(
                self.dispatcher,
                self.expander_pool,
                self.scanner_pool,
                self.results,
                self.timeout,
            )
        finally:
            # The caller's iterator must end even if shutdown failed
            self.results.close()
            self.finished.set()
