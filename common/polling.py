"""Client-side tracking of a remote job until it reaches a terminal state.

The remote job's lifecycle is owned by the prediction service. This module only
projects what it observes onto a small closed set of states:

    pending --(200, succeeded)--> succeeded
    pending --(200, failed)-----> failed
    pending --(non-200)---------> transport-error
    pending --(200, other)------> pending

Every snapshot, the initial one included, is handed to the observer before the
next wait starts. There is no retry cap and no overall timeout; wrap `track` in
`asyncio.wait_for` to bound it.
"""
import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Tuple

import pydantic

from common.config import POLL_INTERVAL
from common.errors import GENERIC_ERROR_MESSAGE, TransportError
from common.job_schema import Job, JobStatus

logger = logging.getLogger(__name__)

FetchStatus = Callable[[str], Awaitable[Tuple[int, Any]]]
OnUpdate = Callable[[Job], Any]
OnError = Callable[[str], Any]


class PollState(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TRANSPORT_ERROR = "transport-error"

    @property
    def is_terminal(self) -> bool:
        return self is not PollState.PENDING


def state_for_status(status: str) -> PollState:
    if status == JobStatus.SUCCEEDED.value:
        return PollState.SUCCEEDED
    if status == JobStatus.FAILED.value:
        return PollState.FAILED
    return PollState.PENDING


def next_state(status_code: int, status: Optional[str] = None) -> PollState:
    if status_code != 200:
        return PollState.TRANSPORT_ERROR
    return state_for_status(status)


@dataclass(frozen=True)
class TrackResult:
    state: PollState
    job: Job  # last successfully observed snapshot
    detail: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.state is PollState.SUCCEEDED


async def _notify(callback: Optional[Callable[[Any], Any]], value: Any) -> None:
    if callback is None:
        return
    result = callback(value)
    if inspect.isawaitable(result):
        await result


def _detail_from(body: Any) -> str:
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    return GENERIC_ERROR_MESSAGE


async def _transport_error(job: Job, detail: str, on_error: Optional[OnError]) -> TrackResult:
    await _notify(on_error, detail)
    return TrackResult(PollState.TRANSPORT_ERROR, job, detail)


async def track(
    initial_job: Job,
    fetch_status: FetchStatus,
    on_update: Optional[OnUpdate] = None,
    interval: float = POLL_INTERVAL,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    on_error: Optional[OnError] = None,
) -> TrackResult:
    """
    Poll `fetch_status(job_id)` every `interval` seconds until the job is terminal.

    `fetch_status` returns `(http_status, body)` and may raise TransportError when
    the query cannot be made at all. On a transport error `on_error` receives the
    detail message before `track` returns. Both callbacks may be functions or
    coroutine functions.
    """
    job = initial_job
    state = state_for_status(job.status)
    await _notify(on_update, job)

    while state is PollState.PENDING:
        await sleep(interval)
        try:
            status_code, body = await fetch_status(job.id)
        except TransportError as e:
            logger.warning(f"Status query for job {job.id} failed: {e.message}")
            return await _transport_error(job, e.message, on_error)

        if next_state(status_code) is PollState.TRANSPORT_ERROR:
            detail = _detail_from(body)
            logger.warning(f"Status query for job {job.id} returned {status_code}: {detail}")
            return await _transport_error(job, detail, on_error)

        try:
            job = Job.model_validate(body)
        except pydantic.ValidationError:
            logger.warning(f"Status query for job {job.id} returned an unreadable body")
            return await _transport_error(job, GENERIC_ERROR_MESSAGE, on_error)
        state = next_state(status_code, job.status)
        logger.debug(f"Job {job.id} is {job.status}")
        await _notify(on_update, job)

    logger.info(f"Job {job.id} finished: {state.value}")
    return TrackResult(state, job)
