"""Resume generation workflow.

:class:`CvGenerator` drives one request from an empty CV record to cached
HTML::

    IDLE -> RECORD_CREATED -> CONTENT_REQUESTED -> CONTENT_FETCHING
         -> RENDERED -> PERSISTED

Any step may end in ``FAILED``. Failures are reported on the returned
:class:`GenerationResult` rather than raised, and only the taxonomy's
``user_message`` is meant to reach end users.

Generated content is written to storage and then read back, because the
stored form is what later renders will see. The read-back goes through
:func:`fetch_with_retry`, which is also used when rendering an existing
record so both paths share one :class:`RetryPolicy`.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

from ojtech_resume.constants.resume_constants import (
    DEFAULT_FETCH_BACKOFF_SECONDS,
    DEFAULT_FETCH_MAX_ATTEMPTS,
    DEFAULT_TEMPLATE,
)
from ojtech_resume.services.cv_content_generator import ContentGenerator
from ojtech_resume.services.cv_errors import (
    CvPipelineError,
    FetchExhausted,
    GenerationCancelled,
    GenerationEndpointUnavailable,
    GenerationTransientFailure,
    PersistCacheFailure,
    RecordCreationFailed,
    StorageError,
)
from ojtech_resume.services.cv_storage import CvStorage
from ojtech_resume.services.resume_document import ResumeDocument
from ojtech_resume.services.resume_renderer import RenderOutcome, RenderPath, render_content

__all__ = [
    "CvGenerator",
    "GenerationResult",
    "GenerationState",
    "RetryPolicy",
    "fetch_with_retry",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[Any]]


class GenerationState(StrEnum):
    IDLE = "idle"
    RECORD_CREATED = "record_created"
    CONTENT_REQUESTED = "content_requested"
    CONTENT_FETCHING = "content_fetching"
    RENDERED = "rendered"
    PERSISTED = "persisted"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with a fixed delay between attempts.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        backoff_seconds: Delay before each retry.
    """

    max_attempts: int = DEFAULT_FETCH_MAX_ATTEMPTS
    backoff_seconds: float = DEFAULT_FETCH_BACKOFF_SECONDS

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds cannot be negative")

    @classmethod
    def from_env(cls) -> RetryPolicy:
        """Read ``RESUME_FETCH_MAX_ATTEMPTS`` and ``RESUME_FETCH_BACKOFF_SECONDS``.

        Invalid values are logged and replaced with the defaults.
        """
        max_attempts = _env_number(
            "RESUME_FETCH_MAX_ATTEMPTS", int, DEFAULT_FETCH_MAX_ATTEMPTS, minimum=1
        )
        backoff = _env_number(
            "RESUME_FETCH_BACKOFF_SECONDS", float, DEFAULT_FETCH_BACKOFF_SECONDS, minimum=0
        )
        return cls(max_attempts=max_attempts, backoff_seconds=backoff)


def _env_number(name: str, cast: Callable[[str], Any], default: Any, minimum: float) -> Any:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    if value < minimum:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default
    return value


@dataclass
class GenerationResult:
    """Outcome of :meth:`CvGenerator.generate`.

    ``error`` is set whenever something went wrong that the caller may want
    to report, including a recovered ``FetchExhausted`` when the in-memory
    fallback was used. Check :attr:`ok` to know whether HTML is available.
    """

    state: GenerationState = GenerationState.IDLE
    record_id: str | None = None
    html: str = ""
    document: ResumeDocument | None = None
    error: CvPipelineError | None = None
    used_fallback: bool = False
    attempts: int = 0
    states: list[GenerationState] = field(default_factory=lambda: [GenerationState.IDLE])

    @property
    def ok(self) -> bool:
        return self.state is not GenerationState.FAILED

    def advance(self, state: GenerationState) -> None:
        self.state = state
        self.states.append(state)

    def fail(self, error: CvPipelineError) -> GenerationResult:
        self.error = error
        self.advance(GenerationState.FAILED)
        return self


async def fetch_with_retry(
    fetch: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    sleep: Sleep = asyncio.sleep,
    cancel: asyncio.Event | None = None,
) -> tuple[T, int]:
    """Call *fetch* until it succeeds or the policy runs out.

    Network errors and 4xx :class:`StorageError`\\ s are retried after
    ``policy.backoff_seconds``; anything else propagates immediately. The
    *cancel* event is only checked between attempts.

    Returns:
        The fetched value and the number of attempts made.

    Raises:
        FetchExhausted: After ``policy.max_attempts`` retryable failures.
        GenerationCancelled: If *cancel* was set before an attempt started.
        StorageError: For non-retryable storage failures (5xx).
    """
    last_error: StorageError | None = None
    for attempt in range(1, policy.max_attempts + 1):
        if cancel is not None and cancel.is_set():
            raise GenerationCancelled(f"Cancelled before fetch attempt {attempt}")
        try:
            return await fetch(), attempt
        except StorageError as exc:
            if not exc.is_retryable:
                raise
            last_error = exc
            logger.warning(
                "Fetch attempt %d/%d failed (status=%s): %s",
                attempt,
                policy.max_attempts,
                exc.status_code,
                exc,
            )
        if attempt < policy.max_attempts:
            await sleep(policy.backoff_seconds)

    raise FetchExhausted(
        f"Gave up after {policy.max_attempts} attempts", attempts=policy.max_attempts
    ) from last_error


class CvGenerator:
    """Runs the generate -> store -> fetch -> render -> cache workflow.

    Args:
        storage: CV record store.
        content_generator: AI collaborator producing raw resume content.
        policy: Retry policy for reading content back.
        sleep: Awaitable used for backoff; injectable for tests.
        template_name: Template used for rendering and the HTML cache.
    """

    def __init__(
        self,
        storage: CvStorage,
        content_generator: ContentGenerator,
        policy: RetryPolicy | None = None,
        sleep: Sleep = asyncio.sleep,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> None:
        self.storage = storage
        self.content_generator = content_generator
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.template_name = template_name

    async def generate(
        self,
        profile: dict,
        owner: str,
        cancel: asyncio.Event | None = None,
    ) -> GenerationResult:
        """Create a CV record for *owner* and fill it with generated content."""
        result = GenerationResult()

        try:
            result.record_id = await self.storage.create_record(owner)
        except StorageError as exc:
            logger.exception("Could not create CV record for %s", owner)
            return result.fail(RecordCreationFailed(str(exc)))
        result.advance(GenerationState.RECORD_CREATED)

        try:
            payload = await self.content_generator.generate(profile)
        except (GenerationEndpointUnavailable, GenerationTransientFailure) as exc:
            return result.fail(exc)
        result.advance(GenerationState.CONTENT_REQUESTED)

        try:
            await self.storage.put_content(result.record_id, payload)
        except StorageError:
            logger.exception("Could not store generated content for CV %s", result.record_id)
        result.advance(GenerationState.CONTENT_FETCHING)

        try:
            content, result.attempts = await fetch_with_retry(
                lambda: self._require_content(result.record_id),
                self.policy,
                sleep=self.sleep,
                cancel=cancel,
            )
        except GenerationCancelled as exc:
            return result.fail(exc)
        except FetchExhausted as exc:
            result.attempts = exc.attempts
            if not payload:
                return result.fail(exc)
            logger.warning("Rendering CV %s from the generated payload", result.record_id)
            content = payload
            result.used_fallback = True
            result.error = exc
        except StorageError as exc:
            logger.exception("Fetching CV %s failed with a server error", result.record_id)
            return result.fail(FetchExhausted(str(exc), attempts=1))

        outcome = render_content(content, self.template_name)
        if not outcome.ok:
            return result.fail(outcome.error)
        result.html = outcome.html
        result.document = outcome.document
        result.advance(GenerationState.RENDERED)

        if await self._persist_cache(result.record_id, result.html):
            result.advance(GenerationState.PERSISTED)
        return result

    async def render_record(
        self,
        record_id: str,
        refresh: bool = False,
        template_name: str | None = None,
    ) -> RenderOutcome:
        """Return the rendered HTML of an existing record.

        Cached HTML is served unless *refresh* is set or a template other than
        the generator's own is requested. Freshly rendered HTML for the
        default template is written back to the cache.
        """
        template_name = template_name or self.template_name
        use_cache = template_name == self.template_name

        try:
            if use_cache and not refresh:
                cached, _ = await fetch_with_retry(
                    lambda: self.storage.get_rendered_html(record_id),
                    self.policy,
                    sleep=self.sleep,
                )
                if cached:
                    return RenderOutcome(html=cached, path=RenderPath.CACHED)

            raw, _ = await fetch_with_retry(
                lambda: self.storage.get_content(record_id),
                self.policy,
                sleep=self.sleep,
            )
        except FetchExhausted as exc:
            return RenderOutcome(html="", path=RenderPath.EMPTY, error=exc)
        except StorageError as exc:
            logger.exception("Fetching CV %s failed with a server error", record_id)
            return RenderOutcome(
                html="", path=RenderPath.EMPTY, error=FetchExhausted(str(exc), attempts=1)
            )

        outcome = render_content(raw, template_name)
        if outcome.ok and use_cache:
            await self._persist_cache(record_id, outcome.html)
        return outcome

    async def _require_content(self, record_id: str) -> str:
        content = await self.storage.get_content(record_id)
        if not content:
            raise StorageError(f"CV {record_id} has no content yet", status_code=404)
        return content

    async def _persist_cache(self, record_id: str, html: str) -> bool:
        try:
            await self.storage.put_rendered_html(record_id, html)
        except StorageError as exc:
            failure = PersistCacheFailure(str(exc))
            logger.warning("Could not cache rendered HTML for CV %s: %s", record_id, failure)
            return False
        return True
