from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from time import perf_counter
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

from dodo_upload.core.exceptions import UploadToolError

logger = logging.getLogger(__name__)


def _new_run_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(slots=True)
class PipelineContext:
    """State of a single upload run.

    - input: caller-supplied values (file_path, token, uid), read-only by convention
    - artifacts: values produced by steps for later steps
    - run_id: short id that ties the log lines of one run together
    """

    input: Mapping[str, Any]
    artifacts: Dict[str, Any] = field(default_factory=dict)
    run_id: str = field(default_factory=_new_run_id)

    def set(self, key: str, value: Any) -> None:
        self.artifacts[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self.artifacts.get(key, default)

    def has(self, key: str) -> bool:
        return key in self.artifacts

    def update(self, **items: Any) -> None:
        self.artifacts.update(items)

    def require(self, keys: Iterable[str]) -> None:
        missing = [k for k in keys if k not in self.artifacts]
        if missing:
            raise KeyError(f"Missing required context keys: {', '.join(missing)}")


class StepStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@runtime_checkable
class Step(Protocol):
    name: str

    async def __call__(self, context: PipelineContext) -> None:  # pragma: no cover - protocol
        ...


class Middleware(Protocol):  # pragma: no cover - extension point
    def __call__(self, step: Step) -> Step: ...


def step_name(step: Any) -> str:
    return getattr(step, "name", step.__class__.__name__)


class BaseStep(ABC):
    """Runs once per pipeline run; there is no retry.

    Subclasses implement ``run`` and may override ``can_skip``. A failure is
    recorded on the step and re-raised; ``UploadToolError`` instances are
    tagged with the step name first so callers can say where a run stopped.
    """

    name: str = "base_step"
    required_keys: List[str] = []

    status: StepStatus = StepStatus.PENDING
    last_error: Optional[BaseException] = None
    duration: float = 0.0

    async def __call__(self, context: PipelineContext) -> None:
        self.last_error = None
        missing = [k for k in self.required_keys if not context.has(k)]
        if missing:
            raise KeyError(
                f"Missing required inputs for step '{self.name}': {', '.join(missing)}"
            )

        if self.can_skip(context):
            self.status = StepStatus.SKIPPED
            logger.info("[run_id=%s] Step %s skipped", context.run_id, self.name)
            return

        self.status = StepStatus.RUNNING
        start = perf_counter()
        try:
            await self.run(context)
        except Exception as e:  # noqa: BLE001
            self.status = StepStatus.FAILED
            self.last_error = e
            if isinstance(e, UploadToolError) and e.step is None:
                e.step = self.name
            raise
        else:
            self.status = StepStatus.COMPLETED
        finally:
            self.duration = perf_counter() - start

    @abstractmethod
    async def run(self, context: PipelineContext) -> None:  # pragma: no cover - abstract
        ...

    def can_skip(self, context: PipelineContext) -> bool:
        return False


@dataclass
class StepReport:
    name: str
    status: StepStatus = StepStatus.PENDING
    duration: float = 0.0
    error: Optional[str] = None


@dataclass
class PipelineReport:
    context: PipelineContext
    steps: List[StepReport] = field(default_factory=list)
    duration: float = 0.0

    def status_of(self, name: str) -> Optional[StepStatus]:
        for s in self.steps:
            if s.name == name:
                return s.status
        return None


class Pipeline:
    """Runs steps in order over one context.

    The first exception aborts the run: it is recorded on the step's report
    entry, logged, and re-raised. Later steps never run.
    """

    def __init__(self, steps: List[Step]):
        self._steps = steps

    @property
    def steps(self) -> List[Step]:
        return list(self._steps)

    async def execute(self, context: PipelineContext) -> PipelineReport:
        report = PipelineReport(context=context)
        started = perf_counter()

        for step in self._steps:
            entry = StepReport(name=step_name(step))
            report.steps.append(entry)
            step_start = perf_counter()
            try:
                await step(context)
            except Exception as e:  # noqa: BLE001
                entry.status = StepStatus.FAILED
                entry.error = str(e)
                logger.warning(
                    "[run_id=%s] Run aborted at step %s: %s", context.run_id, entry.name, e
                )
                raise
            else:
                entry.status = getattr(step, "status", StepStatus.COMPLETED)
            finally:
                entry.duration = perf_counter() - step_start

        report.duration = perf_counter() - started
        return report


def make_logging_middleware(
    logger_obj: logging.Logger | None = None,
    level_before: int = logging.DEBUG,
    level_after: int = logging.INFO,
) -> Middleware:
    """Log a BEGIN line before and an END line (status, duration) after each step."""
    _log = logger_obj or logger

    def _middleware(step: Step) -> Step:
        class _Logged:
            def __init__(self, inner: Step):
                self._inner = inner

            def __getattr__(self, item):  # name, status, can_skip ...
                return getattr(self._inner, item)

            async def __call__(self, context: PipelineContext) -> None:
                name = step_name(self._inner)
                _log.log(level_before, "[run_id=%s] Step %s BEGIN", context.run_id, name)
                start = perf_counter()
                try:
                    await self._inner(context)
                finally:
                    status = getattr(self._inner, "status", StepStatus.PENDING)
                    _log.log(
                        level_after,
                        "[run_id=%s] Step %s END status=%s duration=%.3fs",
                        context.run_id,
                        name,
                        getattr(status, "value", str(status)),
                        perf_counter() - start,
                    )

        return _Logged(step)

    return _middleware
