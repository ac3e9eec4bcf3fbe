from __future__ import annotations

from typing import Iterable, List, Set

from dodo_upload.application.pipeline.base import Middleware, Pipeline, Step, step_name


class PipelineFactory:
    """Fluent builder that wraps each step in the configured middlewares.

    Step names must be unique: failures are tagged with the step name, so two
    steps sharing one would make the tag ambiguous.

    Example:
        pipeline = PipelineFactory().add(validate).add(fingerprint).build()
    """

    def __init__(self, *, middlewares: Iterable[Middleware] | None = None):
        self._middlewares: List[Middleware] = list(middlewares or [])
        self._steps: List[Step] = []
        self._names: Set[str] = set()

    def _wrap(self, step: Step) -> Step:
        for mw in self._middlewares:
            step = mw(step)
        return step

    def add(self, step: Step) -> "PipelineFactory":
        name = step_name(step)
        if name in self._names:
            raise ValueError(f"Duplicate pipeline step name: {name}")
        self._names.add(name)
        self._steps.append(self._wrap(step))
        return self

    def extend(self, steps: Iterable[Step]) -> "PipelineFactory":
        for step in steps:
            self.add(step)
        return self

    @property
    def step_names(self) -> List[str]:
        return [step_name(s) for s in self._steps]

    def build(self) -> Pipeline:
        if not self._steps:
            raise ValueError("Cannot build an empty pipeline")
        return Pipeline(list(self._steps))
