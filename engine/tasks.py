from __future__ import annotations

from typing import Any, Callable, Protocol


class TaskRunner(Protocol):
    def run(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None: ...


class ImmediateRunner:
    """Runs the task inline; results are delivered before ``run`` returns."""

    def run(self, fn, on_success, on_failure) -> None:
        try:
            result = fn()
        except Exception as exc:
            on_failure(exc)
            return
        on_success(result)

    def shutdown(self) -> None:
        pass
