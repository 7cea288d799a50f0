"""Collaborator protocols the orchestrator delivers results to."""

from typing import Any, Awaitable, Callable, Protocol, Sequence, runtime_checkable

RetryTrigger = Callable[[], Awaitable[Any]]


@runtime_checkable
class Renderer(Protocol):
    """Receives the movies array. Responsible for escaping every field."""

    def render(self, movies: Sequence[Any]) -> None:
        ...


@runtime_checkable
class ErrorPresenter(Protocol):
    """Receives a user-facing message and a zero-argument retry trigger."""

    def show_error(self, message: str, retry: RetryTrigger) -> None:
        ...
