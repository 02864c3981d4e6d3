"""Ordered request-handling pipeline."""

from collections.abc import Sequence

from sapoci_connect.http.models import HttpRequest, HttpResponse
from sapoci_connect.http.transport import Transport
from sapoci_connect.pipeline.stages import Stage


class Pipeline:
    """An ordered list of stages in front of a transport.

    The stage list is fixed at construction. ``send`` runs the first stage,
    whose ``next_handler`` runs the second, and so on; the last stage's
    ``next_handler`` is the transport itself.
    """

    def __init__(self, stages: Sequence[Stage], transport: Transport) -> None:
        """Initialize the pipeline.

        Args:
            stages: Stages in outermost-first order.
            transport: Transport that performs the actual exchange.
        """
        self._stages: tuple[Stage, ...] = tuple(stages)
        self._transport = transport

    @property
    def stages(self) -> tuple[Stage, ...]:
        """Get the stages in order."""
        return self._stages

    @property
    def transport(self) -> Transport:
        """Get the transport."""
        return self._transport

    def send(self, request: HttpRequest) -> HttpResponse:
        """Send a request through every stage and the transport.

        Args:
            request: Request to send.

        Returns:
            Response produced by the outermost stage.
        """
        return self._dispatch(0, request)

    def _dispatch(self, index: int, request: HttpRequest) -> HttpResponse:
        if index == len(self._stages):
            return self._transport.send(request)

        stage = self._stages[index]
        return stage.handle(request, lambda req: self._dispatch(index + 1, req))
