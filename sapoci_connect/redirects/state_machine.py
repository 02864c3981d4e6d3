"""State machine for a single redirect chain."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class RedirectPhase(str, Enum):
    """Phase of a redirect chain.

    - SENDING: A request is with the inner handler
    - EVALUATING: A response arrived and is checked against the policy
    - REDIRECTING: The next request is being built
    - DONE: A terminal response was returned
    - FAILED: The chain stopped with a redirect error
    """

    SENDING = "SENDING"
    EVALUATING = "EVALUATING"
    REDIRECTING = "REDIRECTING"
    DONE = "DONE"
    FAILED = "FAILED"


# Valid state transitions
_VALID_TRANSITIONS: dict[RedirectPhase, set[RedirectPhase]] = {
    RedirectPhase.SENDING: {RedirectPhase.EVALUATING},
    RedirectPhase.EVALUATING: {
        RedirectPhase.DONE,
        RedirectPhase.REDIRECTING,
        RedirectPhase.FAILED,
    },
    RedirectPhase.REDIRECTING: {RedirectPhase.SENDING},
    RedirectPhase.DONE: set(),  # Terminal state
    RedirectPhase.FAILED: set(),  # Terminal state
}


class RedirectStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        chain_id: str,
        from_state: RedirectPhase,
        to_state: RedirectPhase,
    ) -> None:
        """Initialize the transition error.

        Args:
            chain_id: Identifier of the redirect chain.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.chain_id = chain_id
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for redirect chain '{chain_id}': "
            f"{from_state.value} -> {to_state.value}"
        )


class RedirectStateMachine:
    """Manages state transitions for one redirect chain.

    Enforces valid transitions and logs all state changes.
    """

    def __init__(
        self,
        chain_id: str,
        initial_state: RedirectPhase = RedirectPhase.SENDING,
    ) -> None:
        """Initialize the state machine.

        Args:
            chain_id: Identifier for the chain, used in log output.
            initial_state: Starting state.
        """
        self._chain_id = chain_id
        self._state = initial_state
        self._log = logger.bind(component="redirects", chain_id=chain_id)

    @property
    def chain_id(self) -> str:
        """Get the chain identifier."""
        return self._chain_id

    @property
    def state(self) -> RedirectPhase:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (RedirectPhase.DONE, RedirectPhase.FAILED)

    def can_transition_to(self, target: RedirectPhase) -> bool:
        """Check if a transition to the target state is valid.

        Args:
            target: The target state.

        Returns:
            True if the transition is valid.
        """
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: RedirectPhase) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            RedirectStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise RedirectStateTransitionError(
                chain_id=self._chain_id,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target

        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_sending(self) -> None:
        """Transition to SENDING state."""
        self.transition_to(RedirectPhase.SENDING)

    def to_evaluating(self) -> None:
        """Transition to EVALUATING state."""
        self.transition_to(RedirectPhase.EVALUATING)

    def to_redirecting(self) -> None:
        """Transition to REDIRECTING state."""
        self.transition_to(RedirectPhase.REDIRECTING)

    def to_done(self) -> None:
        """Transition to DONE state."""
        self.transition_to(RedirectPhase.DONE)

    def to_failed(self) -> None:
        """Transition to FAILED state."""
        self.transition_to(RedirectPhase.FAILED)
