"""Login attempt entity and its state machine."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, FrozenSet, Optional

from ..exceptions import AuthenticationFailed, InvalidTransitionError
from ..value_objects import UserIdentity


class FlowState(str, Enum):
    """States of one authorization-code login attempt."""

    IDLE = "idle"
    AWAITING_CALLBACK = "awaiting_callback"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: Dict[FlowState, FrozenSet[FlowState]] = {
    FlowState.IDLE: frozenset({FlowState.AWAITING_CALLBACK}),
    FlowState.AWAITING_CALLBACK: frozenset({FlowState.COMPLETED, FlowState.FAILED}),
    FlowState.COMPLETED: frozenset(),
    FlowState.FAILED: frozenset(),
}


@dataclass(frozen=True)
class LoginAttempt:
    """One login attempt, from redirect to provider until terminal state.

    Instances are immutable; ``advance`` returns the attempt in its next state.
    """

    state: FlowState = FlowState.IDLE
    state_token: Optional[str] = None
    return_url: Optional[str] = None
    identity: Optional[UserIdentity] = None
    failure: Optional[AuthenticationFailed] = None

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self.state]

    @property
    def succeeded(self) -> bool:
        return self.state is FlowState.COMPLETED

    def advance(self, target: FlowState, **changes) -> "LoginAttempt":
        """Move the attempt to ``target``.

        Raises:
            InvalidTransitionError: If ``target`` is not reachable from the current state
        """
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(self.state.value, target.value)
        return replace(self, state=target, **changes)

    @classmethod
    def awaiting_callback(cls, state_token: Optional[str] = None, return_url: Optional[str] = None) -> "LoginAttempt":
        """Attempt resumed on callback, after the host redirected the user back."""
        return cls().advance(FlowState.AWAITING_CALLBACK, state_token=state_token, return_url=return_url)

    def complete(self, identity: UserIdentity) -> "LoginAttempt":
        return self.advance(FlowState.COMPLETED, identity=identity)

    def fail(self, failure: AuthenticationFailed) -> "LoginAttempt":
        return self.advance(FlowState.FAILED, failure=failure)
