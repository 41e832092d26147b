"""Backend lifecycle state and the errors raised on misuse."""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class CacheLifecycleError(RuntimeError):
    """Raised when a backend is used outside of its active state."""


class CacheNotReadyError(CacheLifecycleError):
    """Raised when a backend is used before it has been activated."""


class CacheDestroyedError(CacheLifecycleError):
    """Raised when a destroyed backend is used."""


class CacheDisconnectedError(CacheLifecycleError):
    """Raised when a disconnected backend is used."""


class LifecycleState(Enum):
    """Lifecycle of a cache backend.

    CREATED: constructed, storage not yet bootstrapped.
    ACTIVE: serving get/set/clear.
    TERMINATED: destroyed or disconnected, final.
    """

    CREATED = "created"
    ACTIVE = "active"
    TERMINATED = "terminated"


class LifecycleGuard:
    """Tracks the lifecycle of one backend and rejects calls once terminated.

    The guard is checked at the start of every public operation. Once
    terminated it cannot be reactivated; a new backend must be created.
    """

    def __init__(
        self,
        owner: str,
        terminal_error: type[CacheLifecycleError],
        terminal_message: str,
    ) -> None:
        """Initialize the guard.

        Args:
            owner: Backend name used as the error message prefix.
            terminal_error: Error class raised after termination.
            terminal_message: Message of the terminal error.
        """
        self._owner = owner
        self._terminal_error = terminal_error
        self._terminal_message = terminal_message
        self._state = LifecycleState.CREATED

    @property
    def state(self) -> LifecycleState:
        """Get the current lifecycle state."""
        return self._state

    @property
    def is_terminated(self) -> bool:
        """Check whether the backend reached its final state."""
        return self._state is LifecycleState.TERMINATED

    def activate(self) -> None:
        """Move the backend to the active state.

        Raises:
            CacheLifecycleError: If the backend was already terminated.
        """
        self.check_not_terminated()
        self._state = LifecycleState.ACTIVE
        logger.debug("%s: activated", self._owner)

    def terminate(self) -> None:
        """Move the backend to its final state."""
        self._state = LifecycleState.TERMINATED
        logger.debug("%s: %s", self._owner, self._terminal_message)

    def check_not_terminated(self) -> None:
        """Raise the terminal error if the backend was terminated."""
        if self._state is LifecycleState.TERMINATED:
            raise self._terminal_error(f"{self._owner}: {self._terminal_message}")

    def check(self) -> None:
        """Ensure the backend is active.

        Raises:
            CacheLifecycleError: If the backend is not active.
        """
        self.check_not_terminated()
        if self._state is not LifecycleState.ACTIVE:
            raise CacheNotReadyError(f"{self._owner}: Cache has not been initialized")
