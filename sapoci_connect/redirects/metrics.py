"""Metrics collection for redirect following."""

from dataclasses import dataclass, field
from threading import Lock
from typing import ClassVar

from sapoci_connect.redirects.models import RedirectAction, RedirectErrorClass


@dataclass
class RedirectMetrics:
    """Metrics for redirect chains.

    Singleton class that tracks chains started, redirects followed, policy
    decisions and chain failures. Counters may be updated from several
    threads.
    """

    redirect_chains_total: int = 0
    redirects_followed_total: int = 0
    redirect_actions_total: dict[str, int] = field(default_factory=dict)
    redirect_failures_total: dict[str, int] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    _instance: ClassVar["RedirectMetrics | None"] = None
    _instance_lock: ClassVar[Lock] = Lock()

    @classmethod
    def get_instance(cls) -> "RedirectMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record_chain(self) -> None:
        """Record the start of a redirect chain."""
        with self._lock:
            self.redirect_chains_total += 1

    def record_action(self, action: RedirectAction) -> None:
        """Record a policy decision.

        Args:
            action: Decision taken for a response.
        """
        key = action.value
        with self._lock:
            self.redirect_actions_total[key] = (
                self.redirect_actions_total.get(key, 0) + 1
            )

    def record_redirect(self) -> None:
        """Record a followed redirect."""
        with self._lock:
            self.redirects_followed_total += 1

    def record_failure(self, error_class: RedirectErrorClass) -> None:
        """Record a failed chain.

        Args:
            error_class: Classification of the failure.
        """
        key = error_class.value
        with self._lock:
            self.redirect_failures_total[key] = (
                self.redirect_failures_total.get(key, 0) + 1
            )

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "redirect_chains_total": self.redirect_chains_total,
                "redirects_followed_total": self.redirects_followed_total,
                "redirect_actions_total": dict(self.redirect_actions_total),
                "redirect_failures_total": dict(self.redirect_failures_total),
            }
