"""Registry for scenario resources and listener subscriptions."""

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)


class ResourceRegistry:
    """Tracks disposable scenario resources and releases them in reverse order.

    Disposal continues when an individual disposal fails, so a page that was
    already closed by an upstream error never prevents its context from
    closing. Entries are dropped once disposed, making cleanup idempotent.

    Attributes
    ----------
    resources : list[dict]
        Registered resources in creation order
    """

    def __init__(self) -> None:
        self.resources: list[dict[str, Any]] = []

    def register(
        self,
        kind: str,
        handle: Any,
        dispose_fn: Callable[[Any], None],
        label: str = "",
    ) -> None:
        """Register a resource for lifecycle management.

        Parameters
        ----------
        kind : str
            Type of resource (e.g., "page", "context", "listener")
        handle : Any
            Resource handle to pass to dispose_fn
        dispose_fn : Callable
            Function to call during cleanup: dispose_fn(handle)
        label : str, optional
            Descriptive label for diagnostics
        """
        self.resources.append(
            {
                "kind": kind,
                "handle": handle,
                "dispose_fn": dispose_fn,
                "label": label,
            }
        )
        logger.debug(f"Registered {kind}: {label}")

    def __len__(self) -> int:
        return len(self.resources)

    def cleanup_all(self) -> list[str]:
        """Dispose every registered resource in reverse registration order.

        Returns
        -------
        list[str]
            Descriptions of disposals that raised; empty when all succeeded
        """
        errors: list[str] = []
        pending = list(reversed(self.resources))
        self.resources.clear()

        for entry in pending:
            try:
                entry["dispose_fn"](entry["handle"])
                logger.debug(f"Cleaned up {entry['kind']}: {entry['label']}")
            except Exception as e:
                errors.append(f"{entry['kind']} '{entry['label']}': {e}")
                logger.warning(
                    f"Cleanup failed for {entry['kind']} '{entry['label']}': {e}"
                )

        return errors
