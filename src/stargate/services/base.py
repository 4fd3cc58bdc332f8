"""BaseService: shared constructor and observer-hook dispatch.

Services take the :class:`Store` and open their own units of work with
``self._store.transaction()``. Hooks are dispatched only after that
transaction has committed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stargate.infrastructure.store import Store

logger = logging.getLogger(__name__)


class BaseService:
    def __init__(self, store: Store) -> None:
        self._store = store

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Call *hook_name* on the registered plugins, if plugins are initialized.

        INVARIANT: Plugin failures are warnings, never errors. The record
        is already committed when a plugin raises.
        """
        plugins = self._store.plugins
        if plugins is None:
            return
        try:
            plugins.dispatch(hook_name, payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook failed: {hook_name}")
