"""Dependency Injection Container Module.

Usage:
------
    # Initialize at startup (call once)
    from lighthouse.core.container import initialize_container
    from lighthouse.core.config import settings
    initialize_container(settings)

    # Import the global container after initialization
    from lighthouse.core import container as container_module
    ledger = container_module.container.usage_ledger

    # In tests (construct directly with fakes, don't use global)
    from lighthouse.core.container import Container
"""

from typing import TYPE_CHECKING, Optional

from lighthouse.core.container.container import Container
from lighthouse.core.container.factory import create_container

if TYPE_CHECKING:
    from lighthouse.core.config import Settings

__all__ = ["Container", "create_container", "container", "initialize_container", "reset_container"]


container: Optional[Container] = None
"""Global container instance.

Initialized via `initialize_container()` at application startup. Domain code
receives dependencies via constructor parameters and never imports this.
"""


def initialize_container(settings: "Settings") -> None:
    """Initialize the global container. Call once at startup.

    Raises:
        RuntimeError: If called more than once (container already initialized)
    """
    global container

    if container is not None:
        raise RuntimeError(
            "Container already initialized. "
            "initialize_container() should only be called once at startup."
        )

    container = create_container(settings)


def reset_container() -> None:
    """Reset the global container to None. For testing only."""
    global container
    container = None
