"""
accessgate Entry Point.

Bootstraps the auth layer via constructor injection: configuration,
Supabase connection, collaborators, ``SessionManager`` and the module
registry the navigation shell reads.  Every subsystem is wired here;
no module-level globals.

Usage::

    python main.py
"""

from __future__ import annotations

import atexit
import sys

from accessgate.client import SupabaseConnection
from accessgate.config import get_config
from accessgate.logger import StructuredLogger, get_logger
from accessgate.models.enums import Role
from accessgate.models.session_state import SessionState
from accessgate.module_registry import ModuleRegistry
from accessgate.services import ServiceContainer, create_services


def build_registry(logger: StructuredLogger) -> ModuleRegistry:
    """Register the app's top-level modules with their minimum roles."""
    registry = ModuleRegistry(logger=logger)
    registry.register(
        module_id="home",
        display_name="Home",
        icon="\U0001F3E0",  # House
        factory=lambda: "home",
        required_role=Role.CUSTOMER,
        default=True,
    )
    registry.register(
        module_id="schedule",
        display_name="Staff Schedule",
        icon="\U0001F4C5",  # Calendar
        factory=lambda: "schedule",
        required_role=Role.STAFF,
    )
    registry.register(
        module_id="location",
        display_name="Location Admin",
        icon="\U0001F3EA",  # Store
        factory=lambda: "location",
        required_role=Role.LOCATION_ADMIN,
    )
    registry.register(
        module_id="platform",
        display_name="Platform Admin",
        icon="\U0001F6E1",  # Shield
        factory=lambda: "platform",
        required_role=Role.SUPER_ADMIN,
    )
    return registry


def bootstrap() -> ServiceContainer:
    """Wire the dependency graph and start the session manager."""
    config = get_config()

    connection = SupabaseConnection(
        supabase_url=config.SUPABASE_URL,
        supabase_key=config.SUPABASE_ANON_KEY.get_secret_value(),
        logger=StructuredLogger(name="supabase"),
    )
    services = create_services(connection=connection, config=config)

    session = services["session"]
    # close() is idempotent; this covers interpreter exit on any path.
    atexit.register(session.close)
    session.start()
    return services


def main() -> None:
    """Application entry point: wire dependencies and report the session."""
    logger: StructuredLogger = get_logger("main")
    logger.info("Starting accessgate...")

    services = bootstrap()
    session = services["session"]
    registry = build_registry(get_logger("modules"))

    def _report(state: SessionState) -> None:
        visible = [entry.module_id for entry in registry.get_modules_for_state(state)]
        logger.info(
            "Session is %s (role: %s); modules: %s",
            state.status,
            state.role or "none",
            ", ".join(visible) or "none",
        )

    session.add_listener(_report)
    try:
        _report(session.state)
        if session.is_development and session.user is None:
            session.enable_dev_mode()
    finally:
        session.close()
        logger.info("accessgate shut down.")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pass
    except Exception as exc:
        sys.stderr.write(f"FATAL: {type(exc).__name__}: {exc}\n")
        sys.exit(1)
