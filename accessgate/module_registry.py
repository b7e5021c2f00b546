"""Module Registry.

Central registry for role-gated application modules (screens, tabs,
admin panels).  The navigation shell queries this registry with the
current ``SessionState`` to decide which entries to offer.

Adding a new module = one ``register()`` call.  Gating uses the same
ranked ``satisfies`` check as ``RoleGate``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from accessgate.logger import StructuredLogger
from accessgate.models.enums import Role
from accessgate.models.session_state import SessionState
from accessgate.roles import RoleLike, parse_role, satisfies


class ModuleEntry:
    """Metadata for a single registered module.

    Attributes
    ----------
    module_id:
        Unique string identifier (e.g. ``'bookings'``).
    display_name:
        Human-readable name shown in navigation.
    icon:
        Unicode character used as the navigation icon.
    factory:
        Zero-argument callable building the module's root view.  Called
        lazily by the shell on first activation.
    required_role:
        Minimum role that may access this module.
    """

    __slots__ = (
        "module_id",
        "display_name",
        "icon",
        "factory",
        "required_role",
    )

    def __init__(
        self,
        module_id: str,
        display_name: str,
        icon: str,
        factory: Callable[[], Any],
        required_role: Role,
    ) -> None:
        self.module_id = module_id
        self.display_name = display_name
        self.icon = icon
        self.factory = factory
        self.required_role = required_role


class ModuleRegistry:
    """Manages the collection of registered modules.

    Parameters
    ----------
    logger:
        Structured logger for registration events.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self._entries: dict[str, ModuleEntry] = {}
        self._logger = logger
        self._default_module_id: str = ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(
        self,
        module_id: str,
        display_name: str,
        icon: str,
        factory: Callable[[], Any],
        required_role: RoleLike = Role.CUSTOMER,
        *,
        default: bool = False,
    ) -> None:
        """Register a module with the shell.

        Parameters
        ----------
        module_id:
            Unique identifier for the module.
        display_name:
            Label shown in navigation.
        icon:
            Unicode icon character for the navigation entry.
        factory:
            Callable ``() -> view`` invoked lazily on first use.
        required_role:
            Minimum role permitted to access this module.
        default:
            If ``True``, this module is activated after sign-in.
        """
        role = parse_role(required_role)
        if module_id in self._entries:
            self._logger.warning(
                "Module '%s' already registered; overwriting.", module_id,
            )
        self._entries[module_id] = ModuleEntry(
            module_id=module_id,
            display_name=display_name,
            icon=icon,
            factory=factory,
            required_role=role,
        )
        if default or not self._default_module_id:
            self._default_module_id = module_id
        self._logger.info(
            "Module registered: %s (%s, requires %s)", module_id, display_name, role,
        )

    def get_modules_for_state(self, state: SessionState) -> list[ModuleEntry]:
        """Return modules visible in *state*, preserving registration order.

        Nothing is visible while the session is loading.
        """
        if state.loading:
            return []
        return [
            entry
            for entry in self._entries.values()
            if satisfies(state.profile, entry.required_role)
        ]

    def get_module(self, module_id: str) -> ModuleEntry:
        """Return a specific module entry by ID.

        Raises
        ------
        KeyError
            If *module_id* is not registered.
        """
        if module_id not in self._entries:
            raise KeyError(f"Module '{module_id}' is not registered.")
        return self._entries[module_id]

    def default_module_for(self, state: SessionState) -> Optional[ModuleEntry]:
        """The module to activate after sign-in, or the first visible one."""
        visible = self.get_modules_for_state(state)
        for entry in visible:
            if entry.module_id == self._default_module_id:
                return entry
        return visible[0] if visible else None

    @property
    def default_module_id(self) -> str:
        """The ``module_id`` to activate after sign-in."""
        return self._default_module_id
