"""Simplified-mode policy gate.

The flag is resolved once from the environment at settings import
(``settings.SIMPLIFIED_MODE``) and handed to every service as an immutable
``SimplifiedMode`` value.  Services never read the environment themselves,
so tests build services in either mode without touching ``os.environ``.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

from modules.core.exceptions import SimplifiedModeDisabled


@dataclass(frozen=True)
class SimplifiedMode:
    enabled: bool = False

    @classmethod
    def from_settings(cls) -> SimplifiedMode:
        return cls(enabled=bool(getattr(settings, "SIMPLIFIED_MODE", False)))

    def guard_write(
        self,
        message: str = "This action is disabled in simplified mode.",
        error: type[SimplifiedModeDisabled] = SimplifiedModeDisabled,
    ) -> None:
        """Raise *error* when the gate is on; writes must call this first."""
        if self.enabled:
            raise error(message)
