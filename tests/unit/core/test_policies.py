import pytest

from modules.core.exceptions import SimplifiedModeDisabled
from modules.core.policies import SimplifiedMode
from modules.orders.exceptions import OrderingDisabled

pytestmark = pytest.mark.unit


class TestSimplifiedMode:
    def test_disabled_by_default(self):
        assert SimplifiedMode().enabled is False

    def test_guard_write_is_noop_when_disabled(self):
        SimplifiedMode(enabled=False).guard_write()

    def test_guard_write_raises_when_enabled(self):
        with pytest.raises(SimplifiedModeDisabled):
            SimplifiedMode(enabled=True).guard_write()

    def test_guard_write_uses_given_error_and_message(self):
        with pytest.raises(OrderingDisabled, match="Ordering is off"):
            SimplifiedMode(enabled=True).guard_write(
                "Ordering is off", error=OrderingDisabled
            )

    def test_from_settings(self, settings):
        settings.SIMPLIFIED_MODE = True
        assert SimplifiedMode.from_settings().enabled is True

        settings.SIMPLIFIED_MODE = False
        assert SimplifiedMode.from_settings().enabled is False

    def test_is_immutable(self):
        mode = SimplifiedMode(enabled=False)
        with pytest.raises(AttributeError):
            mode.enabled = True
