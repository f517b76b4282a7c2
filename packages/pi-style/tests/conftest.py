import pytest
from pi.style.config import Settings, reset_settings, set_settings


@pytest.fixture(autouse=True)
def color_settings():
    """Start every test from a known configuration with true color forced on."""
    settings = Settings(force_color=True, is_tty=True)
    set_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def no_tty():
    """Configuration of a non-interactive output stream with no overrides."""
    settings = Settings(is_tty=False)
    set_settings(settings)
    return settings
