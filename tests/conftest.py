import pytest

from zavala.state.session import SessionStateManager


@pytest.fixture
def state() -> SessionStateManager:
    return SessionStateManager(
        memory_capacity=6, usage_ceiling=10, rate_window_sec=300, rate_max_events=3
    )
