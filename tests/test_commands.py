from zavala.commands import (
    ADMIN_RESET_DESCRIPTION,
    RESET_DESCRIPTION,
    STATS_DESCRIPTION,
    CommandRouter,
)
from tests.helpers import user_turn


def make_router(state, now=10.0):
    return CommandRouter(state=state, clock=lambda: now)


def test_reset_clears_own_limits(state):
    for t in (0, 1, 2):
        state.handle_inbound("c1", "u1", user_turn("q"), now=t)
    response = make_router(state).reset("u1")
    assert response.content == "✅ Your session has been reset."
    assert response.ephemeral is True
    stats = state.stats("u1", now=10)
    assert (stats.usage, stats.window_entries) == (0, 0)


def test_admin_reset_requires_elevated_caller(state):
    state.handle_inbound("c1", "u2", user_turn("q"), now=0)
    response = make_router(state).admin_reset("u1", elevated=False, target_id="u2")
    assert response.content == "❌ You do not have permission to use this command."
    assert response.ephemeral is True
    assert state.stats("u2", now=10).usage == 1


def test_admin_reset_resets_target_only(state):
    state.handle_inbound("c1", "u1", user_turn("q"), now=0)
    state.handle_inbound("c1", "u2", user_turn("q"), now=0)
    response = make_router(state).admin_reset("admin", elevated=True, target_id="u2")
    assert response.content == "✅ Reset session for <@u2>."
    assert state.stats("u2", now=10).usage == 0
    assert state.stats("u1", now=10).usage == 1


def test_stats_lists_each_counter_against_ceiling(state):
    state.handle_inbound("c1", "u1", user_turn("q"), now=0)
    state.handle_inbound("c1", "u2", user_turn("other"), now=0, directed=False)
    response = make_router(state).stats("u1", channel_id="c1")
    assert response.ephemeral is True
    assert response.content == (
        "**Your Stats:**\n"
        "- Usage Count: 1/10\n"
        "- Memory Entries: 2/6\n"
        "- Recent Requests: 1/3"
    )


def test_stats_window_uses_router_clock(state):
    state.handle_inbound("c1", "u1", user_turn("q"), now=0)
    response = make_router(state, now=1000.0).stats("u1")
    assert "- Recent Requests: 0/3" in response.content
    assert "- Memory Entries: 0/6" in response.content


def test_reset_descriptions_do_not_promise_history_clearing():
    for description in (RESET_DESCRIPTION, ADMIN_RESET_DESCRIPTION):
        assert "history" not in description.lower()
        assert "rate limit" in description
    # discord caps slash command descriptions at 100 characters
    assert all(len(d) <= 100 for d in (RESET_DESCRIPTION, ADMIN_RESET_DESCRIPTION, STATS_DESCRIPTION))


def test_reset_keeps_channel_context(state):
    state.handle_inbound("c1", "u1", user_turn("q"), now=0)
    make_router(state).reset("u1")
    assert state.stats("u1", now=10, channel_id="c1").memory_entries == 1
