from zavala.state.history_store import ConversationWindow
from tests.helpers import user_turn, assistant_turn


def test_snapshot_of_unseen_channel_is_empty():
    window = ConversationWindow(capacity=6)
    assert window.snapshot("c1") == []
    assert window.channel_count() == 0


def test_append_keeps_insertion_order():
    window = ConversationWindow(capacity=6)
    window.append("c1", user_turn("hi"))
    window.append("c1", assistant_turn("hello"))
    assert [t.text for t in window.snapshot("c1")] == ["hi", "hello"]


def test_oldest_turns_are_evicted_past_capacity():
    window = ConversationWindow(capacity=6)
    turns = [user_turn(f"T{i}") for i in range(1, 9)]
    for t in turns:
        window.append("c1", t)
    assert window.snapshot("c1") == turns[2:]


def test_window_never_exceeds_capacity():
    window = ConversationWindow(capacity=6)
    for n in range(1, 30):
        window.append("c1", user_turn(str(n)))
        snap = window.snapshot("c1")
        assert len(snap) == min(n, 6)
        assert snap[-1].text == str(n)


def test_snapshot_is_a_copy():
    window = ConversationWindow(capacity=6)
    window.append("c1", user_turn("a"))
    snap = window.snapshot("c1")
    snap.append(user_turn("b"))
    assert len(window.snapshot("c1")) == 1


def test_channels_are_independent_and_clear_removes_entry():
    window = ConversationWindow(capacity=6)
    window.append("c1", user_turn("a"))
    window.append("c2", user_turn("b"))
    window.clear("c1")
    window.clear("unknown")
    assert window.snapshot("c1") == []
    assert [t.text for t in window.snapshot("c2")] == ["b"]
    assert window.channel_count() == 1
