from typing import Dict, List

from zavala.core.base import Turn


class ConversationWindow:
    """Keeps the most recent turns per channel with a fixed-size FIFO buffer"""

    def __init__(self, capacity: int = 6):
        self.capacity = capacity
        self._channels: Dict[str, List[Turn]] = {}

    def append(self, channel_id: str, turn: Turn) -> None:
        """Add a turn to the channel's window, evicting the oldest when full"""
        if channel_id not in self._channels:
            self._channels[channel_id] = []

        history = self._channels[channel_id]
        history.append(turn)

        while len(history) > self.capacity:
            history.pop(0)

    def snapshot(self, channel_id: str) -> List[Turn]:
        """Get a copy of the channel's turns, oldest first"""
        return list(self._channels.get(channel_id, []))

    def clear(self, channel_id: str) -> None:
        self._channels.pop(channel_id, None)

    def channel_count(self) -> int:
        """Get the number of channels with stored turns"""
        return len(self._channels)
