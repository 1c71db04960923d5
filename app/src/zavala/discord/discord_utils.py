import discord
from typing import Any, List, Optional, Tuple
from zavala.event import InboundEvent

MAX_CHARS_PER_REPLY_MSG = (
    1500  # discord has a 2k limit, we just break message into 1.5k
)


def split_into_shorter_messages(message: str, limit: int = MAX_CHARS_PER_REPLY_MSG) -> List[str]:
    return [
        message[i : i + limit]
        for i in range(0, len(message), limit)
    ]


def addressed_reasons(msg: discord.Message, bot_user: Optional[discord.abc.User]) -> Tuple[bool, List[str]]:
    reasons: List[str] = []
    if bot_user is None:
        return False, reasons
    if any(u.id == bot_user.id for u in msg.mentions):
        reasons.append("direct_mention")
    guild = msg.guild
    me = getattr(guild, "me", None) if guild else None
    if me is not None and msg.role_mentions:
        bot_roles = {r.id for r in me.roles}
        if any(r.id in bot_roles for r in msg.role_mentions):
            reasons.append("role_mention")
    ref = getattr(msg.reference, "resolved", None) if msg.reference else None
    if getattr(ref, "author", None) is not None and ref.author.id == bot_user.id:
        reasons.append("reply")
    return (len(reasons) > 0, reasons)


def to_inbound_event(msg: discord.Message, directed: bool) -> InboundEvent:
    author = msg.author
    return InboundEvent(
        channel_id=str(msg.channel.id),
        user_id=str(author.id),
        display_name=getattr(author, "display_name", None) or author.name,
        text=msg.content.strip(),
        is_directed_at_assistant=directed,
    )


def has_elevated_capability(member: Any) -> bool:
    """Whether the invoking guild member holds the Administrator permission.

    Plain users (e.g. in DMs) carry no guild permissions and are never elevated.
    """
    permissions = getattr(member, "guild_permissions", None)
    return bool(getattr(permissions, "administrator", False))


__all__ = [
    'split_into_shorter_messages',
    'addressed_reasons',
    'to_inbound_event',
    'has_elevated_capability',
]
