#!/usr/bin/env python3
import os
import sys
import time
import discord
from functools import partial

sys.path.append(os.path.dirname(os.path.realpath(__file__)))

from zavala.constants import (
    DISCORD_BOT_TOKEN,
    OPENAI_API_KEY,
    OPENAI_MODEL,
    OPENAI_MAX_TOKENS,
    OPENAI_TEMPERATURE,
    OPENAI_TIMEOUT_SEC,
    OPENAI_MAX_ATTEMPTS,
    SYSTEM_PROMPT,
    CONVERSATION_MAX_TURNS,
    USAGE_MAX,
    RATE_LIMIT_WINDOW_SEC,
    RATE_LIMIT_MAX_EVENTS,
    SERIALIZE_CHANNEL_REPLIES,
    LOG_LEVEL,
)
from zavala.infra.logging import logger, log_event, setup_logging
from zavala.state import SessionStateManager
from zavala.commands import (
    ADMIN_RESET_DESCRIPTION,
    RESET_DESCRIPTION,
    STATS_DESCRIPTION,
    CommandResponse,
    CommandRouter,
)
from zavala.event import MessageHandler
from zavala.llm.completion import CompletionSettings, generate_completion_response
from zavala.discord.discord_utils import (
    addressed_reasons,
    has_elevated_capability,
    split_into_shorter_messages,
    to_inbound_event,
)

setup_logging(LOG_LEVEL)

intents = discord.Intents.default()
intents.message_content = True  # needed to read message text
intents.guilds = True
intents.guild_messages = True
log_event("startup_intents", message_content=intents.message_content, guilds=intents.guilds)

client = discord.Client(intents=intents)
tree = discord.app_commands.CommandTree(client)

session_state = SessionStateManager(
    memory_capacity=CONVERSATION_MAX_TURNS,
    usage_ceiling=USAGE_MAX,
    rate_window_sec=RATE_LIMIT_WINDOW_SEC,
    rate_max_events=RATE_LIMIT_MAX_EVENTS,
)
completion_settings = CompletionSettings(
    model=OPENAI_MODEL,
    api_key=OPENAI_API_KEY,
    max_tokens=OPENAI_MAX_TOKENS,
    temperature=OPENAI_TEMPERATURE,
    timeout=OPENAI_TIMEOUT_SEC,
    max_attempts=OPENAI_MAX_ATTEMPTS,
)
message_handler = MessageHandler(
    state=session_state,
    complete=partial(generate_completion_response, settings=completion_settings),
    system_prompt=SYSTEM_PROMPT,
    serialize_channels=bool(SERIALIZE_CHANNEL_REPLIES),
    clock=time.time,
    split_reply=split_into_shorter_messages,
)
command_router = CommandRouter(state=session_state)


@client.event
async def on_ready():
    try:
        synced = await tree.sync()
        log_event("commands_registered", count=len(synced))
    except Exception as e:
        logger.exception(e)
        log_event("commands_register_failed", error=str(e)[:300])
    log_event("login", user=str(client.user), guild_count=len(client.guilds))


@client.event
async def on_message(message: discord.Message):
    try:
        # ignore messages from bots (including ourselves)
        if message.author.bot:
            return

        addressed, reasons = addressed_reasons(message, client.user)
        log_event(
            "on_message",
            author_id=message.author.id,
            channel_id=message.channel.id,
            addressed=addressed,
            reasons=','.join(reasons) if reasons else None,
        )
        await message_handler.handle(
            to_inbound_event(message, directed=addressed),
            reply=message.reply,
            typing=message.channel.typing,
        )
    except Exception as e:
        logger.exception(e)


async def _send(int: discord.Interaction, response: CommandResponse):
    await int.response.send_message(response.content, ephemeral=response.ephemeral)


# /reset
@tree.command(name="reset", description=RESET_DESCRIPTION)
async def reset_command(int: discord.Interaction):
    try:
        await _send(int, command_router.reset(str(int.user.id)))
    except Exception as e:
        logger.exception(e)


# /admin-reset target:
@tree.command(name="admin-reset", description=ADMIN_RESET_DESCRIPTION)
@discord.app_commands.describe(target="User to reset")
async def admin_reset_command(int: discord.Interaction, target: discord.User):
    try:
        response = command_router.admin_reset(
            str(int.user.id),
            elevated=has_elevated_capability(int.user),
            target_id=str(target.id),
        )
        await _send(int, response)
    except Exception as e:
        logger.exception(e)


# /stats
@tree.command(name="stats", description=STATS_DESCRIPTION)
async def stats_command(int: discord.Interaction):
    try:
        channel_id = str(int.channel_id) if int.channel_id is not None else None
        await _send(int, command_router.stats(str(int.user.id), channel_id=channel_id))
    except Exception as e:
        logger.exception(e)


if __name__ == "__main__":
    client.run(DISCORD_BOT_TOKEN, log_handler=None)
