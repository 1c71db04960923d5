from dotenv import load_dotenv
import os
from zavala.core.base import BotConfig
from zavala.core.config import load_config

load_dotenv()

# load config.yaml (override location with ZAVALA_CONFIG)
CONFIG: BotConfig = load_config(os.environ.get("ZAVALA_CONFIG"))

BOT_NAME = CONFIG.name
OPENAI_MODEL = CONFIG.model
SYSTEM_PROMPT = CONFIG.render_system_prompt()
OPENAI_MAX_TOKENS = CONFIG.max_tokens
OPENAI_TEMPERATURE = CONFIG.temperature

DISCORD_BOT_TOKEN = os.environ["DISCORD_BOT_TOKEN"]
OPENAI_API_KEY = os.environ["OPENAI_API_KEY"]

OPENAI_TIMEOUT_SEC = float(os.environ.get("OPENAI_TIMEOUT_SEC", "20"))
# 1 = no automatic retry; failures are reported to the user instead
OPENAI_MAX_ATTEMPTS = int(os.environ.get("OPENAI_MAX_ATTEMPTS", "1"))

# Shared conversation context per channel (turns)
CONVERSATION_MAX_TURNS = int(os.environ.get("CONVERSATION_MAX_TURNS", "6"))

# Lifetime (process) cap on answered requests per user
USAGE_MAX = int(os.environ.get("USAGE_MAX", "10"))

# Per-user sliding window rate limit
RATE_LIMIT_WINDOW_SEC = int(os.environ.get("RATE_LIMIT_WINDOW_SEC", "300"))  # 5 minutes
RATE_LIMIT_MAX_EVENTS = int(os.environ.get("RATE_LIMIT_MAX_EVENTS", "3"))

# Queue model calls per channel so replies land in request order (0/1). Default=1
SERIALIZE_CHANNEL_REPLIES = int(os.environ.get("SERIALIZE_CHANNEL_REPLIES", "1"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
