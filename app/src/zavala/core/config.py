import os
from typing import Optional

import dacite
import yaml

from zavala.core.base import BotConfig

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.realpath(__file__))), "config.yaml"
)


def load_config(path: Optional[str] = None) -> BotConfig:
    """Load the bot persona and model settings from a yaml file."""
    with open(path or DEFAULT_CONFIG_PATH, "r") as f:
        raw = yaml.safe_load(f) or {}
    return dacite.from_dict(
        BotConfig, raw, config=dacite.Config(type_hooks={float: float})
    )
