from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SpeakerRole(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class Turn:
    speaker_role: SpeakerRole
    text: str
    attributed_name: Optional[str] = None

    def render(self):
        content = self.text
        if self.speaker_role is SpeakerRole.USER and self.attributed_name:
            content = f"{self.attributed_name} says: {self.text}"
        return {"role": self.speaker_role.value, "content": content}


@dataclass(frozen=True)
class BotConfig:
    name: str
    model: str
    system_prompt: str
    max_tokens: int = 150
    temperature: float = 0.9

    def render_system_prompt(self) -> str:
        return self.system_prompt.format(name=self.name)
