from zavala.core.base import SpeakerRole, Turn


def user_turn(text: str, name: str = "alice") -> Turn:
    return Turn(speaker_role=SpeakerRole.USER, text=text, attributed_name=name)


def assistant_turn(text: str) -> Turn:
    return Turn(speaker_role=SpeakerRole.ASSISTANT, text=text)
