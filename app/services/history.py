"""Stored chat messages and their normalization into Gemini turns."""

from typing import Iterable, List, Literal, Optional
from pydantic import BaseModel

class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: Optional[str] = ""

class Turn(BaseModel):
    role: Literal["user", "model"]
    content: str

def normalize_history(messages: Iterable[Message]) -> List[Turn]:
    """
    Turns stored messages into a Gemini-valid history.

    Gemini rejects histories that open with the model role or repeat a role
    back to back, so leading assistant messages are dropped and each run of
    same-role messages collapses to its first member.
    """
    valid = [m for m in messages if m.content]
    first_user = next((i for i, m in enumerate(valid) if m.role == "user"), None)
    if first_user is None:
        return []

    turns: List[Turn] = []
    last_role = None
    for msg in valid[first_user:]:
        role = "model" if msg.role == "assistant" else "user"
        if role == last_role:
            continue
        turns.append(Turn(role=role, content=msg.content))
        last_role = role
    return turns
