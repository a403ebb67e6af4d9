"""Схемы входящих сообщений WebSocket."""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter, model_validator

from .constants import GamePrivacy


class JoinQueueMessage(BaseModel):
    """Встать в очередь: публичную, создать приватную или войти по id."""
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["join_queue"]
    queue: Optional[GamePrivacy] = None
    game_id: Optional[str] = Field(default=None, alias="gameId")

    @model_validator(mode="after")
    def _queue_or_game_id(self):
        if not self.game_id and self.queue is None:
            raise ValueError("either queue or gameId is required")
        return self


class LeaveQueueMessage(BaseModel):
    type: Literal["leave_queue"]


class PlayMessage(BaseModel):
    type: Literal["play"]
    slot: StrictInt


class ResyncMessage(BaseModel):
    type: Literal["re_sync"]


InboundMessage = Annotated[
    Union[JoinQueueMessage, LeaveQueueMessage, PlayMessage, ResyncMessage],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def parse_inbound(raw: str | bytes) -> InboundMessage:
    """Разбирает JSON-сообщение клиента. Бросает pydantic.ValidationError."""
    return inbound_adapter.validate_json(raw)
