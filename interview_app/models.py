from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, ValidationError
from loguru import logger


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class FacialExpression(str, Enum):
    SMILE = "smile"
    DEFAULT = "default"
    FUNNY_FACE = "funnyFace"
    SAD = "sad"


class Animation(str, Enum):
    TALKING_0 = "Talking_0"
    TALKING_1 = "Talking_1"
    TALKING_2 = "Talking_2"
    IDLE = "Idle"


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class MouthCue(BaseModel):
    start: float
    end: float
    value: str


class LipSync(BaseModel):
    mouthCues: List[MouthCue] = []


class StructuredReply(BaseModel):
    text: str
    facialExpression: FacialExpression = FacialExpression.DEFAULT
    animation: Animation = Animation.TALKING_1


class ReplyMessage(BaseModel):
    text: str
    # No audio is synthesized server-side; the browser speaks `text` itself
    audio: str = ""
    lipsync: LipSync
    facialExpression: FacialExpression
    animation: Animation


class ChatRequest(BaseModel):
    message: Optional[str] = None
    sessionId: Optional[str] = None
    model: Optional[str] = None


class ChatResponse(BaseModel):
    messages: List[ReplyMessage]
    model: Optional[str] = None
    error: Optional[str] = None


class ResetRequest(BaseModel):
    sessionId: Optional[str] = None


class ResetResponse(BaseModel):
    success: bool = True
    message: str = "Conversation reset"


class ModelInfo(BaseModel):
    id: str
    name: str
    description: str
    speed: str


class ModelCatalogResponse(BaseModel):
    current: str
    available: List[ModelInfo]
    usage: str


class ChatCompletion(BaseModel):
    content: str = ""
    model: Optional[str] = None


def parse_body(model_cls: type[BaseModel], body: Any) -> BaseModel:
    """
    Validate a raw JSON body. Fields with the wrong type are dropped one by one,
    so a bad `message` never discards a good `sessionId`. A body that is not
    an object becomes an empty request.
    """
    if not isinstance(body, dict):
        return model_cls()
    try:
        return model_cls.model_validate(body)
    except ValidationError as e:
        invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
        logger.warning(f"Ignoring invalid {model_cls.__name__} field(s): {sorted(map(str, invalid))}")

    cleaned = {key: value for key, value in body.items() if key not in invalid}
    try:
        return model_cls.model_validate(cleaned)
    except ValidationError:
        return model_cls()
