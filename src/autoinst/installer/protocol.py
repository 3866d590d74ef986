"""Line protocol spoken with the low-level installer.

The session starts with the installer configuration written as one JSON
line; afterwards the installer emits one JSON object per line, tagged by its
``type`` field.
"""

import logging
from typing import Annotated, BinaryIO, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from autoinst.errors import InstallerProtocolError
from autoinst.installer.config import InstallConfig


logger = logging.getLogger(__name__)


class InfoMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["message"] = "message"
    message: str


class ErrorMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["error"] = "error"
    message: str


class PromptMessage(BaseModel):
    """Query that needs an operator decision."""
    model_config = ConfigDict(frozen=True)

    type: Literal["prompt"] = "prompt"
    query: str


class ProgressMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["progress"] = "progress"
    ratio: float = Field(..., ge=0.0, le=1.0)
    text: Optional[str] = None


class FinishedMessage(BaseModel):
    """Last message of a session."""
    model_config = ConfigDict(frozen=True)

    type: Literal["finished"] = "finished"
    state: str
    message: str


LowLevelMessage = Annotated[
    Union[InfoMessage, ErrorMessage, PromptMessage, ProgressMessage, FinishedMessage],
    Field(discriminator="type"),
]

_message_adapter = TypeAdapter(LowLevelMessage)


def parse_message(line: Union[str, bytes]) -> LowLevelMessage:
    """Parse one protocol line into its message variant."""
    try:
        return _message_adapter.validate_json(line)
    except ValidationError as e:
        raise InstallerProtocolError(f"Invalid message from low-level installer: {e}") from e


class LowLevelSession:
    """Byte-stream session with the low-level installer.

    ``writer`` is connected to the installer's stdin, ``reader`` to its stdout.
    """

    def __init__(self, writer: BinaryIO, reader: BinaryIO):
        self.writer = writer
        self.reader = reader
        self.finished: Optional[FinishedMessage] = None

    def send_config(self, config: InstallConfig) -> None:
        """Write the configuration record; it must be the first line sent."""
        self.writer.write(config.to_json().encode() + b"\n")
        self.writer.flush()
        logger.debug("Sent install config to low-level installer")

    def messages(self) -> Iterator[LowLevelMessage]:
        """Yield messages until ``finished`` is received or the stream ends."""
        for raw_line in self.reader:
            line = raw_line.strip()
            if not line:
                continue

            message = parse_message(line)
            if isinstance(message, ErrorMessage):
                logger.error(f"low-level installer: {message.message}")
            elif isinstance(message, InfoMessage):
                logger.info(f"low-level installer: {message.message}")

            yield message

            if isinstance(message, FinishedMessage):
                self.finished = message
                return

    def __iter__(self) -> Iterator[LowLevelMessage]:
        return self.messages()
