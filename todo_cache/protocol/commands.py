"""
Protocol Command and Response Definitions

This module defines the data structures for protocol commands and responses.
"""

import json
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from ..records.models import Record


class CommandType(Enum):
    """Enumeration of supported command types."""
    TODOS = auto()
    TODO = auto()
    TODOS_BY_TYPE = auto()
    ADD_TODO = auto()
    UPDATE_TODO = auto()
    QUIT = auto()
    UNKNOWN = auto()


class ResponseStatus(Enum):
    """Enumeration of response statuses."""
    OK = "OK"
    ERROR = "ERROR"


@dataclass
class Command:
    """
    Represents a parsed protocol command.

    Attributes:
        type: The type of command
        id: Record id for TODO and UPDATE_TODO
        todo_type: Record type for TODOS_BY_TYPE, ADD_TODO and UPDATE_TODO
        description: Record description for ADD_TODO and UPDATE_TODO
        raw: The original raw command string
    """
    type: CommandType
    id: str = ""
    todo_type: str = ""
    description: str = ""
    raw: str = ""

    @property
    def is_mutation(self) -> bool:
        return self.type in (CommandType.ADD_TODO, CommandType.UPDATE_TODO)

    @property
    def is_valid(self) -> bool:
        """Check if the command carries the arguments its type needs."""
        if self.type == CommandType.UNKNOWN:
            return False
        if self.type in (CommandType.QUIT, CommandType.TODOS):
            return True
        if self.type == CommandType.TODO:
            return bool(self.id)
        if self.type == CommandType.TODOS_BY_TYPE:
            return bool(self.todo_type)
        if self.type == CommandType.ADD_TODO:
            return bool(self.todo_type) and bool(self.description)
        if self.type == CommandType.UPDATE_TODO:
            return bool(self.id) and bool(self.todo_type) and bool(self.description)
        return False


def _encode(payload) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


@dataclass
class Response:
    """
    Represents a protocol response.

    Attributes:
        status: OK or ERROR
        message: Error description, or the JSON body for OK responses
    """
    status: ResponseStatus
    message: str = ""

    @classmethod
    def ok(cls, message: str = "") -> "Response":
        """Create a successful response."""
        return cls(status=ResponseStatus.OK, message=message)

    @classmethod
    def error(cls, message: str) -> "Response":
        """Create an error response."""
        return cls(status=ResponseStatus.ERROR, message=message)

    @classmethod
    def record(cls, record: Optional[Record]) -> "Response":
        """A single record, or JSON null when it is absent."""
        return cls.ok(_encode(record.to_dict() if record is not None else None))

    @classmethod
    def records(cls, records: Iterable[Record]) -> "Response":
        """A JSON array of records."""
        return cls.ok(_encode([record.to_dict() for record in records]))

    @classmethod
    def invalid_command(cls) -> "Response":
        return cls.error("invalid command")
