"""
Protocol Parser Module

This module handles parsing of raw protocol commands and formatting of responses.
"""

from .commands import Command, CommandType, Response
from ..config.settings import settings


class ProtocolParser:
    """
    Parser for the todo-cache text protocol.

    Protocol Format:
        Request:  <COMMAND> [ARGS...]\n
        Response: <STATUS> [DATA]\n

    Commands:
        TODOS                                  -> OK [<todo>, ...]
        TODO <id>                              -> OK <todo> | OK null
        TODOS_BY_TYPE <type>                   -> OK [<todo>, ...]
        ADD_TODO <type> <description...>       -> OK <todo> | ERROR <reason>
        UPDATE_TODO <id> <type> <description...> -> OK <todo> | ERROR <reason>
        QUIT                                   -> (connection closed)

    Todos are JSON objects: {"id": ..., "type": ..., "description": ...}

    Constraints:
        - Ids and types: single tokens, no whitespace
        - Descriptions: the rest of the line, must not be empty
        - Lengths bounded by settings.MAX_*_LENGTH
    """

    def __init__(self):
        """Initialize the parser with constraints from settings."""
        self.max_id_length = settings.MAX_ID_LENGTH
        self.max_type_length = settings.MAX_TYPE_LENGTH
        self.max_description_length = settings.MAX_DESCRIPTION_LENGTH

    def parse_request(self, data: str) -> Command:
        """
        Parse a raw request string into a Command object.

        Args:
            data: Raw request string (may include trailing newline)

        Returns:
            Command object representing the parsed request.
            Returns Command with type=UNKNOWN for invalid/malformed requests.

        Examples:
            >>> parser = ProtocolParser()
            >>> cmd = parser.parse_request("ADD_TODO chore take out the trash")
            >>> cmd.type == CommandType.ADD_TODO
            True
            >>> cmd.todo_type
            'chore'
            >>> cmd.description
            'take out the trash'
        """
        raw = data.strip()
        if not raw:
            return Command(type=CommandType.UNKNOWN, raw=raw)

        command_name = raw.split(maxsplit=1)[0].upper()

        if command_name == "TODOS":
            return self._parse_no_args(CommandType.TODOS, raw)
        if command_name == "TODO":
            return self._parse_todo(raw)
        if command_name == "TODOS_BY_TYPE":
            return self._parse_todos_by_type(raw)
        if command_name == "ADD_TODO":
            return self._parse_add_todo(raw)
        if command_name == "UPDATE_TODO":
            return self._parse_update_todo(raw)
        if command_name == "QUIT":
            return self._parse_no_args(CommandType.QUIT, raw)

        return Command(type=CommandType.UNKNOWN, raw=raw)

    def _unknown(self, raw: str) -> Command:
        return Command(type=CommandType.UNKNOWN, raw=raw)

    def _parse_no_args(self, command_type: CommandType, raw: str) -> Command:
        if len(raw.split()) != 1:
            return self._unknown(raw)
        return Command(type=command_type, raw=raw)

    def _parse_todo(self, raw: str) -> Command:
        """
        Parse a TODO command.

        Format: TODO <id>
        """
        parts = raw.split()
        if len(parts) != 2 or len(parts[1]) > self.max_id_length:
            return self._unknown(raw)

        return Command(type=CommandType.TODO, id=parts[1], raw=raw)

    def _parse_todos_by_type(self, raw: str) -> Command:
        """
        Parse a TODOS_BY_TYPE command.

        Format: TODOS_BY_TYPE <type>
        """
        parts = raw.split()
        if len(parts) != 2 or len(parts[1]) > self.max_type_length:
            return self._unknown(raw)

        return Command(type=CommandType.TODOS_BY_TYPE, todo_type=parts[1], raw=raw)

    def _parse_add_todo(self, raw: str) -> Command:
        """
        Parse an ADD_TODO command.

        Format: ADD_TODO <type> <description...>
        """
        parts = raw.split(maxsplit=2)
        if len(parts) != 3:
            return self._unknown(raw)

        todo_type, description = parts[1], parts[2].strip()
        if not self._valid_type(todo_type) or not self._valid_description(description):
            return self._unknown(raw)

        return Command(
            type=CommandType.ADD_TODO,
            todo_type=todo_type,
            description=description,
            raw=raw,
        )

    def _parse_update_todo(self, raw: str) -> Command:
        """
        Parse an UPDATE_TODO command.

        Format: UPDATE_TODO <id> <type> <description...>
        """
        parts = raw.split(maxsplit=3)
        if len(parts) != 4:
            return self._unknown(raw)

        todo_id, todo_type, description = parts[1], parts[2], parts[3].strip()
        if len(todo_id) > self.max_id_length:
            return self._unknown(raw)
        if not self._valid_type(todo_type) or not self._valid_description(description):
            return self._unknown(raw)

        return Command(
            type=CommandType.UPDATE_TODO,
            id=todo_id,
            todo_type=todo_type,
            description=description,
            raw=raw,
        )

    def _valid_type(self, todo_type: str) -> bool:
        return len(todo_type) <= self.max_type_length

    def _valid_description(self, description: str) -> bool:
        return bool(description) and len(description) <= self.max_description_length

    def format_response(self, response: Response) -> str:
        """
        Format a Response object into a protocol string.

        Args:
            response: Response object to format

        Returns:
            Formatted response string WITH trailing newline.

        Examples:
            >>> parser = ProtocolParser()
            >>> parser.format_response(Response.record(None))
            'OK null\\n'
            >>> parser.format_response(Response.error("invalid command"))
            'ERROR invalid command\\n'
        """
        prefix = response.status.value
        if response.message:
            return f"{prefix} {response.message}\n"
        return f"{prefix}\n"
