import logging

logger = logging.getLogger(__name__)


class ToolNotFoundError(KeyError):
    def __init__(self, name):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown tool: {self.name}"


class ToolResult:
    """Outcome of a tool invocation: the handler output, or the message of the failure it raised."""

    def __init__(self, value=None, is_error=False):
        self.value = value
        self.is_error = is_error

    @classmethod
    def success(cls, value):
        return cls(value=value)

    @classmethod
    def failure(cls, message):
        return cls(value=message, is_error=True)

    def __eq__(self, other):
        if not isinstance(other, ToolResult):
            return NotImplemented
        return self.value == other.value and self.is_error == other.is_error

    def __repr__(self):
        return f"ToolResult(value={self.value!r}, is_error={self.is_error})"


class ToolDefinition:
    def __init__(self, name, description, input_schema, handler):
        self.name = name
        self.description = description
        self.input_schema = input_schema
        self.handler = handler

    def to_dict(self):
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}

    def invoke(self, arguments):
        """Run the handler and contain any exception it raises in a failed ToolResult."""
        try:
            result = self.handler(arguments)
        except Exception as e:
            logger.error(f"Tool '{self.name}' failed: {e}")
            return ToolResult.failure(str(e))
        if isinstance(result, ToolResult):
            return result
        return ToolResult.success(result)


class ToolRegistry:
    """
    Ordered mapping from tool name to its definition.
    Populated before serving starts; the dispatcher only reads from it.
    """

    def __init__(self):
        self._tools = {}

    def register(self, name, description, input_schema, handler):
        if name in self._tools:
            logger.info(f"Replacing registered tool: {name}")
        tool = ToolDefinition(name, description, input_schema, handler)
        self._tools[name] = tool
        return tool

    def list_tools(self):
        return [tool.to_dict() for tool in self._tools.values()]

    def lookup(self, name):
        try:
            return self._tools[name]
        except (KeyError, TypeError):
            raise ToolNotFoundError(name) from None

    def __contains__(self, name):
        try:
            return name in self._tools
        except TypeError:
            return False

    def __len__(self):
        return len(self._tools)

    def __iter__(self):
        return iter(self._tools)
