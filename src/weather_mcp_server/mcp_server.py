import json
import logging

from weather_mcp_server.stdio_server import run_stdio_server
from weather_mcp_server.tool_registry import ToolNotFoundError, ToolRegistry

logger = logging.getLogger(__name__)

# Protocol version
PROTOCOL_VERSION = "2024-11-05"

# Server capabilities
SERVER_CAPABILITIES = {"tools": {}}

NOTIFICATION_PREFIX = "notifications/"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def make_result(request_id, result):
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def make_error(request_id, code, message):
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def make_text_content(text, is_error=False):
    result = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


class McpServer:
    """
    JSON-RPC 2.0 dispatcher for the MCP tool methods.

    Every request carrying an id gets exactly one response with that id. Messages without an id
    are notifications and never get a response.
    """

    def __init__(self, name="mcp-server", version="1.0.0", registry=None):
        self.name = name
        self.version = version
        self.registry = registry if registry is not None else ToolRegistry()
        self._methods = {
            "initialize": self._handle_initialize,
            "notifications/initialized": self._handle_initialized,
            "tools/list": self._handle_tools_list,
            "tools/call": self._handle_tools_call,
            "ping": self._handle_ping,
        }

    def add_tool(self, name, description, input_schema, handler):
        return self.registry.register(name, description, input_schema, handler)

    def handle_jsonrpc_request(self, data):
        if not isinstance(data, dict):
            logger.warning(f"Rejecting non-object message: {data!r}")
            return make_error(None, INVALID_REQUEST, "Invalid Request")

        request_id = data.get("id")
        method = data.get("method") or ""
        params = data.get("params") or {}

        # Notifications (no id) never get a response, unless explicitly modeled below
        if request_id is None and not (isinstance(method, str) and method.startswith(NOTIFICATION_PREFIX)):
            logger.debug(f"Dropping message without id: {method}")
            return None

        handler = self._methods.get(method) if isinstance(method, str) else None
        if handler is None:
            if request_id is None:
                logger.info(f"Ignoring unhandled notification: {method}")
                return None
            return make_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        logger.debug(f"Dispatching {method} (id={request_id!r})")
        try:
            return handler(request_id, params)
        except Exception as e:
            logger.exception(f"Internal error while handling {method}")
            if request_id is None:
                return None
            return make_error(request_id, INTERNAL_ERROR, f"Internal error: {e}")

    def _handle_initialize(self, request_id, params):
        if isinstance(params, dict):
            client_info = params.get("clientInfo") or {}
            logger.info(f"Initialize from client {client_info} with protocol version {params.get('protocolVersion')}")
        return make_result(
            request_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": SERVER_CAPABILITIES,
                "serverInfo": {"name": self.name, "version": self.version},
            },
        )

    def _handle_initialized(self, request_id, params):
        logger.info("Client initialization complete")
        return None

    def _handle_tools_list(self, request_id, params):
        return make_result(request_id, {"tools": self.registry.list_tools()})

    def _handle_tools_call(self, request_id, params):
        if not isinstance(params, dict):
            return make_error(request_id, INVALID_PARAMS, "Invalid params: 'params' must be an object")
        tool_name = params.get("name") or ""
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            return make_error(request_id, INVALID_PARAMS, "Invalid params: 'arguments' must be an object")

        try:
            tool = self.registry.lookup(tool_name)
        except ToolNotFoundError as e:
            return make_error(request_id, INVALID_PARAMS, str(e))

        logger.info(f"Calling tool {tool.name} with arguments: {arguments}")
        outcome = tool.invoke(arguments)
        if outcome.is_error:
            return make_result(request_id, make_text_content(f"Error: {outcome.value}", is_error=True))

        if isinstance(outcome.value, str):
            text = outcome.value
        else:
            try:
                text = json.dumps(outcome.value, indent=2)
            except (TypeError, ValueError) as e:
                logger.error(f"Tool {tool.name} returned a value that cannot be serialized: {e}")
                return make_result(request_id, make_text_content(f"Error: {e}", is_error=True))
        return make_result(request_id, make_text_content(text))

    def _handle_ping(self, request_id, params):
        return make_result(request_id, {})

    def run(self, stdin=None, stdout=None):
        """Serve requests from stdin until it is exhausted."""
        logger.info(f"Starting {self.name} {self.version} on stdio with {len(self.registry)} tool(s)")
        run_stdio_server(self.handle_jsonrpc_request, stdin=stdin, stdout=stdout)
        logger.info("Input stream closed, shutting down")
