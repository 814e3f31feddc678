import json
import logging
import sys

logger = logging.getLogger(__name__)

PARSE_ERROR_RESPONSE = {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}


def write_message(stdout, message):
    stdout.write(json.dumps(message, separators=(",", ":")) + "\n")
    stdout.flush()


def decode_line(line):
    if isinstance(line, bytes):
        return line.decode("utf-8")
    return line


def run_stdio_server(handler, stdin=None, stdout=None):
    """
    Reads JSON-RPC messages from stdin, one per line, calls the handler, and writes responses to stdout.
    The handler takes the decoded message and returns the response dict, or None when nothing should be sent.
    Lines are read as bytes when stdin has a binary buffer, so undecodable input becomes a parse error.
    Returns when stdin reaches EOF.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    reader = getattr(stdin, "buffer", stdin)
    while True:
        try:
            line = reader.readline()
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping stdio server")
            break
        if not line:
            break  # EOF
        try:
            line = decode_line(line).strip()
            if not line:
                continue
            data = json.loads(line)
        except (ValueError, RecursionError) as e:
            logger.warning(f"Failed to parse message: {e}")
            write_message(stdout, PARSE_ERROR_RESPONSE)
            continue
        response = handler(data)
        if response is not None:
            write_message(stdout, response)
