"""
Pytest configuration for the navitui test suite.

Configures the Python path so tests can import from the src directory, and
provides a fake mpv that listens on a Unix socket.
"""
import asyncio
import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio

# Add project root to Python path so tests can import from src
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

class FakeMpv:
    """Minimal stand-in for mpv's JSON IPC server.

    Each connection gets one command line. ``get_property`` commands are
    answered from ``replies`` (keyed by property name); ``raw_reply``
    overrides the answer with arbitrary bytes.
    """

    def __init__(self):
        self.replies: Dict[str, Dict[str, Any]] = {}
        self.raw_reply: Optional[bytes] = None
        self.events: List[Dict[str, Any]] = []
        self.silent = False
        self.commands: List[Dict[str, Any]] = []
        self.received = asyncio.Event()

    def set_property(self, name: str, data: Any, error: str = "success") -> None:
        self.replies[name] = {"data": data, "error": error, "request_id": 0}

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        line = await reader.readline()
        if line:
            command = json.loads(line)
            self.commands.append(command)
            self.received.set()
            verb, *args = command["command"]

            if self.silent:
                # Hold the connection until the client gives up
                await reader.read()
                writer.close()
                return
            if verb == "get_property":
                for event in self.events:
                    writer.write(json.dumps(event).encode("utf-8") + b"\n")
                if self.raw_reply is not None:
                    writer.write(self.raw_reply)
                else:
                    reply = self.replies.get(args[0], {"error": "property not found"})
                    writer.write(json.dumps(reply).encode("utf-8") + b"\n")
                await writer.drain()

        writer.close()


@pytest.fixture
def socket_path():
    # AF_UNIX paths are limited to ~100 bytes, keep it short
    with tempfile.TemporaryDirectory(prefix="navitui-") as directory:
        yield os.path.join(directory, "mpv.sock")


@pytest_asyncio.fixture
async def fake_mpv(socket_path):
    mpv = FakeMpv()
    server = await asyncio.start_unix_server(mpv.handle, path=socket_path)
    try:
        yield mpv
    finally:
        server.close()
        await server.wait_closed()
