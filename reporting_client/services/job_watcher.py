"""
Job watching.

A submitted job is watched until the service reports a result tag. The
watcher first listens on the artifacts socket, which pushes status updates,
and falls back to polling the same endpoint over HTTP whenever the socket
cannot give a definite answer. Socket problems never reach the caller;
polling errors do.
"""

from __future__ import annotations

import asyncio
import json
import re
from collections.abc import Awaitable, Callable, Mapping
from contextlib import AbstractAsyncContextManager
from typing import Any, Protocol
from urllib.parse import urlencode

from loguru import logger
from websockets.exceptions import WebSocketException

from reporting_client.runtime.errors import ErrorCode, ProtocolError, ReportingError
from reporting_client.runtime.http_client import ServiceHttpClient

from .job_status import check_status

ARTIFACTS_PATH = "/job/artifacts"


class StatusStream(Protocol):
    """The receiving side of a status socket."""

    async def recv(self) -> str | bytes | Mapping[str, Any]: ...


StreamConnector = Callable[[str], AbstractAsyncContextManager[StatusStream]]

# Failures on the socket that mean "ask the polling endpoint instead"
_STREAM_ERRORS = (
    WebSocketException,
    OSError,
    asyncio.TimeoutError,
    ValueError,
    ReportingError,
)


def decode_message(message: str | bytes | Mapping[str, Any]) -> Mapping[str, Any]:
    """Decode a socket message that may be text, bytes or already parsed."""
    if isinstance(message, Mapping):
        return message
    if isinstance(message, (bytes, bytearray)):
        message = message.decode("utf-8")
    if not isinstance(message, str):
        raise ValueError(f"Unsupported status message type: {type(message).__name__}")
    data = json.loads(message)
    if not isinstance(data, Mapping):
        raise ValueError("Status message is not a JSON object")
    return data


def stream_url(service_api_url: str, ticket: str) -> str:
    """Socket URL for the artifacts endpoint (http -> ws, https -> wss)."""
    base = re.sub(r"^http", "ws", service_api_url.rstrip("/"), flags=re.IGNORECASE)
    return f"{base}{ARTIFACTS_PATH}?{urlencode({'ticket': ticket})}"


class JobWatcher:
    """Waits for a job to produce its result tag.

    Example:
        watcher = JobWatcher(http, stream_connector=websockets.asyncio.client.connect)
        tag = await watcher.watch(ticket)
    """

    def __init__(
        self,
        http: ServiceHttpClient,
        stream_connector: StreamConnector | None = None,
        use_polling: bool = False,
        poll_interval: float = 1.0,
        max_poll_attempts: int | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the watcher.

        Args:
            http: HTTP client bound to the reporting service API
                (`<service url>/service`).
            stream_connector: Opens a status socket for a URL. Without one
                the watcher only polls.
            use_polling: Skip the socket and poll straight away.
            poll_interval: Seconds to wait before each poll request.
            max_poll_attempts: Give up after this many polls. None polls
                until the job ends or a request fails.
            sleep: Coroutine used to wait between polls.
        """
        self._http = http
        self._stream_connector = stream_connector
        self.use_stream = stream_connector is not None and not use_polling
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self._sleep = sleep

    async def watch(self, ticket: str) -> str:
        """Wait for the job identified by `ticket` to complete.

        Returns:
            The result tag.

        Raises:
            NetworkError: A poll request could not be sent.
            RemoteError: A poll request failed or the job reported an error.
            JobFailedError: The job quit or failed.
            ProtocolError: No tag was produced within max_poll_attempts.
        """
        tag: str | None = None

        if self.use_stream:
            tag = await self.watch_stream(ticket)

        if not tag:
            tag = await self.poll(ticket)

        return tag

    async def watch_stream(self, ticket: str) -> str | None:
        """Listen on the status socket for a single message.

        Returns the tag if that message completes the job. Returns None when
        the server closes the stream, the message is not terminal, or anything
        goes wrong, so that the caller falls back to polling. The socket is
        closed on every path.
        """
        url = stream_url(self._http.base_url, ticket)
        logger.debug(f"[{ticket}] Listening for job status on {url}")

        try:
            async with self._stream_connector(url) as stream:
                message = decode_message(await stream.recv())

                # The server sends final=true when it is closing the connection
                if message.get("final"):
                    logger.debug(f"[{ticket}] Status stream closed by server")
                    return None

                tag = check_status(message)
                if tag:
                    logger.info(f"[{ticket}] Job completed (stream)")
                    return tag
        except _STREAM_ERRORS as e:
            logger.info(f"[{ticket}] Status stream unavailable, falling back to polling: {e}")
            return None

        # TODO: keep listening for further messages before falling back once
        # the service's stream semantics are confirmed.
        logger.debug(f"[{ticket}] No result on status stream, falling back to polling")
        return None

    async def poll(self, ticket: str) -> str:
        """Poll the artifacts endpoint until the job produces a tag."""
        attempt = 0

        while True:
            if self.max_poll_attempts is not None and attempt >= self.max_poll_attempts:
                raise ProtocolError(
                    "The service did not provide a tag.",
                    code=ErrorCode.MISSING_TAG,
                    message_debug=f"No result after {attempt} poll attempts",
                )
            attempt += 1

            await self._sleep(self.poll_interval)
            data = await self._http.get_json(
                ARTIFACTS_PATH,
                params={"ticket": ticket},
                network_message="A network error occurred checking the job status.",
            )

            tag = check_status(data)
            if tag:
                logger.info(f"[{ticket}] Job completed after {attempt} poll(s)")
                return tag

            logger.debug(f"[{ticket}] Job pending (poll {attempt})")
