"""
Entry point for running reports and prints.

A run walks the stages in order: resolve the template item to its reporting
service, exchange the portal token for a run token, start the job, watch it
until it produces a result, and return the result's download URL. Nothing is
kept between runs.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError
from websockets.asyncio.client import connect

from .config import Settings, settings as default_settings
from .domain.models import JobRequest, PrintMetadata, RunOptions
from .runtime.errors import InvalidInputError
from .runtime.http_client import ServiceHttpClient
from .services.auth import Authenticator
from .services.item_resolver import ItemResolver
from .services.job_submitter import JobSubmitter
from .services.job_watcher import JobWatcher, StreamConnector
from .services.locator import build_result_url
from .services.metadata import MetadataClient


def _coerce_options(options: RunOptions | Mapping[str, Any] | None, overrides: Mapping[str, Any]) -> RunOptions:
    try:
        if options is None:
            options = RunOptions()
        elif not isinstance(options, RunOptions):
            options = RunOptions.model_validate(dict(options))
        if overrides:
            options = RunOptions.model_validate({**options.model_dump(exclude_unset=True), **overrides})
    except ValidationError as e:
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in e.errors())
        raise InvalidInputError(f"Invalid run options: {fields}.", message_debug=str(e), cause=e)
    return options


class ReportingClient:
    """Runs report and print jobs against VertiGIS Studio Reporting/Printing.

    Example:
        client = ReportingClient()
        url = await client.run("25c278bd96aa49949f8a89564c6347ce", {"token": token})
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        stream_connector: StreamConnector | None = connect,
    ):
        """Initialize the client.

        Args:
            settings: Defaults for portal URL, timeouts and polling.
            transport: Optional httpx transport for every HTTP request.
            stream_connector: Opens the job status socket. None disables the
                socket and always polls.
        """
        self.settings = settings or default_settings
        self._transport = transport
        self._stream_connector = stream_connector

    def _http(self, base_url: str) -> ServiceHttpClient:
        return ServiceHttpClient(
            base_url=base_url,
            timeout=self.settings.REQUEST_TIMEOUT,
            transport=self._transport,
        )

    def _portal_url(self, portal_url: str | None) -> str:
        return (portal_url or "").rstrip("/") or self.settings.DEFAULT_PORTAL_URL.rstrip("/")

    async def _resolve_service_url(self, item_id: str, portal_url: str, token: str | None) -> str:
        async with self._http(portal_url) as portal_http:
            return await ItemResolver(portal_http).resolve_service_url(item_id, token)

    async def run(
        self,
        item_id: str,
        options: RunOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> str:
        """Run a report or print.

        Args:
            item_id: The portal item ID of the template.
            options: RunOptions, or a mapping of option names (snake_case or
                camelCase).
            **overrides: Individual options, applied on top of `options`.

        Returns:
            The download URL of the output file.

        Raises:
            InvalidInputError: item_id is missing, an option is invalid, or the
                item is not a template.
            NetworkError: A required request could not be sent.
            RemoteError: A service answered with an error.
            ProtocolError: A service response was not a JSON object or lacked
                a required field.
            JobFailedError: The job quit or failed.
        """
        if not item_id:
            raise InvalidInputError("itemId is required.")

        opts = _coerce_options(options, overrides)
        portal_url = self._portal_url(opts.portal_url)

        if opts.service_url:
            service_url = opts.service_url.rstrip("/")
        else:
            service_url = await self._resolve_service_url(item_id, portal_url, opts.token)

        use_polling = opts.use_polling if opts.use_polling is not None else self.settings.USE_POLLING

        async with self._http(f"{service_url}/service") as service_http:
            if opts.run_token is not None:
                run_token = opts.run_token
            else:
                run_token = await Authenticator(service_http).exchange_credential(portal_url, opts.token)

            request = JobRequest(
                item_id=item_id,
                portal_url=portal_url,
                service_url=service_url,
                run_token=run_token,
                parameters=opts.parameters or {},
                culture=opts.culture,
                dpi=opts.dpi,
                format=opts.format,
                title=opts.result_file_name,
            )
            ticket = await JobSubmitter(service_http).start_job(request)

            watcher = JobWatcher(
                service_http,
                stream_connector=self._stream_connector,
                use_polling=use_polling,
                poll_interval=self.settings.POLL_INTERVAL,
                max_poll_attempts=self.settings.MAX_POLL_ATTEMPTS,
            )
            tag = await watcher.watch(ticket)

        url = build_result_url(service_url, ticket, tag)
        logger.info(f"[{item_id}] Report ready: {url}")
        return url

    async def get_item_metadata(
        self,
        item_id: str,
        portal_url: str | None = None,
        token: str | None = None,
    ) -> PrintMetadata:
        """Get the parameters and control metadata of a print template.

        Raises:
            InvalidInputError: item_id is missing or the item is not a template.
            NetworkError: A required request could not be sent.
            RemoteError: A service answered with an error.
            ProtocolError: The service did not return any metadata.
        """
        if not item_id:
            raise InvalidInputError("itemId is required.")

        portal_url = self._portal_url(portal_url)
        service_url = await self._resolve_service_url(item_id, portal_url, token)

        async with self._http(f"{service_url}/service") as service_http:
            run_token = await Authenticator(service_http).exchange_credential(portal_url, token)
            return await MetadataClient(service_http).get_metadata(item_id, portal_url, run_token)


async def run(
    item_id: str,
    options: RunOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> str:
    """Run a report or print with the default client. See ReportingClient.run."""
    return await ReportingClient().run(item_id, options, **overrides)


def run_sync(
    item_id: str,
    options: RunOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> str:
    """Blocking variant of run() for code without an event loop."""
    return asyncio.run(run(item_id, options, **overrides))


async def get_item_metadata(
    item_id: str,
    portal_url: str | None = None,
    token: str | None = None,
) -> PrintMetadata:
    """Get print template metadata with the default client."""
    return await ReportingClient().get_item_metadata(item_id, portal_url, token)
