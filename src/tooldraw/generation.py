"""
Drawing generation service.

A DrawingGenerator takes tool parameters and a template id and returns a
reference to a finished drawing. Two implementations exist:

- LocalDrawingGenerator: renders in-process and returns a ``data:`` URL
- RemoteDrawingGenerator: asks an HTTP drawing service and returns the URL
  it answers with

``generator_from_config`` picks the remote one when a service URL is
configured.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import httpx

from .config import AppConfig, DrawingConfig, ServiceConfig
from .drawing.exporter import ExportArtifact, export
from .drawing.geometry import Scale
from .drawing.projection import build_projection
from .drawing.renderer import RasterSurface, SvgSurface, render
from .errors import GenerationFailedError
from .parameters import ToolParameters
from .templates import DrawingTemplate, TemplateCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """Parameters plus the drawing options for one generation call."""
    parameters: ToolParameters
    template_id: str | None = None
    view: str = "front"
    fmt: str = "svg"
    zoom: float = 1.0

    def to_payload(self) -> dict:
        """JSON body sent to the remote service."""
        return {
            "parameters": self.parameters.to_dict(),
            "templateId": self.template_id,
            "view": self.view,
            "format": self.fmt,
        }


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of a generation call.

    Attributes:
        artifact_ref: URL (remote) or data: URL (local) of the drawing
        template: Template the drawing was generated with
        artifact: The encoded drawing when generated locally
    """
    artifact_ref: str
    template: DrawingTemplate
    artifact: ExportArtifact | None = None


class DrawingGenerator(Protocol):
    def generate(self, request: GenerationRequest) -> GenerationResult:
        ...

    def close(self) -> None:
        ...


class LocalDrawingGenerator:
    """Build, render and export in-process."""

    def __init__(self, config: DrawingConfig | None = None,
                 catalog: TemplateCatalog | None = None):
        self.config = config or DrawingConfig()
        self.catalog = catalog or TemplateCatalog()

    def generate(self, request: GenerationRequest) -> GenerationResult:
        template = self.catalog.resolve(request.template_id)
        scene = build_projection(request.view, request.parameters, Scale(request.zoom), self.config)

        if request.fmt.lower() == "svg":
            surface = SvgSurface(self.config.font_family)
        else:
            surface = RasterSurface(self.config.font_family, self.config.font_path,
                                    self.config.pixel_ratio)
        render(scene, surface)
        artifact = export(surface, request.fmt)

        logger.info("Generated %s locally with %s", artifact.filename, template.id,
                    extra={"tool_type": request.parameters.tool_type, "view": request.view})
        return GenerationResult(artifact.data_url(), template, artifact)

    def close(self) -> None:
        """Nothing to release; present for the DrawingGenerator protocol."""


class RemoteDrawingGenerator:
    """
    Client for a remote drawing-generation service.

    POSTs the request to ``<base_url>/drawings`` and expects ``{"url": ...}``.
    Transport errors and 5xx responses are retried with exponential backoff;
    4xx responses and malformed bodies fail immediately.
    """

    def __init__(
        self,
        config: ServiceConfig,
        catalog: TemplateCatalog | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not config.base_url:
            raise ValueError("RemoteDrawingGenerator requires service.base_url")
        self.config = config
        self.catalog = catalog or TemplateCatalog()
        self._sleep = sleep

        headers = {"Accept": "application/json"}
        if config.api_token:
            headers["Authorization"] = f"Bearer {config.api_token}"

        if client is None:
            client = httpx.Client(timeout=config.timeout)
        client.headers.update(headers)
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/drawings"

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _post(self, payload: dict) -> httpx.Response:
        attempts = self.config.max_retries + 1
        delay = self.config.backoff

        for attempt in range(1, attempts + 1):
            try:
                response = self._client.post(self.endpoint, json=payload)
            except httpx.TransportError as exc:
                error = f"transport error: {exc}"
            except httpx.RequestError as exc:
                # Not transient (e.g. an undecodable body); retrying will not help
                raise GenerationFailedError(f"Drawing service request failed: {exc}") from exc
            else:
                if response.status_code < 500:
                    return response
                error = f"server error {response.status_code}"

            if attempt == attempts:
                raise GenerationFailedError(
                    f"Drawing service failed after {attempts} attempts ({error})"
                )
            logger.warning("Drawing service %s; retrying in %.2fs", error, delay,
                           extra={"attempt": attempt})
            self._sleep(delay)
            delay *= 2

        raise AssertionError("unreachable")

    def generate(self, request: GenerationRequest) -> GenerationResult:
        template = self.catalog.resolve(request.template_id)
        payload = request.to_payload()
        payload["templateId"] = template.id

        response = self._post(payload)
        if response.is_error:
            raise GenerationFailedError(
                f"Drawing service rejected the request: {response.status_code} {response.text[:200]}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise GenerationFailedError("Drawing service returned invalid JSON") from exc

        url = body.get("url") if isinstance(body, dict) else None
        if not isinstance(url, str) or not url:
            raise GenerationFailedError("Drawing service response has no 'url'")

        logger.info("Drawing service generated %s", url)
        return GenerationResult(url, template)


def generator_from_config(config: AppConfig) -> DrawingGenerator:
    """Remote generator when a service URL is configured, local otherwise."""
    catalog = TemplateCatalog.from_config(config.templates)
    if config.service.base_url:
        return RemoteDrawingGenerator(config.service, catalog)
    return LocalDrawingGenerator(config.drawing, catalog)
