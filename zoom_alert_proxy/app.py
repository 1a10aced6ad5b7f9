"""FastAPI application relaying Alertmanager webhooks to Zoom."""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from loguru import logger
from pydantic import ValidationError

from zoom_alert_proxy.batcher import dispatch
from zoom_alert_proxy.config import Settings, configure_logging
from zoom_alert_proxy.delivery import DeliveryClient
from zoom_alert_proxy.metrics import MetricsReporter
from zoom_alert_proxy.models import AlertGroup, RoutingParams


def as_json(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"Status": status, "Message": message})


def create_app(
    settings: Optional[Settings] = None,
    metrics: Optional[MetricsReporter] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Build the application and its collaborators.

    Args:
        settings: Service settings, read from the environment when omitted
        metrics: Counter holder, a fresh one when omitted
        transport: Optional httpx transport for outbound deliveries

    Returns:
        Configured FastAPI application
    """
    settings = settings or Settings()
    metrics = metrics or MetricsReporter()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        logger.info("Application startup")
        logger.info(f"Relaying to {settings.hook_host}, batch limit {settings.batch_limit}")
        yield
        logger.info("Application shutdown")

    app = FastAPI(title="Zoom Alert Proxy", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.delivery = DeliveryClient(
        metrics=metrics,
        hook_host=settings.hook_host,
        timeout=settings.delivery_timeout,
        transport=transport,
    )

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        """Health check endpoint."""
        return "Ok!"

    @app.get("/metrics")
    async def prometheus_metrics(request: Request) -> Response:
        """Expose the relay counters for Prometheus."""
        reporter: MetricsReporter = request.app.state.metrics
        return Response(content=reporter.render(), media_type=reporter.content_type)

    @app.post("/webhook")
    async def webhook(
        request: Request,
        channel_id: Optional[str] = Query(default=None, alias="channel-id"),
        token: Optional[str] = Query(default=None),
    ) -> JSONResponse:
        """Receive an Alertmanager notification and relay it to a Zoom channel.

        Args:
            request: FastAPI request, read as raw JSON
            channel_id: Destination Zoom channel
            token: Zoom webhook authorization token

        Returns:
            {"Status", "Message"} document; delivery outcome is not reflected
        """
        body = await request.body()
        try:
            group = AlertGroup.model_validate_json(body)
        except ValidationError as e:
            logger.warning(f"Rejecting malformed webhook payload: {e}")
            return as_json(400, str(e))

        for name, value in (("channel-id", channel_id), ("token", token)):
            if not value:
                logger.warning(f"Rejecting webhook without {name} query parameter")
                return as_json(400, f"missing query parameter: {name}")

        logger.info(
            f"Received webhook group_key={group.group_key} status={group.status} "
            f"receiver={group.receiver} alerts={len(group.alerts)}"
        )

        state_settings: Settings = request.app.state.settings
        await dispatch(
            group,
            RoutingParams(channel_id=channel_id, token=token),
            client=request.app.state.delivery,
            metrics=request.app.state.metrics,
            limit=state_settings.batch_limit,
        )
        return as_json(200, "success")

    return app
