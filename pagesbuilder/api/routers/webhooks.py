"""
Webhook receiver endpoints.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request

from ...webhooks.handler import WebhookHandler
from ..models.api_models import WebhookAccepted, HealthResponse

router = APIRouter(tags=["webhooks"])
logger = logging.getLogger(__name__)


def get_webhook_handler(request: Request) -> WebhookHandler:
    """Get the webhook handler created at application startup"""
    handler = getattr(request.app.state, "webhook_handler", None)
    if handler is None:
        raise HTTPException(status_code=500, detail="Webhook handler not initialized")
    return handler


@router.post("/", status_code=202, response_model=WebhookAccepted)
async def receive_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    handler: WebhookHandler = Depends(get_webhook_handler)
):
    """
    Accept a push webhook and build every matching site in the background.

    Returns 202 when the payload is a valid push, 400 otherwise.
    """
    try:
        hook = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Payload is not valid JSON")

    event = handler.parse(hook)
    if event is None:
        raise HTTPException(status_code=400, detail="Not a valid push event")

    background_tasks.add_task(handler.run_builders, event)
    logger.info(f"Accepted push to {event.collection}/{event.repository} {event.branch}")

    return WebhookAccepted(repository=event.repository, branch=event.branch)


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse()
