from .api_models import WebhookAccepted, HealthResponse

__all__ = ['WebhookAccepted', 'HealthResponse']
