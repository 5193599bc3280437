from src.shared.models.webhook_dto import HealthResponse, WebhookPayload, WebhookResponse

__all__ = ["HealthResponse", "WebhookPayload", "WebhookResponse"]
