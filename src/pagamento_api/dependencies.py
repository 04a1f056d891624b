"""FastAPI dependency injection providers for shared services.

Factory functions are wrapped in @lru_cache so every request handler
shares one instance of each client. boto3 clients and httpx.Client are
safe for concurrent use; PaymentService holds no mutable state.

Usage in routes:
    from pagamento_api.dependencies import get_payment_service

    @router.post("/pagamentos")
    def create_payment(
        service: PaymentService = Depends(get_payment_service),
    ):
        ...

Service Dependency Graph:
    Settings (get_settings)
        ├── DynamoDBService
        │       └── PaymentRepository ──┐
        ├── MercadoPagoClient ──────────┼── PaymentService
        ├── SNSEventPublisher (optional)┘
        └── WebhookSignatureVerifier

Testing:
    Override providers with app.dependency_overrides, or call
    reset_services() to clear cached instances between tests.
"""

from functools import lru_cache

from pagamento.config import get_settings
from pagamento.services import (
    DynamoDBService,
    MercadoPagoClient,
    PaymentRepository,
    PaymentService,
    SNSEventPublisher,
    WebhookSignatureVerifier,
)


@lru_cache
def get_dynamodb_service() -> DynamoDBService:
    settings = get_settings()
    return DynamoDBService(
        settings.dynamodb_table_name,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint,
        timeout_seconds=settings.aws_timeout_seconds,
    )


@lru_cache
def get_payment_repository() -> PaymentRepository:
    return PaymentRepository(db=get_dynamodb_service())


@lru_cache
def get_mercadopago_client() -> MercadoPagoClient:
    settings = get_settings()
    return MercadoPagoClient(
        access_token=settings.mercado_pago_access_token,
        pos_id=settings.mercado_pago_pos_id,
        base_url=settings.mercado_pago_base_url,
        timeout_seconds=settings.mercado_pago_timeout_seconds,
    )


@lru_cache
def get_event_publisher() -> SNSEventPublisher | None:
    """Get cached SNS publisher.

    Returns:
        Publisher bound to AWS_SNS_TOPIC_ARN, or None when no topic is
        configured (events are then not emitted).
    """
    settings = get_settings()
    if not settings.aws_sns_topic_arn:
        return None
    return SNSEventPublisher(
        settings.aws_sns_topic_arn,
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint,
        timeout_seconds=settings.aws_timeout_seconds,
    )


@lru_cache
def get_payment_service() -> PaymentService:
    """Get cached PaymentService instance.

    Returns:
        PaymentService wired to DynamoDB, Mercado Pago and SNS.
    """
    return PaymentService(
        repository=get_payment_repository(),
        provider=get_mercadopago_client(),
        publisher=get_event_publisher(),
    )


@lru_cache
def get_webhook_verifier() -> WebhookSignatureVerifier:
    return WebhookSignatureVerifier(get_settings().mercado_pago_webhook_secret)


def reset_services() -> None:
    """Clear all cached service instances and settings.

    Closes the cached Mercado Pago HTTP client if one was created.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    if get_mercadopago_client.cache_info().currsize:
        get_mercadopago_client().close()

    get_payment_service.cache_clear()
    get_webhook_verifier.cache_clear()
    get_event_publisher.cache_clear()
    get_mercadopago_client.cache_clear()
    get_payment_repository.cache_clear()
    get_dynamodb_service.cache_clear()
    get_settings.cache_clear()
