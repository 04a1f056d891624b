"""Pagamento: payment orchestration for workshop service orders.

Creates Mercado Pago dynamic QR orders, persists payments in DynamoDB and
reconciles them from signed provider webhooks, publishing terminal
payment events to SNS.
"""

__version__ = "0.1.0"
