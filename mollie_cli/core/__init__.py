"""
Core layer - Raw types and HTTP client.

This layer provides:
- Typed dataclasses matching the Mollie API resources
- Low-level HTTP client with auth, error translation and pagination
"""

from mollie_cli.core.client import (
    APIClient,
    APIError,
    CLIError,
    ConfigurationError,
    DecodeError,
    Response,
    TransportError,
    ValidationError,
)
from mollie_cli.core.config import Config
from mollie_cli.core.types import (
    URL,
    Amount,
    Chargeback,
    ChargebackOptions,
    ChargebacksList,
    ChargebacksListOptions,
    Customer,
    CustomersList,
    ErrorEnvelope,
    ListCustomersOptions,
    ListPaymentsOptions,
    Payment,
    PaymentLink,
    PaymentLinkOptions,
    PaymentLinksList,
    PaymentOptions,
    PaymentsList,
)

__all__ = [
    "URL",
    "APIClient",
    "APIError",
    "Amount",
    "CLIError",
    "Chargeback",
    "ChargebackOptions",
    "ChargebacksList",
    "ChargebacksListOptions",
    "Config",
    "ConfigurationError",
    "Customer",
    "CustomersList",
    "DecodeError",
    "ErrorEnvelope",
    "ListCustomersOptions",
    "ListPaymentsOptions",
    "Payment",
    "PaymentLink",
    "PaymentLinkOptions",
    "PaymentLinksList",
    "PaymentOptions",
    "PaymentsList",
    "Response",
    "TransportError",
    "ValidationError",
]
