"""
Mollie SDK - High-level client with one service per resource.

This layer provides a clean, typed interface over the core APIClient. Each
service method maps to exactly one API request (``iterate`` helpers follow
pagination cursors and issue one request per page).
"""

import builtins
import urllib.parse
import urllib.request
from collections.abc import Iterator
from typing import Any

from mollie_cli.core.client import APIClient, Response
from mollie_cli.core.config import Config
from mollie_cli.core.types import (
    Chargeback,
    ChargebackOptions,
    ChargebacksList,
    ChargebacksListOptions,
    Customer,
    CustomersList,
    ListCustomersOptions,
    ListPaymentsOptions,
    Payment,
    PaymentLink,
    PaymentLinkOptions,
    PaymentLinksList,
    PaymentOptions,
    PaymentsList,
)


def _segment(value: str) -> str:
    """Escape an ID for use as a single path segment."""
    return urllib.parse.quote(str(value), safe="")


class MollieClient:
    """
    High-level Mollie API client with typed methods.

    Example:
        client = MollieClient(token="test_...")

        customer = client.customers.create(Customer(name="Jane", email="jane@example.org"))
        payments = client.customers.get_payments(customer.id)
        chargebacks = client.chargebacks.list(ChargebacksListOptions(limit=10))

    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        config: Config | None = None,
        timeout: int | None = None,
        opener: urllib.request.OpenerDirector | None = None,
    ):
        """
        Initialize the Mollie client.

        Args:
            token: API key or organization token (or MOLLIE_API_TOKEN / MOLLIE_ORG_TOKEN env var)
            base_url: API base URL (or MOLLIE_BASE_URL env var)
            config: Client settings (testing mode, token type, timeout)
            timeout: Request timeout in seconds
            opener: urllib opener used to execute requests

        """
        self._client = APIClient(
            token=token,
            base_url=base_url,
            config=config,
            timeout=timeout,
            opener=opener,
        )

        # Sub-clients for each resource
        self.customers = CustomerOperations(self._client)
        self.payments = PaymentOperations(self._client)
        self.chargebacks = ChargebackOperations(self._client)
        self.payment_links = PaymentLinkOperations(self._client)

    @property
    def base_url(self) -> str | None:
        """Get the API base URL."""
        return self._client.base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        """Set the API base URL."""
        self._client.base_url = value

    def set_auth_token(self, token: str) -> None:
        """Replace the token used for subsequent requests."""
        self._client.set_auth_token(token)


# =============================================================================
# Customer Operations
# =============================================================================


class CustomerOperations:
    """Operations for managing customers."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, customer_id: str) -> Customer:
        """
        Retrieve a single customer by its ID.

        Args:
            customer_id: The customer ID (cst_...)

        Returns:
            Customer details

        """
        response = self._client.get(f"v2/customers/{_segment(customer_id)}")
        return self._client.decode(response, Customer.from_dict)

    def create(self, customer: Customer | dict[str, Any]) -> Customer:
        """
        Create a customer.

        Args:
            customer: Customer fields (name, email, locale, metadata)

        Returns:
            The created Customer

        """
        response = self._client.post("v2/customers", customer)
        return self._client.decode(response, Customer.from_dict)

    def update(self, customer_id: str, customer: Customer | dict[str, Any]) -> Customer:
        """
        Update an existing customer.

        Args:
            customer_id: The customer ID
            customer: Fields to change

        Returns:
            The updated Customer

        """
        response = self._client.patch(f"v2/customers/{_segment(customer_id)}", customer)
        return self._client.decode(response, Customer.from_dict)

    def delete(self, customer_id: str) -> Response:
        """
        Delete a customer.

        Args:
            customer_id: The customer ID

        Returns:
            The raw Response (the API replies with 204 No Content)

        """
        return self._client.delete(f"v2/customers/{_segment(customer_id)}")

    def list(self, options: ListCustomersOptions | None = None) -> CustomersList:
        """
        List customers, newest first.

        Args:
            options: Pagination and filter options

        Returns:
            CustomersList page

        """
        response = self._client.get("v2/customers", options)
        return self._client.decode(response, CustomersList.from_dict)

    def iterate(self, options: ListCustomersOptions | None = None) -> Iterator[Customer]:
        """Iterate through all customers, page by page."""
        return self._client.paginate("v2/customers", CustomersList.from_dict, options)

    def list_all(self, options: ListCustomersOptions | None = None) -> builtins.list[Customer]:
        """Fetch all customers across pages."""
        return builtins.list(self.iterate(options))

    def get_payments(self, customer_id: str, options: ListCustomersOptions | None = None) -> PaymentsList:
        """
        List the payments of a customer.

        Args:
            customer_id: The customer ID
            options: Pagination and filter options

        Returns:
            PaymentsList page

        """
        response = self._client.get(f"v2/customers/{_segment(customer_id)}/payments", options)
        return self._client.decode(response, PaymentsList.from_dict)

    def create_payment(self, customer_id: str, payment: Payment | dict[str, Any]) -> Payment:
        """
        Create a payment linked to a customer.

        Args:
            customer_id: The customer ID
            payment: Payment fields (amount, description, redirectUrl, ...)

        Returns:
            The created Payment

        """
        response = self._client.post(f"v2/customers/{_segment(customer_id)}/payments", payment)
        return self._client.decode(response, Payment.from_dict)


# =============================================================================
# Payment Operations
# =============================================================================


class PaymentOperations:
    """Operations for managing payments."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, payment_id: str, options: PaymentOptions | None = None) -> Payment:
        """Retrieve a single payment by its ID."""
        response = self._client.get(f"v2/payments/{_segment(payment_id)}", options)
        return self._client.decode(response, Payment.from_dict)

    def create(self, payment: Payment | dict[str, Any], options: PaymentOptions | None = None) -> Payment:
        """Create a payment."""
        response = self._client.post("v2/payments", payment, options)
        return self._client.decode(response, Payment.from_dict)

    def update(self, payment_id: str, payment: Payment | dict[str, Any]) -> Payment:
        """Update description, redirect/webhook URLs or metadata of a payment."""
        response = self._client.patch(f"v2/payments/{_segment(payment_id)}", payment)
        return self._client.decode(response, Payment.from_dict)

    def cancel(self, payment_id: str) -> Payment:
        """
        Cancel a payment.

        Only payments with ``is_cancelable`` set can be canceled; the API
        answers with the canceled payment.
        """
        response = self._client.delete(f"v2/payments/{_segment(payment_id)}")
        return self._client.decode(response, Payment.from_dict)

    def list(self, options: ListPaymentsOptions | None = None) -> PaymentsList:
        """List payments, newest first."""
        response = self._client.get("v2/payments", options)
        return self._client.decode(response, PaymentsList.from_dict)

    def iterate(self, options: ListPaymentsOptions | None = None) -> Iterator[Payment]:
        """Iterate through all payments, page by page."""
        return self._client.paginate("v2/payments", PaymentsList.from_dict, options)


# =============================================================================
# Chargeback Operations
# =============================================================================


class ChargebackOperations:
    """Operations for reading chargebacks."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(
        self,
        payment_id: str,
        chargeback_id: str,
        options: ChargebackOptions | None = None,
    ) -> Chargeback:
        """
        Retrieve a single chargeback of a payment.

        Args:
            payment_id: The payment ID (tr_...)
            chargeback_id: The chargeback ID (chb_...)
            options: include/embed options

        Returns:
            Chargeback details

        """
        response = self._client.get(f"v2/payments/{_segment(payment_id)}/chargebacks/{_segment(chargeback_id)}", options)
        return self._client.decode(response, Chargeback.from_dict)

    def list(self, options: ChargebacksListOptions | None = None) -> ChargebacksList:
        """
        List all chargebacks of the account.

        Args:
            options: Pagination, include/embed and profile options

        Returns:
            ChargebacksList page

        """
        response = self._client.get("v2/chargebacks", options)
        return self._client.decode(response, ChargebacksList.from_dict)

    def list_for_payment(
        self,
        payment_id: str,
        options: ChargebacksListOptions | None = None,
    ) -> ChargebacksList:
        """
        List the chargebacks of a single payment.

        Args:
            payment_id: The payment ID
            options: Pagination, include/embed and profile options

        Returns:
            ChargebacksList page

        """
        response = self._client.get(f"v2/payments/{_segment(payment_id)}/chargebacks", options)
        return self._client.decode(response, ChargebacksList.from_dict)

    def iterate(self, options: ChargebacksListOptions | None = None) -> Iterator[Chargeback]:
        """Iterate through all chargebacks, page by page."""
        return self._client.paginate("v2/chargebacks", ChargebacksList.from_dict, options)


# =============================================================================
# Payment Link Operations
# =============================================================================


class PaymentLinkOperations:
    """Operations for managing payment links."""

    def __init__(self, client: APIClient):
        self._client = client

    def get(self, payment_link_id: str) -> PaymentLink:
        """
        Retrieve a single payment link by its ID.

        Args:
            payment_link_id: The payment link ID (pl_...)

        Returns:
            PaymentLink details

        """
        response = self._client.get(f"v2/payment-links/{_segment(payment_link_id)}")
        return self._client.decode(response, PaymentLink.from_dict)

    def create(
        self,
        payment_link: PaymentLink | dict[str, Any],
        options: PaymentLinkOptions | None = None,
    ) -> PaymentLink:
        """
        Create a payment link. Unlike payments, links do not expire by default.

        Args:
            payment_link: Link fields (amount, description, expiresAt, ...)
            options: Query options (profileId for organization tokens)

        Returns:
            The created PaymentLink

        """
        response = self._client.post("v2/payment-links", payment_link, options)
        return self._client.decode(response, PaymentLink.from_dict)

    def list(self, options: PaymentLinkOptions | None = None) -> PaymentLinksList:
        """
        List payment links of the current profile, newest first.

        Args:
            options: Pagination and profile options

        Returns:
            PaymentLinksList page

        """
        response = self._client.get("v2/payment-links", options)
        return self._client.decode(response, PaymentLinksList.from_dict)
