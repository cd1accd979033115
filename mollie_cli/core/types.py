"""
Core types mirroring the Mollie API v2 JSON resources.

Fields use snake_case in Python and map onto the camelCase wire names through
``wire()``. Every field is optional: ``None`` means absent and is left out of
``to_dict()``, while explicitly set empty values are kept. Keys the types do not
know about, and explicit nulls sent by the API, are kept in ``extra`` so
round-trips never drop data.
"""

import urllib.parse
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R", bound="Resource")

# Sequence types
ONE_OFF_SEQUENCE = "oneoff"
FIRST_SEQUENCE = "first"
RECURRING_SEQUENCE = "recurring"

# Modes
LIVE_MODE = "live"
TEST_MODE = "test"

_INTERNAL_FIELDS = frozenset({"extra", "response"})


def wire(name: str, parser: Callable[[Any], Any] | None = None, default: Any = None) -> Any:
    """Declare a dataclass field stored under a different JSON key."""
    return field(default=default, metadata={"wire": name, "parser": parser})


def _wire_name(f: Any) -> str:
    return f.metadata.get("wire", f.name)


def _dump(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value


# =============================================================================
# Base Types
# =============================================================================


@dataclass
class Resource:
    """Base class for records decoded from API responses."""

    extra: dict[str, Any] = field(default_factory=dict, repr=False, kw_only=True)
    # The Response this value was decoded from, set by APIClient.decode()
    response: Any = field(default=None, repr=False, compare=False, kw_only=True)

    @classmethod
    def wire_fields(cls) -> list[Any]:
        """Dataclass fields that map onto JSON keys."""
        return [f for f in fields(cls) if f.name not in _INTERNAL_FIELDS]

    @classmethod
    def from_dict(cls: type[R], data: Mapping[str, Any]) -> R:
        """Create from API response dict."""
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")

        kwargs: dict[str, Any] = {}
        known = set()
        nulls: dict[str, None] = {}
        for f in cls.wire_fields():
            key = _wire_name(f)
            known.add(key)
            if key not in data:
                continue
            value = data[key]
            if value is None:
                # Explicit null: re-emitted by to_dict() unless the field gets a value
                nulls[key] = None
                continue
            parser = f.metadata.get("parser")
            if parser is not None:
                value = parser(value)
            kwargs[f.name] = value

        extra = {k: v for k, v in data.items() if k not in known}
        extra.update(nulls)
        return cls(**kwargs, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for API request."""
        result = dict(self.extra)
        for f in self.wire_fields():
            value = getattr(self, f.name)
            if value is None:
                continue
            result[_wire_name(f)] = _dump(value)
        return result


@dataclass
class Amount(Resource):
    """A monetary amount; value is a decimal string such as "10.00"."""

    currency: str | None = None
    value: str | None = None


@dataclass
class URL(Resource):
    """A HAL link."""

    href: str | None = None
    type: str | None = None


def parse_links(data: Mapping[str, Any]) -> dict[str, URL | None]:
    """Parse a ``_links`` object into URL values (null links stay None)."""
    if not isinstance(data, Mapping):
        raise TypeError(f"_links expects a JSON object, got {type(data).__name__}")
    return {name: URL.from_dict(link) if link is not None else None for name, link in data.items()}


def _links_field() -> Any:
    return wire("_links", parse_links)


# =============================================================================
# Error Envelope
# =============================================================================


@dataclass
class ErrorEnvelope(Resource):
    """The JSON body returned with non-2xx responses."""

    status: int | None = None
    title: str | None = None
    detail: str | None = None
    field: str | None = None
    links: dict[str, URL | None] | None = _links_field()


# =============================================================================
# Customer Types
# =============================================================================


@dataclass
class Customer(Resource):
    """A Mollie customer."""

    resource: str | None = None
    id: str | None = None
    mode: str | None = None
    name: str | None = None
    email: str | None = None
    locale: str | None = None
    metadata: Any = None
    created_at: str | None = wire("createdAt")
    links: dict[str, URL | None] | None = _links_field()


# =============================================================================
# Payment Types
# =============================================================================


@dataclass
class Payment(Resource):
    """A Mollie payment."""

    resource: str | None = None
    id: str | None = None
    mode: str | None = None
    status: str | None = None
    description: str | None = None
    amount: Amount | None = wire("amount", Amount.from_dict)
    amount_refunded: Amount | None = wire("amountRefunded", Amount.from_dict)
    amount_remaining: Amount | None = wire("amountRemaining", Amount.from_dict)
    amount_captured: Amount | None = wire("amountCaptured", Amount.from_dict)
    amount_charged_back: Amount | None = wire("amountChargedBack", Amount.from_dict)
    settlement_amount: Amount | None = wire("settlementAmount", Amount.from_dict)
    # A single method name in responses, a list is accepted on create
    method: Any = None
    metadata: Any = None
    locale: str | None = None
    country_code: str | None = wire("countryCode")
    profile_id: str | None = wire("profileId")
    settlement_id: str | None = wire("settlementId")
    customer_id: str | None = wire("customerId")
    mandate_id: str | None = wire("mandateId")
    subscription_id: str | None = wire("subscriptionId")
    order_id: str | None = wire("orderId")
    sequence_type: str | None = wire("sequenceType")
    redirect_url: str | None = wire("redirectUrl")
    cancel_url: str | None = wire("cancelUrl")
    webhook_url: str | None = wire("webhookUrl")
    created_at: str | None = wire("createdAt")
    authorized_at: str | None = wire("authorizedAt")
    paid_at: str | None = wire("paidAt")
    canceled_at: str | None = wire("canceledAt")
    expires_at: str | None = wire("expiresAt")
    expired_at: str | None = wire("expiredAt")
    failed_at: str | None = wire("failedAt")
    is_cancelable: bool | None = wire("isCancelable")
    test_mode: bool | None = wire("testmode")
    restrict_payment_methods_to_country: str | None = wire("restrictPaymentMethodsToCountry")
    details: dict[str, Any] | None = None
    links: dict[str, URL | None] | None = _links_field()


# =============================================================================
# Chargeback Types
# =============================================================================


@dataclass
class ChargebackReason(Resource):
    """Reason code reported by the card scheme for a chargeback."""

    code: str | None = None
    description: str | None = None


@dataclass
class Chargeback(Resource):
    """A chargeback against a payment."""

    resource: str | None = None
    id: str | None = None
    amount: Amount | None = wire("amount", Amount.from_dict)
    settlement_amount: Amount | None = wire("settlementAmount", Amount.from_dict)
    reason: ChargebackReason | None = wire("reason", ChargebackReason.from_dict)
    payment_id: str | None = wire("paymentId")
    created_at: str | None = wire("createdAt")
    reversed_at: str | None = wire("reversedAt")
    links: dict[str, URL | None] | None = _links_field()


# =============================================================================
# Payment Link Types
# =============================================================================


@dataclass
class PaymentLink(Resource):
    """A shareable link that leads customers to a payment page."""

    id: str | None = None
    resource: str | None = None
    description: str | None = None
    profile_id: str | None = wire("profileId")
    redirect_url: str | None = wire("redirectUrl")
    webhook_url: str | None = wire("webhookUrl")
    mode: str | None = None
    amount: Amount | None = wire("amount", Amount.from_dict)
    created_at: str | None = wire("createdAt")
    paid_at: str | None = wire("paidAt")
    updated_at: str | None = wire("updatedAt")
    expires_at: str | None = wire("expiresAt")
    links: dict[str, URL | None] | None = _links_field()


# =============================================================================
# List Envelopes
# =============================================================================


@dataclass
class ListEnvelope(Resource, Generic[T]):
    """
    A page of resources: ``{"count": n, "_embedded": {<key>: [...]}, "_links": {...}}``.

    Subclasses set ``embedded_key`` and ``item_type``.
    """

    embedded_key: ClassVar[str] = ""
    item_type: ClassVar[type] = Resource

    count: int | None = None
    links: dict[str, URL | None] | None = _links_field()
    items: list[T] = field(default_factory=list)
    # Whether the collection key was present under _embedded when decoded
    has_collection: bool = field(default=False, repr=False, kw_only=True)

    @classmethod
    def wire_fields(cls) -> list[Any]:
        return [f for f in super().wire_fields() if f.name not in ("items", "has_collection")]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ListEnvelope[T]":
        """Create from API response dict."""
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(data).__name__}")

        envelope = super().from_dict(data)
        embedded = envelope.extra.get("_embedded")
        if embedded is None:
            return envelope
        if not isinstance(embedded, Mapping):
            raise TypeError(f"_embedded expects a JSON object, got {type(embedded).__name__}")

        embedded = dict(embedded)
        raw_items = embedded.get(cls.embedded_key)
        if raw_items is not None:
            if not isinstance(raw_items, list):
                raise TypeError(f"_embedded.{cls.embedded_key} expects a JSON array, got {type(raw_items).__name__}")
            del embedded[cls.embedded_key]
            envelope.items = [cls.item_type.from_dict(item) for item in raw_items]
            envelope.has_collection = True
        envelope.extra["_embedded"] = embedded
        return envelope

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, re-nesting items under ``_embedded``."""
        result = super().to_dict()
        if self.items or self.has_collection:
            embedded = dict(self.extra.get("_embedded") or {})
            embedded[self.embedded_key] = [_dump(item) for item in self.items]
            result["_embedded"] = embedded
        return result

    @property
    def has_more(self) -> bool:
        """Check if there is a next page."""
        return bool(self.links and self.links.get("next"))

    @property
    def next_from(self) -> str | None:
        """The ``from`` cursor of the next page, if any."""
        if not self.has_more:
            return None
        href = self.links["next"].href or ""
        values = urllib.parse.parse_qs(urllib.parse.urlsplit(href).query).get("from")
        return values[0] if values else None


@dataclass
class CustomersList(ListEnvelope[Customer]):
    """A page of customers."""

    embedded_key: ClassVar[str] = "customers"
    item_type: ClassVar[type] = Customer

    @property
    def customers(self) -> list[Customer]:
        return self.items


@dataclass
class PaymentsList(ListEnvelope[Payment]):
    """A page of payments."""

    embedded_key: ClassVar[str] = "payments"
    item_type: ClassVar[type] = Payment

    @property
    def payments(self) -> list[Payment]:
        return self.items


@dataclass
class ChargebacksList(ListEnvelope[Chargeback]):
    """A page of chargebacks."""

    embedded_key: ClassVar[str] = "chargebacks"
    item_type: ClassVar[type] = Chargeback

    @property
    def chargebacks(self) -> list[Chargeback]:
        return self.items


@dataclass
class PaymentLinksList(ListEnvelope[PaymentLink]):
    """A page of payment links."""

    embedded_key: ClassVar[str] = "payment_links"
    item_type: ClassVar[type] = PaymentLink

    @property
    def payment_links(self) -> list[PaymentLink]:
        return self.items


# =============================================================================
# Query Options
# =============================================================================


def _is_zero(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, (str, list, tuple, dict)):
        return not value
    return False


def _format_param(value: Any) -> str:
    if value is True:
        return "true"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def clean_params(params: Mapping[str, Any]) -> dict[str, str]:
    """Drop zero-valued entries and format the rest as query string values."""
    return {key: _format_param(value) for key, value in params.items() if not _is_zero(value)}


@dataclass
class QueryOptions:
    """Base class for per-endpoint query string parameters."""

    def to_params(self) -> dict[str, str]:
        """Convert to query parameters, omitting zero values."""
        return clean_params({_wire_name(f): getattr(self, f.name) for f in fields(self)})


@dataclass
class ListCustomersOptions(QueryOptions):
    """Query parameters for listing customers and their payments."""

    from_: str | None = wire("from")
    limit: int | None = None
    profile_id: str | None = wire("profileId")
    sequence_type: str | None = wire("sequenceType")
    redirect_url: str | None = wire("redirectUrl")


@dataclass
class ChargebackOptions(QueryOptions):
    """Query parameters for retrieving a single chargeback."""

    include: str | list[str] | None = None
    embed: str | list[str] | None = None


@dataclass
class ChargebacksListOptions(QueryOptions):
    """Query parameters for listing chargebacks."""

    from_: str | None = wire("from")
    limit: int | None = None
    include: str | list[str] | None = None
    embed: str | list[str] | None = None
    profile_id: str | None = wire("profileId")


@dataclass
class PaymentLinkOptions(QueryOptions):
    """Query parameters for payment link requests."""

    profile_id: str | None = wire("profileId")
    from_: str | None = wire("from")
    limit: int | None = None


@dataclass
class PaymentOptions(QueryOptions):
    """Query parameters for retrieving or creating a payment."""

    include: str | list[str] | None = None
    embed: str | list[str] | None = None


@dataclass
class ListPaymentsOptions(QueryOptions):
    """Query parameters for listing payments."""

    from_: str | None = wire("from")
    limit: int | None = None
    include: str | list[str] | None = None
    embed: str | list[str] | None = None
    profile_id: str | None = wire("profileId")
