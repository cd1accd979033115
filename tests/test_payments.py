"""Payment service tests against the mock API."""

import pytest

from mollie_cli.core.client import APIError, DecodeError
from mollie_cli.core.types import Amount, ListPaymentsOptions, Payment, PaymentOptions
from tests import testdata

PAYMENT_ID = "tr_WDqYK6vllg"


def test_get(client, api):
    api.respond(f"/v2/payments/{PAYMENT_ID}", testdata.GET_PAYMENT_RESPONSE)

    payment = client.payments.get(PAYMENT_ID, PaymentOptions(embed=["refunds", "chargebacks"]))

    assert api.last.query == {"embed": "refunds,chargebacks"}
    assert payment.id == PAYMENT_ID
    assert payment.status == "open"
    assert payment.is_cancelable is False
    assert payment.metadata == {"order_id": "12345"}
    assert payment.links["checkout"].type == "text/html"


def test_get_server_error(client, api):
    api.fail(f"/v2/payments/{PAYMENT_ID}")

    with pytest.raises(APIError):
        client.payments.get(PAYMENT_ID)


def test_create(client, api):
    api.respond("/v2/payments", testdata.GET_PAYMENT_RESPONSE, status=201)

    payment = client.payments.create(
        Payment(
            amount=Amount(currency="EUR", value="10.00"),
            description="Order #12345",
            redirect_url="https://webshop.example.org/order/12345/",
            method=["ideal", "creditcard"],
        ),
        PaymentOptions(include="details.qrCode"),
    )

    assert api.last.query == {"include": "details.qrCode"}
    assert api.last.json()["redirectUrl"] == "https://webshop.example.org/order/12345/"
    assert api.last.json()["method"] == ["ideal", "creditcard"]
    assert payment.id == PAYMENT_ID


def test_update(client, api):
    api.respond(f"/v2/payments/{PAYMENT_ID}", testdata.GET_PAYMENT_RESPONSE)

    client.payments.update(PAYMENT_ID, Payment(description="Order #12345"))

    assert api.last.method == "PATCH"
    assert api.last.json() == {"description": "Order #12345"}


def test_cancel(client, api):
    api.respond(f"/v2/payments/{PAYMENT_ID}", testdata.CANCEL_PAYMENT_RESPONSE)

    payment = client.payments.cancel(PAYMENT_ID)

    assert api.last.method == "DELETE"
    assert payment.status == "canceled"
    assert payment.canceled_at == "2018-03-19T10:19:15+00:00"


def test_cancel_corrupt_json(client, api):
    api.corrupt(f"/v2/payments/{PAYMENT_ID}")

    with pytest.raises(DecodeError):
        client.payments.cancel(PAYMENT_ID)


def test_list(client, api):
    api.respond("/v2/payments", testdata.LIST_PAYMENTS_RESPONSE)

    page = client.payments.list(ListPaymentsOptions(limit=5, profile_id="pfl_QkEhN94Ba"))

    assert api.last.query == {"limit": "5", "profileId": "pfl_QkEhN94Ba"}
    assert page.count == 1
    assert page.has_more
    assert page.next_from == "tr_SDkzMggpvx"
