"""Resource type tests - wire names, absent vs empty, unknown fields."""

import json

import pytest

from mollie_cli.core.types import (
    URL,
    Chargeback,
    ChargebacksListOptions,
    Customer,
    CustomersList,
    ErrorEnvelope,
    ListCustomersOptions,
    Payment,
    PaymentLinkOptions,
    clean_params,
)
from tests import testdata


def test_round_trip_keeps_every_field():
    raw = json.loads(testdata.GET_PAYMENT_RESPONSE)

    assert Payment.from_dict(raw).to_dict() == raw


def test_unknown_fields_survive_round_trip():
    raw = {"id": "chb_n9z0tp", "paymentId": "tr_WDqYK6vllg", "settlementId": "stl_jDk30akdN"}

    chargeback = Chargeback.from_dict(raw)

    assert chargeback.extra == {"settlementId": "stl_jDk30akdN"}
    assert chargeback.to_dict() == raw


def test_absent_and_empty_are_distinguishable():
    assert Customer(name="").to_dict() == {"name": ""}
    assert Customer().to_dict() == {}
    assert Customer.from_dict({"metadata": {}}).metadata == {}
    assert Customer.from_dict({}).metadata is None


def test_null_links_are_kept():
    page = CustomersList.from_dict(json.loads(testdata.LIST_CUSTOMERS_RESPONSE))

    assert page.links["next"] is None
    assert isinstance(page.links["self"], URL)
    assert page.to_dict() == json.loads(testdata.LIST_CUSTOMERS_RESPONSE)


def test_envelope_without_embedded():
    page = CustomersList.from_dict({"count": 0})

    assert page.customers == []
    assert page.to_dict() == {"count": 0}
    assert page.next_from is None


def test_empty_embedded_collection_round_trips():
    raw = {"count": 0, "_embedded": {"customers": []}}

    assert CustomersList.from_dict(raw).to_dict() == raw


@pytest.mark.parametrize(
    "raw",
    [
        {"count": 0, "_embedded": None},
        {"count": 0, "_embedded": {}},
        {"count": 0, "_embedded": {"customers": None}},
    ],
)
def test_embedded_without_collection_round_trips(raw):
    page = CustomersList.from_dict(raw)

    assert page.customers == []
    assert page.to_dict() == raw


def test_links_must_be_an_object():
    with pytest.raises(TypeError):
        Customer.from_dict({"id": "cst_1", "_links": []})


def test_embedded_must_be_an_object():
    with pytest.raises(TypeError):
        CustomersList.from_dict({"count": 1, "_embedded": []})


def test_response_is_not_part_of_equality_or_wire():
    a = Customer(id="cst_1")
    b = Customer(id="cst_1", response=object())

    assert a == b
    assert b.to_dict() == {"id": "cst_1"}


def test_error_envelope():
    envelope = ErrorEnvelope.from_dict(json.loads(testdata.UNPROCESSABLE_ENTITY_RESPONSE))

    assert envelope.status == 422
    assert envelope.field == "amount"
    assert envelope.links["documentation"].type == "text/html"


def test_options_use_wire_names():
    options = ListCustomersOptions(from_="cst_1", limit=5, profile_id="pfl_1", redirect_url="https://x.test/")

    assert options.to_params() == {
        "from": "cst_1",
        "limit": "5",
        "profileId": "pfl_1",
        "redirectUrl": "https://x.test/",
    }


def test_options_omit_zero_values():
    assert ChargebacksListOptions().to_params() == {}
    assert ChargebacksListOptions(include=[], limit=0, from_="").to_params() == {}
    assert PaymentLinkOptions(profile_id="pfl_1").to_params() == {"profileId": "pfl_1"}


def test_clean_params_formats_values():
    assert clean_params({"testmode": True, "embed": ["a", "b"], "skip": False, "n": 3}) == {
        "testmode": "true",
        "embed": "a,b",
        "n": "3",
    }
