"""
CLI tests - run main() in-process against the mock API.

stdout is captured (not a TTY), so every command prints JSON.
"""

import json

import pytest

from mollie_cli.cli import create_parser, main
from tests import testdata
from tests.conftest import TEST_TOKEN

# =============================================================================
# Helpers
# =============================================================================


@pytest.fixture
def run(api, monkeypatch, capsys):
    """Run the CLI against the mock API and return (exit_code, parsed stdout)."""
    monkeypatch.setenv("MOLLIE_API_TOKEN", TEST_TOKEN)
    monkeypatch.delenv("MOLLIE_BASE_URL", raising=False)

    def _run(*args: str) -> tuple[int, dict]:
        code = 0
        try:
            main(["--base-url", api.base_url, *args])
        except SystemExit as e:
            code = e.code or 0
        out = capsys.readouterr().out
        return code, json.loads(out) if out.strip() else {}

    return _run


# =============================================================================
# Customers
# =============================================================================


def test_customers_get(run, api):
    api.respond("/v2/customers/cst_kEn1PlbGa", testdata.GET_CUSTOMER_RESPONSE)

    code, data = run("customers", "get", "cst_kEn1PlbGa")

    assert code == 0
    assert data["id"] == "cst_kEn1PlbGa"
    assert data["createdAt"] == "2018-04-06T13:23:21.0Z"


def test_customers_list(run, api):
    api.respond("/v2/customers", testdata.LIST_CUSTOMERS_RESPONSE)

    code, data = run("customers", "list", "--limit", "2")

    assert code == 0
    assert api.last.query == {"limit": "2"}
    assert [c["id"] for c in data["_embedded"]["customers"]] == ["cst_kEn1PlbGa", "cst_8wmqcHMN4U"]


def test_customers_create(run, api):
    api.respond("/v2/customers", testdata.CREATE_CUSTOMER_RESPONSE, status=201)

    code, data = run("customers", "create", "--name", "Customer A", "--metadata", '{"tier": "gold"}')

    assert code == 0
    assert api.last.json() == {"name": "Customer A", "metadata": {"tier": "gold"}}
    assert data["id"] == "cst_8wmqcHMN4U"


def test_customers_create_invalid_metadata(run, api):
    code, data = run("customers", "create", "--metadata", "{not json")

    assert code == 1
    assert data["error"].startswith("Invalid JSON in --metadata")
    assert api.requests == []


def test_customers_delete(run, api):
    api.respond("/v2/customers/cst_kEn1PlbGa", "", status=204)

    code, data = run("customers", "delete", "cst_kEn1PlbGa")

    assert code == 0
    assert data["success"] is True


def test_customers_payments(run, api):
    api.respond("/v2/customers/cst_kEn1PlbGa/payments", testdata.LIST_PAYMENTS_RESPONSE)

    code, data = run("customers", "payments", "cst_kEn1PlbGa")

    assert code == 0
    assert data["count"] == 1


# =============================================================================
# Other Resources
# =============================================================================


def test_chargebacks_list_for_payment(run, api):
    api.respond("/v2/payments/tr_WDqYK6vllg/chargebacks", testdata.LIST_CHARGEBACKS_RESPONSE)

    code, data = run("chargebacks", "list", "--payment", "tr_WDqYK6vllg")

    assert code == 0
    assert data["_embedded"]["chargebacks"][0]["id"] == "chb_n9z0tp"


def test_chargebacks_get(run, api):
    api.respond("/v2/payments/tr_WDqYK6vllg/chargebacks/chb_n9z0tp", testdata.GET_CHARGEBACK_RESPONSE)

    code, data = run("chargebacks", "get", "tr_WDqYK6vllg", "chb_n9z0tp", "--include", "details.qrCode")

    assert code == 0
    assert api.last.query == {"include": "details.qrCode"}
    assert data["paymentId"] == "tr_WDqYK6vllg"


def test_payment_links_create(run, api):
    api.respond("/v2/payment-links", testdata.GET_PAYMENT_LINK_RESPONSE, status=201)

    code, data = run("payment-links", "create", "--amount", "24.95", "--description", "Bicycle tires")

    assert code == 0
    assert api.last.json() == {"description": "Bicycle tires", "amount": {"currency": "EUR", "value": "24.95"}}
    assert data["id"] == "pl_4Y0eZitmBnQ6IDoMqZQKh"


def test_payments_cancel(run, api):
    api.respond("/v2/payments/tr_WDqYK6vllg", testdata.CANCEL_PAYMENT_RESPONSE)

    code, data = run("payments", "cancel", "tr_WDqYK6vllg")

    assert code == 0
    assert api.last.method == "DELETE"
    assert data["status"] == "canceled"


# =============================================================================
# Errors
# =============================================================================


def test_api_error_is_printed_as_json(run, api):
    api.fail("/v2/payments/tr_WDqYK6vllg")

    code, data = run("payments", "get", "tr_WDqYK6vllg")

    assert code == 1
    assert data["status"] == 500
    assert data["error"] == "An internal server error occurred while processing your request."


def test_missing_token(run, api, monkeypatch):
    monkeypatch.delenv("MOLLIE_API_TOKEN")

    code, data = run("customers", "get", "cst_kEn1PlbGa")

    assert code == 1
    assert "MOLLIE_API_TOKEN" in data["error"]


def test_parser_requires_link_amount():
    parser = create_parser()

    with pytest.raises(SystemExit):
        parser.parse_args(["payment-links", "create", "--description", "x"])
