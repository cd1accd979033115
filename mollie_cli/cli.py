"""
Mollie CLI - Command-line interface.

This layer provides the user-facing CLI commands, using the SDK layer
for all operations. It handles:
- Argument parsing
- TTY detection for human vs machine output
- Pretty tables for human output
- JSON output for piping/automation
"""

import argparse
import json
import logging
import sys
from typing import Any

from dotenv import load_dotenv

from mollie_cli.core.client import CLIError, ValidationError
from mollie_cli.core.config import Config
from mollie_cli.core.types import (
    Amount,
    ChargebackOptions,
    ChargebacksListOptions,
    Customer,
    ListCustomersOptions,
    ListPaymentsOptions,
    PaymentLink,
    PaymentLinkOptions,
)
from mollie_cli.sdk import MollieClient

# =============================================================================
# Output Helpers
# =============================================================================


def is_tty() -> bool:
    """Check if stdout is a TTY (human) or pipe (machine)."""
    return sys.stdout.isatty()


def json_output(data: Any, pretty: bool = False) -> None:
    """Print JSON output."""
    indent = 2 if pretty or is_tty() else None
    print(json.dumps(data, indent=indent, default=str))


def error_output(error: CLIError) -> None:
    """Print error and exit."""
    json_output(error.to_dict())
    sys.exit(1)


def success_output(data: Any) -> None:
    """Print success output."""
    json_output(data)


def table_output(
    headers: list[str],
    rows: list[list[str]],
    widths: list[int],
) -> None:
    """Print a formatted table for human output."""
    header_line = "  ".join(h.ljust(w) for h, w in zip(headers, widths))
    print(header_line)
    print("-" * len(header_line))

    for row in rows:
        print("  ".join(str(v)[:w].ljust(w) for v, w in zip(row, widths)))


def format_amount(amount: Amount | None) -> str:
    """Render an amount as "10.00 EUR"."""
    if amount is None:
        return ""
    return f"{amount.value or ''} {amount.currency or ''}".strip()


def page_output(page: Any, headers: list[str], row: Any, widths: list[int], noun: str) -> None:
    """Print a list page as a table (TTY) or its JSON envelope."""
    if not is_tty():
        success_output(page.to_dict())
        return

    if not page.items:
        print(f"No {noun} found.")
        return

    table_output(headers, [row(item) for item in page.items], widths)
    if page.has_more:
        print(f"\nMore {noun} available, continue with --from {page.next_from}")


def parse_json_arg(value: str | None, flag: str) -> Any:
    """Parse a JSON command-line argument (or - for stdin)."""
    if not value:
        return None
    try:
        if value == "-":
            return json.load(sys.stdin)
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {flag}: {e}")


# =============================================================================
# Customer Commands
# =============================================================================


def cmd_customers_list(client: MollieClient, args: argparse.Namespace) -> None:
    """List customers."""
    try:
        page = client.customers.list(ListCustomersOptions(from_=args.from_, limit=args.limit))
        page_output(
            page,
            ["ID", "Name", "Email"],
            lambda c: [c.id, c.name or "", c.email or ""],
            [20, 30, 40],
            "customers",
        )
    except CLIError as e:
        error_output(e)


def cmd_customers_get(client: MollieClient, args: argparse.Namespace) -> None:
    """Get a customer by ID."""
    try:
        customer = client.customers.get(args.customer_id)
        success_output(customer.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_customers_create(client: MollieClient, args: argparse.Namespace) -> None:
    """Create a customer."""
    try:
        customer = client.customers.create(
            Customer(
                name=args.name,
                email=args.email,
                locale=args.locale,
                metadata=parse_json_arg(args.metadata, "--metadata"),
            )
        )
        success_output(customer.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_customers_delete(client: MollieClient, args: argparse.Namespace) -> None:
    """Delete a customer."""
    try:
        client.customers.delete(args.customer_id)
        success_output({"success": True, "message": f"Customer {args.customer_id} deleted"})
    except CLIError as e:
        error_output(e)


def cmd_customers_payments(client: MollieClient, args: argparse.Namespace) -> None:
    """List payments of a customer."""
    try:
        page = client.customers.get_payments(
            args.customer_id,
            ListCustomersOptions(from_=args.from_, limit=args.limit),
        )
        page_output(
            page,
            ["ID", "Status", "Amount"],
            lambda p: [p.id, p.status or "", format_amount(p.amount)],
            [20, 12, 20],
            "payments",
        )
    except CLIError as e:
        error_output(e)


# =============================================================================
# Payment Commands
# =============================================================================


def cmd_payments_list(client: MollieClient, args: argparse.Namespace) -> None:
    """List payments."""
    try:
        page = client.payments.list(ListPaymentsOptions(from_=args.from_, limit=args.limit))
        page_output(
            page,
            ["ID", "Status", "Amount", "Description"],
            lambda p: [p.id, p.status or "", format_amount(p.amount), p.description or ""],
            [20, 12, 20, 40],
            "payments",
        )
    except CLIError as e:
        error_output(e)


def cmd_payments_get(client: MollieClient, args: argparse.Namespace) -> None:
    """Get a payment by ID."""
    try:
        payment = client.payments.get(args.payment_id)
        success_output(payment.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_payments_cancel(client: MollieClient, args: argparse.Namespace) -> None:
    """Cancel a payment."""
    try:
        payment = client.payments.cancel(args.payment_id)
        success_output(payment.to_dict())
    except CLIError as e:
        error_output(e)


# =============================================================================
# Chargeback Commands
# =============================================================================


def cmd_chargebacks_list(client: MollieClient, args: argparse.Namespace) -> None:
    """List chargebacks, optionally for a single payment."""
    try:
        options = ChargebacksListOptions(from_=args.from_, limit=args.limit, profile_id=args.profile)
        if args.payment:
            page = client.chargebacks.list_for_payment(args.payment, options)
        else:
            page = client.chargebacks.list(options)
        page_output(
            page,
            ["ID", "Payment", "Amount", "Created"],
            lambda cb: [cb.id, cb.payment_id or "", format_amount(cb.amount), cb.created_at or ""],
            [20, 20, 20, 25],
            "chargebacks",
        )
    except CLIError as e:
        error_output(e)


def cmd_chargebacks_get(client: MollieClient, args: argparse.Namespace) -> None:
    """Get a chargeback of a payment."""
    try:
        chargeback = client.chargebacks.get(
            args.payment_id,
            args.chargeback_id,
            ChargebackOptions(include=args.include),
        )
        success_output(chargeback.to_dict())
    except CLIError as e:
        error_output(e)


# =============================================================================
# Payment Link Commands
# =============================================================================


def cmd_links_list(client: MollieClient, args: argparse.Namespace) -> None:
    """List payment links."""
    try:
        page = client.payment_links.list(
            PaymentLinkOptions(profile_id=args.profile, from_=args.from_, limit=args.limit)
        )
        page_output(
            page,
            ["ID", "Amount", "Description"],
            lambda pl: [pl.id, format_amount(pl.amount), pl.description or ""],
            [20, 20, 40],
            "payment links",
        )
    except CLIError as e:
        error_output(e)


def cmd_links_get(client: MollieClient, args: argparse.Namespace) -> None:
    """Get a payment link by ID."""
    try:
        link = client.payment_links.get(args.payment_link_id)
        success_output(link.to_dict())
    except CLIError as e:
        error_output(e)


def cmd_links_create(client: MollieClient, args: argparse.Namespace) -> None:
    """Create a payment link."""
    try:
        link = client.payment_links.create(
            PaymentLink(
                description=args.description,
                amount=Amount(currency=args.currency, value=args.amount),
                redirect_url=args.redirect_url,
                webhook_url=args.webhook_url,
                expires_at=args.expires_at,
            ),
            PaymentLinkOptions(profile_id=args.profile),
        )
        success_output(link.to_dict())
    except CLIError as e:
        error_output(e)


# =============================================================================
# Main CLI
# =============================================================================


def _add_page_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--from", dest="from_", help="Cursor: ID of the first item of the page")
    parser.add_argument("--limit", "-l", type=int, help="Max results per page (1-250)")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mollie",
        description="Mollie CLI - Command-line interface for the Mollie payments API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Output Modes:
  TTY (human):  Pretty tables
  Pipe:         Full JSON

Examples:
  mollie customers list --limit 5
  mollie customers get cst_kEn1PlbGa
  mollie chargebacks list --payment tr_WDqYK6vllg
  mollie payment-links create --amount 24.95 --currency EUR --description "Bicycle tires"
""",
    )
    parser.add_argument("--testing", action="store_true", help="Use test mode (organization tokens)")
    parser.add_argument("--org-token", action="store_true", help="Authenticate with MOLLIE_ORG_TOKEN")
    parser.add_argument("--base-url", help="API base URL (overrides MOLLIE_BASE_URL)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log HTTP requests to stderr")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ========== Customers ==========
    customers = subparsers.add_parser("customers", help="Manage customers")
    customers.set_defaults(func=lambda _c, _a: customers.print_help())
    customers_sub = customers.add_subparsers(dest="subcommand")

    c_list = customers_sub.add_parser("list", help="List customers")
    _add_page_args(c_list)
    c_list.set_defaults(func=cmd_customers_list)

    c_get = customers_sub.add_parser("get", help="Get customer details")
    c_get.add_argument("customer_id", help="Customer ID")
    c_get.set_defaults(func=cmd_customers_get)

    c_create = customers_sub.add_parser("create", help="Create a customer")
    c_create.add_argument("--name", "-n", help="Full name")
    c_create.add_argument("--email", "-e", help="Email address")
    c_create.add_argument("--locale", help="Locale, e.g. nl_NL")
    c_create.add_argument("--metadata", "-m", help="JSON metadata (or - for stdin)")
    c_create.set_defaults(func=cmd_customers_create)

    c_delete = customers_sub.add_parser("delete", help="Delete a customer")
    c_delete.add_argument("customer_id", help="Customer ID")
    c_delete.set_defaults(func=cmd_customers_delete)

    c_payments = customers_sub.add_parser("payments", help="List payments of a customer")
    c_payments.add_argument("customer_id", help="Customer ID")
    _add_page_args(c_payments)
    c_payments.set_defaults(func=cmd_customers_payments)

    # ========== Payments ==========
    payments = subparsers.add_parser("payments", help="Manage payments")
    payments.set_defaults(func=lambda _c, _a: payments.print_help())
    payments_sub = payments.add_subparsers(dest="subcommand")

    p_list = payments_sub.add_parser("list", help="List payments")
    _add_page_args(p_list)
    p_list.set_defaults(func=cmd_payments_list)

    p_get = payments_sub.add_parser("get", help="Get payment details")
    p_get.add_argument("payment_id", help="Payment ID")
    p_get.set_defaults(func=cmd_payments_get)

    p_cancel = payments_sub.add_parser("cancel", help="Cancel a payment")
    p_cancel.add_argument("payment_id", help="Payment ID")
    p_cancel.set_defaults(func=cmd_payments_cancel)

    # ========== Chargebacks ==========
    chargebacks = subparsers.add_parser("chargebacks", help="Inspect chargebacks")
    chargebacks.set_defaults(func=lambda _c, _a: chargebacks.print_help())
    chargebacks_sub = chargebacks.add_subparsers(dest="subcommand")

    cb_list = chargebacks_sub.add_parser("list", help="List chargebacks")
    cb_list.add_argument("--payment", "-p", help="Only chargebacks of this payment")
    cb_list.add_argument("--profile", help="Profile ID (organization tokens)")
    _add_page_args(cb_list)
    cb_list.set_defaults(func=cmd_chargebacks_list)

    cb_get = chargebacks_sub.add_parser("get", help="Get chargeback details")
    cb_get.add_argument("payment_id", help="Payment ID")
    cb_get.add_argument("chargeback_id", help="Chargeback ID")
    cb_get.add_argument("--include", help="Extra data to include, e.g. details.qrCode")
    cb_get.set_defaults(func=cmd_chargebacks_get)

    # ========== Payment Links ==========
    links = subparsers.add_parser("payment-links", help="Manage payment links")
    links.set_defaults(func=lambda _c, _a: links.print_help())
    links_sub = links.add_subparsers(dest="subcommand")

    l_list = links_sub.add_parser("list", help="List payment links")
    l_list.add_argument("--profile", help="Profile ID (organization tokens)")
    _add_page_args(l_list)
    l_list.set_defaults(func=cmd_links_list)

    l_get = links_sub.add_parser("get", help="Get payment link details")
    l_get.add_argument("payment_link_id", help="Payment link ID")
    l_get.set_defaults(func=cmd_links_get)

    l_create = links_sub.add_parser("create", help="Create a payment link")
    l_create.add_argument("--amount", "-a", required=True, help="Amount as a decimal string, e.g. 24.95")
    l_create.add_argument("--currency", "-c", default="EUR", help="ISO 4217 currency code")
    l_create.add_argument("--description", "-d", required=True, help="Shown to the customer")
    l_create.add_argument("--redirect-url", help="Where to send the customer after paying")
    l_create.add_argument("--webhook-url", help="Webhook for payment status updates")
    l_create.add_argument("--expires-at", help="ISO 8601 expiry timestamp")
    l_create.add_argument("--profile", help="Profile ID (organization tokens)")
    l_create.set_defaults(func=cmd_links_create)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv()

    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")

    # Create client
    config = Config.from_env(testing=args.testing, use_org_token=args.org_token)
    client = MollieClient(config=config, base_url=args.base_url)

    # Run command (all subparsers have default funcs that print help)
    args.func(client, args)


if __name__ == "__main__":
    main()
