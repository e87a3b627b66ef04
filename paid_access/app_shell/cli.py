import argparse
import asyncio
import logging
import sys
from pathlib import Path

from paid_access.adapters.settings_static import RulesSettingsProvider
from paid_access.components.coupons import ValidateCouponInput
from paid_access.components.coupons import run as run_validate_coupon
from paid_access.components.outcomes import classify_failure
from paid_access.components.pricing import price_for, resolve_base_price
from paid_access.components.settings import load_payment_settings
from paid_access.rules.loader import default_rules_path, load_rules
from paid_access.rules.models import Rules

logger = logging.getLogger("cli")


def get_rules(path: Path) -> Rules:
    if not path.exists():
        logger.error(f"Rules file {path} not found.")
        sys.exit(1)
    return load_rules(path)


def handle_quote(args: argparse.Namespace) -> int:
    rules = get_rules(args.rules)
    loaded = asyncio.run(load_payment_settings(RulesSettingsProvider(), rules))
    settings = loaded.settings

    try:
        pricing = price_for(resolve_base_price(settings, args.price))
    except ValueError as e:
        print(f"Invalid price: {e}", file=sys.stderr)
        return 2

    if args.code:
        result = run_validate_coupon(
            ValidateCouponInput(raw_code=args.code, available=settings.active_coupons)
        )
        if result.coupon is None:
            print(f"Promo code rejected: {result.message}", file=sys.stderr)
            return 2
        pricing = price_for(pricing.base_price, result.coupon)

    print(f"Base price: {pricing.base_price:g} {settings.currency}")
    if pricing.applied_coupon:
        print(f"Coupon: {pricing.applied_coupon.code} ({pricing.discount_percent:g}% off)")
    print(f"Final amount: {pricing.final_amount} {settings.currency}")
    if pricing.is_free:
        print("Free access with 100% discount!")
    return 0


def handle_classify(args: argparse.Namespace) -> int:
    result = classify_failure(args.code, args.description)
    print(f"{result.kind.value}: {result.message}")
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Paid access checkout CLI")
    parser.add_argument(
        "--rules", type=Path, default=default_rules_path(), help="Path to rules.yaml"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # quote
    quote_parser = subparsers.add_parser("quote", help="Quote the amount due")
    quote_parser.add_argument("--price", type=float, help="Item price override")
    quote_parser.add_argument("--code", help="Promo code to apply")

    # classify
    classify_parser = subparsers.add_parser("classify", help="Classify a gateway error code")
    classify_parser.add_argument("code", help="Gateway error code, e.g. NETWORK_ERROR")
    classify_parser.add_argument("--description", help="Gateway error description")

    args = parser.parse_args(argv)

    if args.command == "quote":
        return handle_quote(args)
    return handle_classify(args)


if __name__ == "__main__":
    sys.exit(main())
