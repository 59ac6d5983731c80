"""Seed the checkout catalogue with shoe variants and promotions.

Registers variants and promotions through the domain's own commands, so
every record passes the same validation the API applies. Useful before a
load test run or when trying the API by hand.

Prerequisites:
    1. Database ready (for PROTEAN_ENV=production): python src/manage.py setup-db

Usage:
    # 200 variants, 5 promotions
    python scripts/seed_catalogue.py

    # A bigger catalogue, with the variant ids written to a file for scenarios
    python scripts/seed_catalogue.py --variants 2000 --promotions 20 --out variants.txt
"""

import argparse
import random
import sys
import time
import uuid
from datetime import UTC, datetime, timedelta

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")

SHOE_MODELS = ["Runner", "Court Classic", "Trail Blazer", "City Loafer", "High Top", "Slip On"]
SIZES = ["38", "39", "40", "41", "42", "43", "44"]
COLORS = ["Black", "White", "Navy", "Red", "Grey"]


def main():
    parser = argparse.ArgumentParser(
        description="Seed the checkout catalogue with variants and promotions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --variants 200 --promotions 5
  %(prog)s --variants 2000 --out variants.txt
        """,
    )
    parser.add_argument("--variants", type=int, default=200, help="Number of variants to register (default: 200)")
    parser.add_argument("--promotions", type=int, default=5, help="Number of promotions to create (default: 5)")
    parser.add_argument("--out", help="Write the registered variant ids to this file, one per line")
    parser.add_argument("--batch-size", type=int, default=50, help="Print progress every N records (default: 50)")
    args = parser.parse_args()

    from faker import Faker

    from checkout.catalogue.management import RegisterVariant
    from checkout.domain import checkout
    from checkout.promotion.management import CreatePromotion

    fake = Faker()
    checkout.init()

    print(f"\n{'='*60}")
    print("  Shoestore Checkout — Catalogue Seed")
    print(f"{'='*60}")
    print(f"  Variants to register:  {args.variants:,}")
    print(f"  Promotions to create:  {args.promotions:,}")
    print(f"{'='*60}\n")

    variant_ids = []
    errors = 0
    start = time.monotonic()

    with checkout.domain_context():
        for i in range(args.variants):
            model = random.choice(SHOE_MODELS)
            try:
                variant_id = checkout.process(
                    RegisterVariant(
                        product_id=f"prod-{uuid.uuid4().hex[:8]}",
                        product_name=f"{model} {fake.color_name()}",
                        size=random.choice(SIZES),
                        color=random.choice(COLORS),
                        sku=f"SEED-{uuid.uuid4().hex[:8].upper()}",
                        base_price=float(random.randint(20, 250) * 10_000),
                        stock_quantity=random.randint(0, 200),
                    ),
                    asynchronous=False,
                )
                variant_ids.append(variant_id)
            except Exception as e:
                errors += 1
                if errors <= 5:
                    print(f"  [ERROR] Variant {i+1}: {e}")
                elif errors == 6:
                    print("  [ERROR] Suppressing further error messages...")

            if (i + 1) % args.batch_size == 0:
                elapsed = time.monotonic() - start
                print(
                    f"  [{time.strftime('%H:%M:%S')}] Registered {i+1:,}/{args.variants:,} "
                    f"({(i + 1) / elapsed:.1f} rec/sec, {errors} errors)"
                )

        now = datetime.now(UTC)
        codes = []
        for i in range(args.promotions):
            discount_type = random.choice(["percentage", "fixed_amount", "free_shipping"])
            code = f"SEED{i+1:02d}{uuid.uuid4().hex[:4].upper()}"
            try:
                checkout.process(
                    CreatePromotion(
                        code=code,
                        name=fake.catch_phrase()[:255],
                        discount_type=discount_type,
                        discount_value={"percentage": 10.0, "fixed_amount": 50_000.0, "free_shipping": 0.0}[
                            discount_type
                        ],
                        max_discount_amount=100_000.0 if discount_type == "percentage" else None,
                        min_order_amount=random.choice([0.0, 300_000.0]),
                        start_date=now,
                        end_date=now + timedelta(days=30),
                        usage_limit=random.choice([None, 50, 500]),
                    ),
                    asynchronous=False,
                )
                codes.append(code)
            except Exception as e:
                errors += 1
                print(f"  [ERROR] Promotion {code}: {e}")

    if args.out:
        with open(args.out, "w") as f:
            f.write("\n".join(str(variant_id) for variant_id in variant_ids))

    elapsed = time.monotonic() - start

    print(f"\n{'='*60}")
    print("  Seed Complete")
    print(f"{'='*60}")
    print(f"  Total time:   {elapsed:.1f}s")
    print(f"  Variants:     {len(variant_ids):,}")
    print(f"  Promotions:   {', '.join(codes) or 'none'}")
    print(f"  Errors:       {errors:,}")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    main()
