"""CLI tool to run one opportunity search against the configured Supabase project."""
import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


async def run_search(args: argparse.Namespace) -> int:
    from app.errors import OpportunityServiceError
    from app.schemas.opportunity import OpportunitySearchParams
    from app.services.opportunity_service import search_opportunities

    params = OpportunitySearchParams(
        keyword=args.keyword,
        property_type=args.property_type,
        investment_strategy=args.investment_strategy,
        min_investment=args.min_investment,
        max_investment=args.max_investment,
        min_irr=args.min_irr,
        max_irr=args.max_irr,
        state=args.state,
        city=args.city,
        status=args.status,
        page=args.page,
        limit=args.limit,
    )

    try:
        response = await search_opportunities(params)
    except OpportunityServiceError as e:
        print(json.dumps({"error": e.message}))
        return 1

    if args.summary:
        p = response.pagination
        print(f"\n=== Page {p.page}/{p.total_pages} ({p.total} matching) ===")
        for opp in response.opportunities:
            star = "*" if opp.featured_listing else " "
            city = opp.property_address.city if opp.property_address else None
            print(f" {star} {opp.opportunity_name or opp.id}  [{opp.property_type}] {city or ''}")
    else:
        print(json.dumps(response.model_dump(by_alias=True), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Search investment opportunities")
    parser.add_argument("--keyword", "-k")
    parser.add_argument("--property-type")
    parser.add_argument("--investment-strategy")
    parser.add_argument("--min-investment", type=float)
    parser.add_argument("--max-investment", type=float)
    parser.add_argument("--min-irr", type=float)
    parser.add_argument("--max-irr", type=float)
    parser.add_argument("--state")
    parser.add_argument("--city")
    parser.add_argument("--status", help="e.g. fundraising, funded, active")
    parser.add_argument("--page", type=positive_int, default=1)
    parser.add_argument("--limit", type=positive_int, default=10)
    parser.add_argument("--summary", action="store_true", help="Print one line per result")
    args = parser.parse_args()
    sys.exit(asyncio.run(run_search(args)))
