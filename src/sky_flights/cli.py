"""Command line flight search."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from datetime import UTC, date, datetime, timedelta

import click

from sky_flights.config import FlightSettings, settings
from sky_flights.exceptions import FlightError
from sky_flights.google.cookie_manager import CookieManager
from sky_flights.schemas import (
    CabinClass,
    FlightSearch,
    Itinerary,
    PassengerType,
    SortOrder,
)
from sky_flights.service import FlightService

logger = logging.getLogger(__name__)


def _build_search(
    service: FlightService,
    origin: str,
    destination: str,
    departure_date: date,
    *,
    max_stops: int,
    airlines: str,
    days: int | None,
    cabin: str,
    sort: str,
    currency: str | None,
    language: str | None,
    adults: int,
    children: int,
    no_cache: bool,
) -> FlightSearch:
    search = (
        service.query()
        .add_segment(origin, destination, departure_date, max_stops, airlines)
        .with_cabin_class(CabinClass(cabin.upper()))
        .with_sort_order(SortOrder(sort.upper()))
    )
    if days is not None:
        search = search.add_segment(
            destination,
            origin,
            departure_date + timedelta(days=days),
            max_stops,
            airlines,
        )
    if currency:
        search = search.with_currency(currency)
    if language:
        search = search.with_language(language)
    search = search.with_passengers(
        [PassengerType.ADULT] * adults + [PassengerType.CHILD] * children
    )
    if no_cache:
        search = search.without_cache()
    return search


def _run_settings(language: str | None, *, fresh_cookies: bool) -> FlightSettings:
    """Settings for this run, with newly minted consent cookies if asked."""
    if not fresh_cookies:
        return settings
    locale = (language or settings.language).split("-")[0]
    cookies = {**settings.cookies, **CookieManager.generate(locale=locale)}
    return settings.model_copy(update={"cookies": cookies})


def _format_price(itinerary: Itinerary) -> str:
    return f"{itinerary.price / 100:.2f} {itinerary.currency}"


def _print_results(search: FlightSearch, itineraries: list[Itinerary]) -> None:
    route = " / ".join(
        f"{','.join(s.origins)} → {','.join(s.destinations)} on {s.date}"
        for s in search.segments
    )
    click.echo(
        f"Search: {route} | {search.cabin_class.value} | "
        f"sort {search.sort_order.value} | {search.currency} | {search.language}"
    )
    if not itineraries:
        click.echo("No flights found.")
        return
    click.echo(f"\nFound {len(itineraries)} itinerary(s):\n")
    for i, itinerary in enumerate(itineraries, 1):
        for j, f in enumerate(itinerary.flights):
            prefix = " " * 19
            if j == 0:
                prefix = f"{i:>3}. {_format_price(itinerary):>14}"
            click.echo(
                f"{prefix} | {f.code:<8} | {f.origin.code} → {f.destination.code} | "
                f"{f.departure:%Y-%m-%d %H:%M} - {f.arrival:%H:%M} | {f.operator}"
            )


@click.group()
def cli() -> None:
    """Google Flights search CLI."""


@cli.command("search")
@click.argument("origin")
@click.argument("destination")
@click.argument(
    "departure_date",
    required=False,
    type=click.DateTime(formats=["%Y-%m-%d"]),
)
@click.option("--max-stops", "-m", default=0, show_default=True, type=int)
@click.option("--airlines", "-a", default="", help="Comma-separated airline codes")
@click.option("--days", "-d", type=int, help="Add a return segment N days later")
@click.option(
    "--cabin",
    default=CabinClass.ECONOMY.value,
    type=click.Choice([c.value for c in CabinClass], case_sensitive=False),
)
@click.option(
    "--sort",
    default=SortOrder.PRICE.value,
    type=click.Choice([s.value for s in SortOrder], case_sensitive=False),
)
@click.option("--currency", help="ISO currency code (default from settings)")
@click.option("--language", help="Result language (default from settings)")
@click.option("--adults", default=1, show_default=True, type=int)
@click.option("--children", default=0, show_default=True, type=int)
@click.option("--no-cache", is_flag=True, help="Bypass cached responses")
@click.option(
    "--fresh-cookies", is_flag=True, help="Mint new consent cookies for this run"
)
@click.option("--json-output", is_flag=True, help="Output as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def search_cmd(
    origin: str,
    destination: str,
    departure_date: datetime | None,
    max_stops: int,
    airlines: str,
    days: int | None,
    cabin: str,
    sort: str,
    currency: str | None,
    language: str | None,
    adults: int,
    children: int,
    no_cache: bool,
    fresh_cookies: bool,
    json_output: bool,
    verbose: bool,
) -> None:
    """Search flights from ORIGIN to DESTINATION on DATE (default today)."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if departure_date is None:
        day = datetime.now(UTC).date()
    else:
        day = departure_date.date()

    async def _run() -> tuple[FlightSearch, list[Itinerary]]:
        service = FlightService.from_settings(
            _run_settings(language, fresh_cookies=fresh_cookies)
        )
        try:
            search = _build_search(
                service,
                origin,
                destination,
                day,
                max_stops=max_stops,
                airlines=airlines,
                days=days,
                cabin=cabin,
                sort=sort,
                currency=currency,
                language=language,
                adults=adults,
                children=children,
                no_cache=no_cache,
            )
            return search, await service.search(search)
        finally:
            await service.close()

    try:
        search, itineraries = asyncio.run(_run())
    except FlightError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if json_output:
        payload = [it.model_dump(mode="json") for it in itineraries]
        click.echo(json.dumps(payload, indent=2))
    else:
        _print_results(search, itineraries)
