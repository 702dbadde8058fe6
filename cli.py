"""CLI commands for the event logistics service."""

import asyncio
from datetime import UTC, datetime, timedelta
from uuid import UUID

import typer

from src.budget.dtos import PricingType
from src.budget.repository.write_models import SqlRequestWriteModel
from src.config.database import async_session_manager
from src.config.logging import setup_logging
from src.guests.dtos import GuestStatus, RegistrationSource
from src.guests.repository.write_models import SqlGuestWriteModel
from src.inventory.dtos import InventoryType, UtilizationSeverity
from src.inventory.repository.read_models import SqlInventoryReadModel
from src.models.registry import (
    Event,
    Guest,
    ItinerarySession,
    Perk,
    ResourcePool,
    Tier,
    TierPerk,
)

app = typer.Typer(help="CLI commands for event logistics")

SEVERITY_COLORS = {
    UtilizationSeverity.OK: typer.colors.GREEN,
    UtilizationSeverity.WARNING: typer.colors.YELLOW,
    UtilizationSeverity.CRITICAL: typer.colors.RED,
}


async def _seed_demo(event_code: str) -> tuple[Event, list[Guest]]:
    """Async helper to create a demo event with tiers, blocks, perks and sessions."""
    event_date = datetime.now(UTC).replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=60)

    async with async_session_manager() as session:
        event = Event(
            name="Demo Destination Wedding",
            date=event_date,
            location="Udaipur",
            timezone="Asia/Kolkata",
            event_code=event_code,
        )
        session.add(event)
        await session.flush()

        vip = Tier(event_id=event.uuid, name="VIP", add_on_budget=10000)
        family = Tier(event_id=event.uuid, name="Close Family", add_on_budget=5000)
        friends = Tier(event_id=event.uuid, name="Friends", add_on_budget=0)
        session.add_all([vip, family, friends])
        session.add_all(
            [
                ResourcePool(event_id=event.uuid, name="Taj Lake Palace", is_primary=True, blocked=3),
                ResourcePool(
                    event_id=event.uuid,
                    name="AI 471 BOM-UDR",
                    inventory_type=InventoryType.FLIGHT,
                    blocked=40,
                ),
            ]
        )
        await session.flush()

        spa = Perk(event_id=event.uuid, name="Spa session", unit_cost=3000)
        dinner = Perk(
            event_id=event.uuid, name="Welcome dinner", unit_cost=0, pricing_type=PricingType.INCLUDED
        )
        session.add_all([spa, dinner])
        await session.flush()
        session.add_all(
            [
                TierPerk(tier_id=vip.uuid, perk_id=spa.uuid, agent_override=True),
                TierPerk(tier_id=family.uuid, perk_id=spa.uuid, budget_consumed=2500),
            ]
        )

        session.add_all(
            [
                ItinerarySession(
                    event_id=event.uuid,
                    title="Welcome dinner",
                    start_time=event_date.replace(hour=19),
                    end_time=event_date.replace(hour=22),
                    is_mandatory=True,
                ),
                ItinerarySession(
                    event_id=event.uuid,
                    title="City palace tour",
                    start_time=event_date.replace(hour=10),
                    end_time=event_date.replace(hour=12),
                    capacity=20,
                ),
                ItinerarySession(
                    event_id=event.uuid,
                    title="Cooking workshop",
                    start_time=event_date.replace(hour=11),
                    end_time=event_date.replace(hour=13),
                    capacity=8,
                ),
            ]
        )

        guests = [
            Guest(event_id=event.uuid, label_id=vip.uuid, name="Asha Rao", allocated_seats=2),
            Guest(event_id=event.uuid, label_id=family.uuid, name="Vikram Shah", allocated_seats=2),
            Guest(event_id=event.uuid, label_id=friends.uuid, name="Meera Iyer"),
            Guest(event_id=event.uuid, label_id=friends.uuid, name="Kabir Mehta"),
        ]
        session.add_all(guests)
        await session.flush()

    return event, guests


@app.command()
def seed_demo(
    event_code: str = typer.Option(
        "DEMO-WEDDING",
        "--event-code",
        "-c",
        help="Unique code of the demo event",
    ),
):
    """Create a demo event: three tiers, a 3-room hotel block, a flight block, perks and sessions."""
    event, guests = asyncio.run(_seed_demo(event_code))

    typer.secho("Demo event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {event.uuid}", fg=typer.colors.CYAN)
    typer.secho(f"  Event code: {event.event_code}", fg=typer.colors.BLUE)
    typer.echo()
    typer.secho("Guests:", fg=typer.colors.GREEN)
    for guest in guests:
        typer.secho(f"  - {guest.name} ({guest.allocated_seats} seats): {guest.uuid}", fg=typer.colors.BLUE)


@app.command()
def inventory_status(
    event_id: str = typer.Argument(
        ...,
        help="Event UUID",
    ),
):
    """Show utilization and early warnings of every block of an event."""
    pools = asyncio.run(SqlInventoryReadModel().get_inventory_status(UUID(event_id)))

    if not pools:
        typer.secho("No inventory blocks for this event", fg=typer.colors.YELLOW)
        return
    for pool in pools:
        typer.secho(f"{pool.name}", fg=typer.colors.GREEN)
        typer.secho(
            f"  {pool.confirmed}/{pool.blocked} confirmed ({pool.utilization_pct}%), "
            f"{pool.waitlisted} waitlisted",
            fg=typer.colors.BLUE,
        )
        typer.secho(f"  {pool.message}", fg=SEVERITY_COLORS[pool.severity])


@app.command()
def check_in(
    guest_id: str = typer.Argument(
        ...,
        help="Guest UUID",
    ),
):
    """Mark a confirmed guest as arrived."""
    try:
        result = asyncio.run(SqlGuestWriteModel().check_in(UUID(guest_id)))
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    if not result.ok:
        typer.secho(f"Check-in refused: {result.error}", fg=typer.colors.RED)
        raise typer.Exit(1)
    typer.secho(f"{result.value.name} checked in!", fg=typer.colors.GREEN)
    typer.secho(f"  Seats: {result.value.confirmed_seats}", fg=typer.colors.BLUE)


@app.command()
def walk_in(
    event_id: str = typer.Argument(
        ...,
        help="Event UUID",
    ),
    name: str = typer.Argument(
        ...,
        help="Name of the walk-in guest",
    ),
    phone: str = typer.Option(
        None,
        "--phone",
        "-p",
        help="Phone number of the guest",
    ),
):
    """Register a guest at the door; they get a room if one is free, otherwise join the waitlist."""
    try:
        result = asyncio.run(
            SqlGuestWriteModel().register_guest(
                UUID(event_id),
                name,
                source=RegistrationSource.ON_SPOT,
                phone=phone,
            )
        )
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    if not result.ok:
        typer.secho(f"Walk-in refused: {result.error}", fg=typer.colors.RED)
        raise typer.Exit(1)
    outcome = result.value
    typer.secho("Walk-in registered!", fg=typer.colors.GREEN)
    typer.secho(f"  Guest ID: {outcome.guest.uuid}", fg=typer.colors.CYAN)
    if outcome.guest.status == GuestStatus.CONFIRMED:
        typer.secho(f"  Confirmed seats: {outcome.guest.confirmed_seats}", fg=typer.colors.BLUE)
    else:
        typer.secho(f"  Waitlist position: {outcome.waitlist_position}", fg=typer.colors.YELLOW)


@app.command()
def approve_all(
    event_id: str = typer.Argument(
        ...,
        help="Event UUID",
    ),
):
    """Approve every pending or forwarded add-on request of an event."""
    report = asyncio.run(SqlRequestWriteModel().bulk_approve(UUID(event_id))).value

    typer.secho(f"{report.approved_count} requests approved", fg=typer.colors.GREEN)
    for request_id, reason in report.failed.items():
        typer.secho(f"  {request_id}: {reason}", fg=typer.colors.RED)


if __name__ == "__main__":
    setup_logging()
    app()
