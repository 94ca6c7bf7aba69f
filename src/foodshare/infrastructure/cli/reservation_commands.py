"""CLI commands for the Reservation aggregate."""

from __future__ import annotations

import time

import click

from foodshare.application.cancel_reservation import CancelReservationHandler
from foodshare.application.create_reservation import CreateReservationHandler
from foodshare.application.dto import ReservationDTO, ReservationItemSpec
from foodshare.application.expire_reservations import ExpireReservationsHandler
from foodshare.application.list_reservations import ListReservationsHandler
from foodshare.application.pick_up_reservation import PickUpReservationHandler
from foodshare.application.result import execute
from foodshare.infrastructure.bootstrap import clock, locks, unit_of_work_factory
from foodshare.infrastructure.config import get_settings


def _parse_items(raw: str) -> list[ReservationItemSpec]:
    """Parse 'item-id:3,other-id:1.5' into ReservationItemSpec list."""
    specs: list[ReservationItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'FoodItemId:Quantity'."
            )
        food_item_id, qty = pair.rsplit(":", 1)
        specs.append(ReservationItemSpec(food_item_id=food_item_id.strip(), quantity=qty.strip()))
    return specs


def _display_reservation(dto: ReservationDTO) -> None:
    """Shared formatting for displaying a reservation."""
    click.echo(f"Reservation {dto.id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Expires:  {dto.expires_at}")
    click.echo()
    click.echo(f"  {'Food item':<30} {'Qty':>8} {'Unit':<8}")
    click.echo(f"  {'-'*48}")
    for item in dto.items:
        label = item.description or item.food_item_id
        click.echo(f"  {label:<30} {item.quantity:>8} {item.unit_label:<8}")


@click.command("create")
@click.option("--user", "user_id", required=True, help="Reserving user ID.")
@click.option("--location", "location_id", required=True, help="Location ID.")
@click.option("--items", required=True, help="Items as 'FoodItemId:Qty,FoodItemId:Qty'.")
def reservation_create(user_id: str, location_id: str, items: str) -> None:
    """Reserve food for pickup within 24 hours."""
    specs = _parse_items(items)

    handler = CreateReservationHandler(
        uow_factory=unit_of_work_factory(),
        locks=locks(),
        clock=clock(),
    )
    result = execute(handler.handle, user_id=user_id, location_id=location_id, item_specs=specs)
    if not result.success:
        raise click.ClickException(result.message)

    _display_reservation(result.value)


@click.command("cancel")
@click.option("--user", "user_id", required=True, help="User ID that owns the reservation.")
@click.option("--id", "reservation_id", required=True, help="Reservation ID to cancel.")
def reservation_cancel(user_id: str, reservation_id: str) -> None:
    """Cancel an active reservation (returns the food to availability)."""
    handler = CancelReservationHandler(
        uow_factory=unit_of_work_factory(),
        locks=locks(),
        clock=clock(),
    )
    result = execute(handler.handle, reservation_id=reservation_id, requesting_user_id=user_id)
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(f"Reservation {reservation_id} canceled.")


@click.command("pickup")
@click.option("--business", "business_id", required=True, help="Business handing out the food.")
@click.option("--id", "reservation_id", required=True, help="Reservation ID.")
def reservation_pickup(business_id: str, reservation_id: str) -> None:
    """Record that a reservation was collected."""
    handler = PickUpReservationHandler(
        uow_factory=unit_of_work_factory(),
        locks=locks(),
        clock=clock(),
    )
    result = execute(handler.handle, reservation_id=reservation_id, business_id=business_id)
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(f"Reservation {reservation_id} picked up.")


@click.command("list")
@click.option("--user", "user_id", required=True, help="User ID.")
def reservation_list(user_id: str) -> None:
    """Show a user's reservations, newest first."""
    handler = ListReservationsHandler(
        uow_factory=unit_of_work_factory(),
        locks=locks(),
        clock=clock(),
    )
    result = execute(handler.handle, user_id)
    if not result.success:
        raise click.ClickException(result.message)

    if not result.value:
        click.echo("No reservations found.")
        return
    for dto in result.value:
        _display_reservation(dto)
        click.echo()


@click.command("sweep")
@click.option("--watch", is_flag=True, default=False, help="Keep sweeping every sweep_interval_seconds.")
def reservation_sweep(watch: bool) -> None:
    """Expire active reservations whose 24 hours have run out."""
    handler = ExpireReservationsHandler(
        uow_factory=unit_of_work_factory(),
        locks=locks(),
        clock=clock(),
    )
    interval = get_settings().sweep_interval_seconds

    while True:
        result = execute(handler.handle)
        if result.success:
            click.echo(f"Expired {len(result.value)} reservation(s).")
        elif result.retryable and watch:
            click.echo(f"Sweep failed, retrying: {result.message}", err=True)
        else:
            raise click.ClickException(result.message)

        if not watch:
            return
        time.sleep(interval)
