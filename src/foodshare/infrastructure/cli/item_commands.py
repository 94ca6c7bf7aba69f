"""CLI commands for the FoodItem aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from foodshare.application.add_food_item import AddFoodItemHandler
from foodshare.application.archive_food_item import ArchiveFoodItemHandler
from foodshare.application.delete_food_item import DeleteFoodItemHandler
from foodshare.application.list_food_items import ListFoodItemsHandler
from foodshare.application.result import execute
from foodshare.application.update_food_item import UpdateFoodItemHandler
from foodshare.domain.exceptions import DomainException
from foodshare.infrastructure.bootstrap import locks, unit_of_work_factory


def _as_date(value: datetime | None):
    return value.date() if value is not None else None


@click.command("add")
@click.option("--business", "business_id", required=True, help="Owning business ID.")
@click.option("--location", "location_id", required=True, help="Location ID.")
@click.option("--description", required=True, help="What is being offered.")
@click.option("--quantity", required=True, help="Total quantity, e.g. 12 or 2.5.")
@click.option("--unit", "unit_label", required=True, help="Unit label, e.g. kg or boxes.")
@click.option("--pickup-point", "pickup_point_id", default=None, help="Pickup point ID (defaults to the location's default).")
@click.option("--best-before", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Best-before date (YYYY-MM-DD).")
@click.option("--tag", "tags", multiple=True, help="Dietary restriction tag; repeat for several.")
def item_add(
    business_id: str,
    location_id: str,
    description: str,
    quantity: str,
    unit_label: str,
    pickup_point_id: str | None,
    best_before: datetime | None,
    tags: tuple[str, ...],
) -> None:
    """List surplus food at a location."""
    handler = AddFoodItemHandler(uow_factory=unit_of_work_factory(), locks=locks())
    result = execute(
        handler.handle,
        business_id=business_id,
        location_id=location_id,
        description=description,
        total_quantity=quantity,
        unit_label=unit_label,
        pickup_point_id=pickup_point_id,
        best_before=_as_date(best_before),
        dietary_restrictions=list(tags),
    )
    if not result.success:
        raise click.ClickException(result.message)

    dto = result.value
    click.echo(f"Food item {dto.id} '{dto.description}' listed: {dto.total} {dto.unit_label}")


@click.command("update")
@click.option("--business", "business_id", required=True, help="Owning business ID.")
@click.option("--location", "location_id", required=True, help="Location ID.")
@click.option("--id", "food_item_id", required=True, help="Food item ID.")
@click.option("--quantity", default=None, help="New total quantity.")
@click.option("--description", default=None, help="New description.")
@click.option("--unit", "unit_label", default=None, help="New unit label.")
@click.option("--pickup-point", "pickup_point_id", default=None, help="Move to this pickup point.")
@click.option("--best-before", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="New best-before date.")
@click.option("--clear-best-before", is_flag=True, default=False, help="Remove the best-before date.")
@click.option("--tag", "tags", multiple=True, help="Replace dietary restriction tags.")
def item_update(
    business_id: str,
    location_id: str,
    food_item_id: str,
    quantity: str | None,
    description: str | None,
    unit_label: str | None,
    pickup_point_id: str | None,
    best_before: datetime | None,
    clear_best_before: bool,
    tags: tuple[str, ...],
) -> None:
    """Edit a listed food item (a new quantity keeps existing reservations)."""
    handler = UpdateFoodItemHandler(uow_factory=unit_of_work_factory(), locks=locks())
    result = execute(
        handler.handle,
        business_id=business_id,
        location_id=location_id,
        food_item_id=food_item_id,
        total_quantity=quantity,
        description=description,
        unit_label=unit_label,
        best_before=_as_date(best_before),
        clear_best_before=clear_best_before,
        dietary_restrictions=list(tags) if tags else None,
        pickup_point_id=pickup_point_id,
    )
    if not result.success:
        raise click.ClickException(result.message)

    dto = result.value
    click.echo(
        f"Food item {dto.id} updated: total={dto.total} "
        f"available={dto.available} reserved={dto.reserved}"
    )


@click.command("list")
@click.option("--location", "location_id", required=True, help="Location ID.")
@click.option("--include-archived", is_flag=True, default=False, help="Show archived items too.")
def item_list(location_id: str, include_archived: bool) -> None:
    """Show the food listed at a location."""
    handler = ListFoodItemsHandler(uow_factory=unit_of_work_factory())

    try:
        items = handler.handle(location_id, include_archived=include_archived)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not items:
        click.echo("No food items found.")
        return

    click.echo(
        f"{'ID':<38} {'Description':<20} {'Unit':<8} "
        f"{'Total':>8} {'Reserved':>10} {'Available':>10}"
    )
    click.echo("-" * 99)
    for fi in items:
        suffix = "  [archived]" if fi.archived else ""
        click.echo(
            f"{fi.id:<38} {fi.description:<20} {fi.unit_label:<8} "
            f"{fi.total:>8} {fi.reserved:>10} {fi.available:>10}{suffix}"
        )


@click.command("archive")
@click.option("--business", "business_id", required=True, help="Owning business ID.")
@click.option("--location", "location_id", required=True, help="Location ID.")
@click.option("--id", "food_item_id", required=True, help="Food item ID.")
def item_archive(business_id: str, location_id: str, food_item_id: str) -> None:
    """Archive a food item (no active reservations allowed)."""
    handler = ArchiveFoodItemHandler(uow_factory=unit_of_work_factory(), locks=locks())
    result = execute(
        handler.handle,
        business_id=business_id,
        location_id=location_id,
        food_item_id=food_item_id,
    )
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(f"Food item {food_item_id} archived.")


@click.command("delete")
@click.option("--business", "business_id", required=True, help="Owning business ID.")
@click.option("--location", "location_id", required=True, help="Location ID.")
@click.option("--id", "food_item_id", required=True, help="Food item ID.")
def item_delete(business_id: str, location_id: str, food_item_id: str) -> None:
    """Permanently delete a food item that was never reserved."""
    handler = DeleteFoodItemHandler(uow_factory=unit_of_work_factory(), locks=locks())
    result = execute(
        handler.handle,
        business_id=business_id,
        location_id=location_id,
        food_item_id=food_item_id,
    )
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(f"Food item {food_item_id} deleted.")
