"""CLI commands for business locations."""

from __future__ import annotations

import click

from foodshare.application.add_location import AddLocationHandler
from foodshare.application.archive_location import ArchiveLocationHandler
from foodshare.application.delete_location import DeleteLocationHandler
from foodshare.application.list_locations import ListLocationsHandler
from foodshare.application.result import execute
from foodshare.infrastructure.bootstrap import locks, unit_of_work_factory


@click.command("add")
@click.option("--business", "business_id", required=True, help="Owning business ID.")
@click.option("--name", required=True, help="Location name.")
@click.option("--address", required=True, help="Street address (already geocoded).")
@click.option(
    "--pickup-point", "pickup_points", multiple=True, required=True,
    help="Pickup point name; repeat for several. The first is the default.",
)
def location_add(business_id: str, name: str, address: str, pickup_points: tuple[str, ...]) -> None:
    """Register a location with its pickup points."""
    handler = AddLocationHandler(uow_factory=unit_of_work_factory())
    result = execute(
        handler.handle,
        business_id=business_id,
        name=name,
        address=address,
        pickup_point_names=list(pickup_points),
    )
    if not result.success:
        raise click.ClickException(result.message)

    dto = result.value
    click.echo(f"Location {dto.id} '{dto.name}' added")
    for pp in dto.pickup_points:
        marker = " (default)" if pp.is_default else ""
        click.echo(f"  pickup point {pp.id}  {pp.name}{marker}")


@click.command("list")
@click.option("--business", "business_id", required=True, help="Business ID.")
@click.option("--include-archived", is_flag=True, default=False, help="Show archived locations too.")
def location_list(business_id: str, include_archived: bool) -> None:
    """List a business's locations."""
    handler = ListLocationsHandler(uow_factory=unit_of_work_factory())
    locations = handler.handle(business_id, include_archived=include_archived)

    if not locations:
        click.echo("No locations found.")
        return

    click.echo(f"{'ID':<38} {'Name':<20} {'Pickup points':>14} {'Archived':>9}")
    click.echo("-" * 84)
    for loc in locations:
        click.echo(
            f"{loc.id:<38} {loc.name:<20} {len(loc.pickup_points):>14} "
            f"{'yes' if loc.archived else 'no':>9}"
        )


@click.command("archive")
@click.option("--business", "business_id", required=True, help="Owning business ID.")
@click.option("--id", "location_id", required=True, help="Location ID to archive.")
def location_archive(business_id: str, location_id: str) -> None:
    """Archive a location (all its items must be archived first)."""
    handler = ArchiveLocationHandler(uow_factory=unit_of_work_factory(), locks=locks())
    result = execute(handler.handle, business_id=business_id, location_id=location_id)
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(f"Location {location_id} archived.")


@click.command("delete")
@click.option("--business", "business_id", required=True, help="Owning business ID.")
@click.option("--id", "location_id", required=True, help="Location ID to delete.")
def location_delete(business_id: str, location_id: str) -> None:
    """Permanently delete a location that never had inventory."""
    handler = DeleteLocationHandler(uow_factory=unit_of_work_factory(), locks=locks())
    result = execute(handler.handle, business_id=business_id, location_id=location_id)
    if not result.success:
        raise click.ClickException(result.message)

    click.echo(f"Location {location_id} deleted.")
