import click

from foodshare.infrastructure.cli.item_commands import (
    item_add,
    item_archive,
    item_delete,
    item_list,
    item_update,
)
from foodshare.infrastructure.cli.location_commands import (
    location_add,
    location_archive,
    location_delete,
    location_list,
)
from foodshare.infrastructure.cli.reservation_commands import (
    reservation_cancel,
    reservation_create,
    reservation_list,
    reservation_pickup,
    reservation_sweep,
)
from foodshare.infrastructure.config import get_settings
from foodshare.infrastructure.logging import setup_logging


@click.group()
def cli() -> None:
    """foodshare: surplus food reservations"""
    setup_logging(get_settings())


@cli.group()
def location() -> None:
    """Manage business locations."""


@cli.group()
def item() -> None:
    """Manage listed food items."""


@cli.group()
def reservation() -> None:
    """Manage reservations."""


# Register subcommands
location.add_command(location_add)
location.add_command(location_archive)
location.add_command(location_delete)
location.add_command(location_list)
item.add_command(item_add)
item.add_command(item_archive)
item.add_command(item_delete)
item.add_command(item_list)
item.add_command(item_update)
reservation.add_command(reservation_cancel)
reservation.add_command(reservation_create)
reservation.add_command(reservation_list)
reservation.add_command(reservation_pickup)
reservation.add_command(reservation_sweep)
