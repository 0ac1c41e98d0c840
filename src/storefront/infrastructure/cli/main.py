import click

from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_create,
    cart_delete,
    cart_list,
    cart_remove,
    cart_replace,
    cart_set_quantity,
    cart_show,
    cart_total,
    cart_validate,
)
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_reduce_stock,
    product_show,
    product_update,
)
from storefront.infrastructure.cli.seed_command import seed
from storefront.infrastructure.logging_setup import configure_logging
from storefront.infrastructure.settings import Settings


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront: product catalog and carts."""
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_json)
    ctx.obj = settings


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def cart() -> None:
    """Manage carts."""


# Register subcommands
cli.add_command(seed)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_reduce_stock)
product.add_command(product_show)
product.add_command(product_update)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_create)
cart.add_command(cart_delete)
cart.add_command(cart_list)
cart.add_command(cart_remove)
cart.add_command(cart_replace)
cart.add_command(cart_set_quantity)
cart.add_command(cart_show)
cart.add_command(cart_total)
cart.add_command(cart_validate)
