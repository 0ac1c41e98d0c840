"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import json

import click

from storefront.application import envelope
from storefront.application.dto import CartDTO, CartItemSpec
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import cart_aggregator
from storefront.infrastructure.settings import Settings


def _parse_items(raw: str) -> list[CartItemSpec]:
    """Parse '3:2,7:1' (product id : quantity) into CartItemSpec list."""
    specs: list[CartItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(CartItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_cart(dto: CartDTO) -> None:
    """Shared formatting for displaying a cart."""
    click.echo(f"Cart #{dto.id}")
    if not dto.items:
        click.echo("  (empty)")
        return

    click.echo(f"  {'Product':<30} {'Qty':>5} {'Price':>10}")
    click.echo(f"  {'-'*47}")
    for line in dto.items:
        if line.product is None:
            click.echo(f"  {'(deleted #' + line.product_id + ')':<30} {line.quantity:>5} {'-':>10}")
        else:
            click.echo(
                f"  {line.product.title[:30]:<30} {line.quantity:>5} {line.product.price:>10}"
            )
    click.echo(f"  {'-'*47}")


def _run(action, as_json: bool = False) -> None:
    """Run a cart action, translating domain errors and printing the cart."""
    try:
        dto = action()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if as_json:
        click.echo(json.dumps(envelope.success(dto.to_dict()), indent=2))
    else:
        _display_cart(dto)


@click.command("create")
@click.pass_obj
def cart_create(settings: Settings) -> None:
    """Create a new, empty cart."""
    dto = cart_aggregator(settings).create_cart()
    click.echo(f"Cart #{dto.id} created.")


@click.command("list")
@click.pass_obj
def cart_list(settings: Settings) -> None:
    """List every cart with its contents."""
    carts = cart_aggregator(settings).list_carts()
    if not carts:
        click.echo("No carts found.")
        return
    for dto in carts:
        _display_cart(dto)


@click.command("show")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result envelope.")
@click.pass_obj
def cart_show(settings: Settings, cart_id: str, as_json: bool) -> None:
    """Show a cart with product details."""
    _run(lambda: cart_aggregator(settings).get_cart(cart_id), as_json)


@click.command("add")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", type=int, default=1, show_default=True, help="Units to add.")
@click.pass_obj
def cart_add(settings: Settings, cart_id: str, product_id: str, quantity: int) -> None:
    """Add units of a product to a cart."""
    _run(lambda: cart_aggregator(settings).add_item(cart_id, product_id, quantity))


@click.command("remove")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.pass_obj
def cart_remove(settings: Settings, cart_id: str, product_id: str) -> None:
    """Remove a product from a cart."""
    _run(lambda: cart_aggregator(settings).remove_item(cart_id, product_id))


@click.command("set-quantity")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", type=int, required=True, help="New quantity (0 removes the row).")
@click.pass_obj
def cart_set_quantity(settings: Settings, cart_id: str, product_id: str, quantity: int) -> None:
    """Set the quantity of a product already in a cart."""
    _run(
        lambda: cart_aggregator(settings).update_item_quantity(cart_id, product_id, quantity)
    )


@click.command("replace")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.pass_obj
def cart_replace(settings: Settings, cart_id: str, items: str) -> None:
    """Replace the whole contents of a cart."""
    specs = _parse_items(items)
    _run(lambda: cart_aggregator(settings).replace_items(cart_id, specs))


@click.command("clear")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.pass_obj
def cart_clear(settings: Settings, cart_id: str) -> None:
    """Empty a cart."""
    _run(lambda: cart_aggregator(settings).clear(cart_id))


@click.command("total")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.pass_obj
def cart_total(settings: Settings, cart_id: str) -> None:
    """Show a cart's total price and item counts."""
    try:
        totals = cart_aggregator(settings).compute_total(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart #{totals.cart_id}")
    click.echo(f"  Total:        ${totals.total}")
    click.echo(f"  Units:        {totals.total_item_count}")
    click.echo(f"  Distinct:     {totals.unique_item_count}")


@click.command("validate")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.pass_obj
def cart_validate(settings: Settings, cart_id: str) -> None:
    """Check that every product in a cart can still be bought."""
    try:
        report = cart_aggregator(settings).validate_availability(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if report.is_valid:
        click.echo(f"Cart #{cart_id} is valid.")
        return

    click.echo(f"Cart #{cart_id} has unavailable items:")
    for item in report.unavailable_items:
        title = item.product_title or f"(deleted #{item.product_id})"
        click.echo(
            f"  {title}: requested {item.requested}, available {item.available}"
            f"{'' if item.status else ' (disabled)'}"
        )
    raise click.exceptions.Exit(1)


@click.command("delete")
@click.option("--id", "cart_id", required=True, help="Cart ID.")
@click.pass_obj
def cart_delete(settings: Settings, cart_id: str) -> None:
    """Delete a cart."""
    try:
        cart_aggregator(settings).delete_cart(cart_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart #{cart_id} deleted.")
