"""CLI commands for the Product aggregate."""

from __future__ import annotations

import json

import click

from storefront.application import envelope
from storefront.application.dto import ProductDTO
from storefront.domain.exceptions import DomainException
from storefront.domain.model.product import Product
from storefront.infrastructure.bootstrap import catalog_service
from storefront.infrastructure.settings import Settings

_BOOL_CHOICE = click.Choice(["true", "false"])


def _display_product(product: Product) -> None:
    click.echo(f"Product #{product.id}  [{product.code}]  {product.title}")
    click.echo(f"  Category:    {product.category}")
    click.echo(f"  Price:       {product.price}")
    click.echo(f"  Stock:       {product.stock}")
    click.echo(f"  Status:      {'active' if product.status else 'disabled'}")
    click.echo(f"  Available:   {'yes' if product.available else 'no'}")
    click.echo(f"  Description: {product.description}")
    for thumb in product.thumbnails:
        click.echo(f"  Thumbnail:   {thumb}")


@click.command("add")
@click.option("--title", required=True, help="Product title.")
@click.option("--description", required=True, help="Product description.")
@click.option("--code", required=True, help="Unique product code.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", required=True, type=int, help="Units in stock.")
@click.option("--category", required=True, help="Category name.")
@click.option("--status/--disabled", default=True, help="Whether the product is on sale.")
@click.option("--thumbnail", "thumbnails", multiple=True, help="Thumbnail URL (repeatable).")
@click.pass_obj
def product_add(
    settings: Settings,
    title: str,
    description: str,
    code: str,
    price: str,
    stock: int,
    category: str,
    status: bool,
    thumbnails: tuple[str, ...],
) -> None:
    """Add a new product to the catalog."""
    service = catalog_service(settings)

    try:
        product = service.create(
            {
                "title": title,
                "description": description,
                "code": code,
                "price": price,
                "stock": stock,
                "category": category,
                "status": status,
                "thumbnails": list(thumbnails),
            }
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.title}' added at {product.price}")


@click.command("list")
@click.option("--limit", type=int, default=10, show_default=True, help="Page size.")
@click.option("--page", type=int, default=1, show_default=True, help="Page number.")
@click.option("--sort", type=click.Choice(["asc", "desc"]), default=None, help="Sort by price.")
@click.option("--query", default=None, help="Text to look for in title, description or category.")
@click.option("--category", default=None, help="Category filter.")
@click.option("--status", type=_BOOL_CHOICE, default=None, help="Status filter.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the raw result envelope.")
@click.pass_obj
def product_list(
    settings: Settings,
    limit: int,
    page: int,
    sort: str | None,
    query: str | None,
    category: str | None,
    status: str | None,
    as_json: bool,
) -> None:
    """List products with filters, sorting and pagination."""
    options = {"limit": limit, "page": page, "sort": sort, "query": query, "category": category}
    if status is not None:
        options["status"] = status
    result = catalog_service(settings).list_products(options)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return
    if result["status"] == "error":
        raise click.ClickException(result["message"])

    products = result["payload"]
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Code':<12} {'Title':<30} {'Category':<15} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 84)
    for p in products:
        click.echo(
            f"{p['id']:<6} {p['code']:<12} {p['title'][:30]:<30} "
            f"{p['category'][:15]:<15} {p['price']:>10} {p['stock']:>6}"
        )
    click.echo()
    click.echo(f"Page {result['page']} of {result['totalPages']}")
    if result["prevLink"]:
        click.echo(f"  prev: {result['prevLink']}")
    if result["nextLink"]:
        click.echo(f"  next: {result['nextLink']}")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result envelope.")
@click.pass_obj
def product_show(settings: Settings, product_id: str, as_json: bool) -> None:
    """Show a single product."""
    try:
        product = catalog_service(settings).get(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if as_json:
        payload = ProductDTO.from_product(product).to_dict()
        click.echo(json.dumps(envelope.success(payload), indent=2))
    else:
        _display_product(product)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--title", default=None)
@click.option("--description", default=None)
@click.option("--code", default=None)
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--stock", type=int, default=None)
@click.option("--category", default=None)
@click.option("--status", type=_BOOL_CHOICE, default=None)
@click.pass_obj
def product_update(settings: Settings, product_id: str, **fields) -> None:
    """Update selected fields of a product."""
    patch = {name: value for name, value in fields.items() if value is not None}
    if "status" in patch:
        patch["status"] = patch["status"] == "true"
    if not patch:
        raise click.UsageError("Nothing to update.")

    try:
        product = catalog_service(settings).update(product_id, patch)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} updated ({', '.join(sorted(patch))})")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_delete(settings: Settings, product_id: str) -> None:
    """Delete a product. Carts referencing it are left untouched."""
    try:
        removed = catalog_service(settings).delete(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{removed.id} '{removed.title}' deleted.")


@click.command("reduce-stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to take out of stock.")
@click.pass_obj
def product_reduce_stock(settings: Settings, product_id: str, quantity: int) -> None:
    """Take units out of a product's stock."""
    try:
        product = catalog_service(settings).reduce_stock(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} stock is now {product.stock}")
