"""CLI command that loads a sample catalog and a few carts."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException, DuplicateCodeError
from storefront.domain.model.product import Product
from storefront.infrastructure.bootstrap import cart_aggregator, catalog_service
from storefront.infrastructure.settings import Settings

SAMPLE_PRODUCTS = [
    {
        "title": "RGB Gaming Laptop",
        "description": "High-end gaming laptop with RGB keyboard and a dedicated RTX 4060 graphics card",
        "code": "LAP001",
        "price": "1299.99",
        "stock": 5,
        "category": "Technology",
        "thumbnails": ["laptop1.jpg", "laptop2.jpg"],
    },
    {
        "title": "Wireless Gaming Mouse",
        "description": "Wireless gaming mouse with a high-precision optical sensor and RGB lights",
        "code": "MOU001",
        "price": "79.99",
        "stock": 15,
        "category": "Accessories",
        "thumbnails": ["mouse1.jpg"],
    },
    {
        "title": "Premium Bluetooth Headphones",
        "description": "Wireless headphones with active noise cancelling and hi-fi sound",
        "code": "AUR001",
        "price": "199.99",
        "stock": 8,
        "category": "Audio",
        "thumbnails": ["headphones1.jpg", "headphones2.jpg"],
    },
    {
        "title": "RGB Mechanical Keyboard",
        "description": "Mechanical gaming keyboard with Cherry MX Blue switches and RGB backlight",
        "code": "TEC001",
        "price": "149.99",
        "stock": 12,
        "category": "Accessories",
        "thumbnails": ["keyboard1.jpg"],
    },
    {
        "title": "4K Gaming Monitor",
        "description": "27 inch 4K 144Hz gaming monitor with G-Sync",
        "code": "MON001",
        "price": "599.99",
        "stock": 3,
        "category": "Technology",
        "thumbnails": ["monitor1.jpg", "monitor2.jpg", "monitor3.jpg"],
    },
    {
        "title": "Professional HD Webcam",
        "description": "1080p webcam with autofocus and a built-in microphone",
        "code": "CAM001",
        "price": "89.99",
        "stock": 20,
        "category": "Technology",
        "thumbnails": ["webcam1.jpg"],
    },
    {
        "title": "Android Smartphone",
        "description": "Android smartphone with 128GB storage, triple camera and AMOLED display",
        "code": "TEL001",
        "price": "599.99",
        "stock": 7,
        "category": "Mobile",
        "thumbnails": ["smartphone1.jpg", "smartphone2.jpg"],
    },
    {
        "title": "Pro Gaming Tablet",
        "description": "10 inch tablet tuned for gaming with 8GB RAM",
        "code": "TAB001",
        "price": "449.99",
        "status": False,
        "stock": 0,
        "category": "Mobile",
        "thumbnails": [],
    },
    {
        "title": "Ergonomic Gaming Chair",
        "description": "Gaming chair with lumbar support, adjustable armrests and recline",
        "code": "SIL001",
        "price": "299.99",
        "stock": 6,
        "category": "Furniture",
        "thumbnails": ["chair1.jpg", "chair2.jpg"],
    },
    {
        "title": "1TB SSD",
        "description": "1TB NVMe solid state drive with 3500 MB/s reads",
        "code": "SSD001",
        "price": "129.99",
        "stock": 25,
        "category": "Technology",
        "thumbnails": ["ssd1.jpg"],
    },
]

# Sample carts as (index into the products created this run, quantity) rows.
SAMPLE_CARTS = [
    [(0, 2), (1, 1), (2, 1)],
    [(3, 1), (4, 1)],
    [],
]


@click.command("seed")
@click.option("--carts/--no-carts", default=True, show_default=True,
              help="Also create sample carts from the products created this run.")
@click.pass_obj
def seed(settings: Settings, carts: bool) -> None:
    """Load the sample catalog, skipping codes that already exist."""
    catalog = catalog_service(settings)

    created: list[Product] = []
    skipped = 0
    for data in SAMPLE_PRODUCTS:
        try:
            created.append(catalog.create(data))
        except DuplicateCodeError:
            skipped += 1
            click.echo(f"Skipped '{data['title']}' (code {data['code']} already exists)")
            continue
        click.echo(f"Created product #{created[-1].id} '{created[-1].title}'")

    click.echo(f"{len(created)} products created, {skipped} skipped.")

    needed = max(index for rows in SAMPLE_CARTS for index, _ in rows) + 1
    if not carts or len(created) < needed:
        return

    aggregator = cart_aggregator(settings)
    try:
        for rows in SAMPLE_CARTS:
            cart = aggregator.create_cart()
            for index, quantity in rows:
                aggregator.add_item(cart.id, created[index].id, quantity)
            click.echo(f"Cart #{cart.id} created with {len(rows)} products.")
    except DomainException as exc:
        raise click.ClickException(str(exc))
