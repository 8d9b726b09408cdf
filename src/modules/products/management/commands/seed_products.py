from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand

from modules.products.dtos import CreateProductDTO
from modules.products.exceptions import ProductAlreadyExists
from modules.products.models import Product
from modules.products.repositories import (
    ProductDjangoRepository,
    ProductImageDjangoRepository,
)
from modules.products.services import ProductService

SEED_PRODUCTS = [
    {
        "title": "Men's Chill Crew Neck Sweatshirt",
        "price": Decimal("75.00"),
        "description": "Soft fleece crew neck sweatshirt with a relaxed fit.",
        "stock": 7,
        "sizes": ["XS", "S", "M", "L", "XL", "XXL"],
        "gender": "men",
        "tags": ["sweatshirt"],
        "images": ["1740176-00-A_0_2000.jpg", "1740176-00-A_1.jpg"],
    },
    {
        "title": "Men's Quilted Shirt Jacket",
        "price": Decimal("200.00"),
        "description": "Lightweight quilted jacket for cool days.",
        "stock": 5,
        "sizes": ["XS", "S", "M", "XL", "XXL"],
        "gender": "men",
        "tags": ["jacket"],
        "images": ["1740507-00-A_0_2000.jpg", "1740507-00-A_1.jpg"],
    },
    {
        "title": "Women's Cropped Puffer Jacket",
        "price": Decimal("225.00"),
        "description": "Cropped puffer with a boxy silhouette.",
        "stock": 85,
        "sizes": ["XS", "S", "M"],
        "gender": "women",
        "tags": ["hoodie"],
        "images": ["1740535-00-A_0_2000.jpg", "1740535-00-A_1.jpg"],
    },
    {
        "title": "Kids Cybertruck Long Sleeve Tee",
        "price": Decimal("30.00"),
        "description": "Long sleeve cotton tee with a printed graphic.",
        "stock": 10,
        "sizes": ["XS", "S", "M"],
        "gender": "kid",
        "tags": ["shirt"],
        "images": ["1742694-00-A_1_2000.jpg", "1742694-00-A_3.jpg"],
    },
    {
        "title": "Unisex Raven Lightweight Hoodie",
        "price": Decimal("115.00"),
        "description": "Lightweight pullover hoodie in premium cotton.",
        "stock": 10,
        "sizes": ["XS", "S", "M", "L", "XL", "XXL"],
        "gender": "unisex",
        "tags": ["hoodie"],
        "images": ["1740245-00-A_0_2000.jpg", "1740245-00-A_1.jpg"],
    },
]


class Command(BaseCommand):
    help = "Seed the catalog with demo products and their images."

    def add_arguments(self, parser):
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete every product (and its images) before seeding.",
        )

    def handle(self, *args, **options):
        if options["clear"]:
            deleted, _ = Product.objects.all().delete()
            self.stdout.write(f"Deleted {deleted} rows.")

        service = ProductService(
            product_repository=ProductDjangoRepository(),
            image_repository=ProductImageDjangoRepository(),
        )

        created = 0
        skipped = 0
        for data in SEED_PRODUCTS:
            try:
                service.create_product(CreateProductDTO(**data))
            except ProductAlreadyExists:
                skipped += 1
                continue
            created += 1

        self.stdout.write(
            self.style.SUCCESS(f"Seed completed: created={created}, skipped={skipped}")
        )
