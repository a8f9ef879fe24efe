"""Product creation: command and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import logger, storefront


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=200)
    description: Text(required=True)
    brand: String(max_length=100)
    category_id: Identifier()
    gender: String(max_length=10)
    price: Float(required=True, min_value=0.0)
    discount_price: Float(min_value=0.0)
    images: Text()  # JSON: list of image URLs
    sizes: Text()  # JSON: list of {size, stock}
    colors: Text()  # JSON: list of {name, hex}
    is_featured: Boolean(default=False)


def _decode(value):
    if value is None:
        return []
    return json.loads(value) if isinstance(value, str) else value


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        if command.category_id:
            try:
                current_domain.repository_for(Category).get(command.category_id)
            except ObjectNotFoundError as exc:
                raise ObjectNotFoundError("Category not found") from exc

        options = {}
        if command.gender:
            options["gender"] = command.gender

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            discount_price=command.discount_price,
            brand=command.brand,
            category_id=command.category_id,
            images=_decode(command.images),
            sizes=_decode(command.sizes),
            colors=_decode(command.colors),
            is_featured=bool(command.is_featured),
            **options,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id), total_stock=product.total_stock)
        return str(product.id)
