"""Product reviews: command and handler."""

from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.account.user import User
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddReview:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True, min_value=1, max_value=5)
    comment: Text()


@storefront.command_handler(part_of=Product)
class ReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.fetch(command.product_id)
        reviewer = current_domain.repository_for(User).get(command.user_id)

        review = product.add_review(
            user_id=command.user_id,
            rating=command.rating,
            comment=command.comment,
            name=reviewer.username,
        )
        repo.add(product)
        return str(review.id)
