"""Favorites aggregate with its commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, List
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.aggregate
class Favorites:
    """Products a user has saved, in the order they were saved."""

    user_id = Identifier(required=True, unique=True)
    product_ids = List(Identifier(), default=list)

    def contains(self, product_id) -> bool:
        return str(product_id) in {str(pid) for pid in self.product_ids}

    def add(self, product_id):
        from storefront.shopping.events import FavoriteAdded

        if self.contains(product_id):
            raise ValidationError({"product_id": ["Product already in favorites"]})

        self.product_ids = [*self.product_ids, str(product_id)]
        self.raise_(FavoriteAdded(user_id=self.user_id, product_id=product_id))

    def remove(self, product_id):
        from storefront.shopping.events import FavoriteRemoved

        if not self.contains(product_id):
            return

        self.product_ids = [pid for pid in self.product_ids if str(pid) != str(product_id)]
        self.raise_(FavoriteRemoved(user_id=self.user_id, product_id=product_id))


@storefront.repository(part_of=Favorites)
class FavoritesRepository:
    def for_user(self, user_id) -> Favorites | None:
        return self._dao.query.filter(user_id=str(user_id)).all().first


@storefront.command(part_of="Favorites")
class OpenFavorites:
    user_id = Identifier(required=True)


@storefront.command(part_of="Favorites")
class AddFavorite:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Favorites")
class RemoveFavorite:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Favorites)
class FavoritesHandler:
    @handle(OpenFavorites)
    def open_favorites(self, command):
        repo = current_domain.repository_for(Favorites)
        favorites = repo.for_user(command.user_id)
        if favorites is None:
            favorites = Favorites(user_id=command.user_id)
            repo.add(favorites)
        return str(favorites.id)

    @handle(AddFavorite)
    def add_favorite(self, command):
        # Raises when the product does not exist
        current_domain.repository_for(Product).fetch(command.product_id)

        repo = current_domain.repository_for(Favorites)
        favorites = repo.for_user(command.user_id) or Favorites(user_id=command.user_id)
        favorites.add(command.product_id)
        repo.add(favorites)

    @handle(RemoveFavorite)
    def remove_favorite(self, command):
        repo = current_domain.repository_for(Favorites)
        favorites = repo.for_user(command.user_id)
        if favorites is None:
            raise ObjectNotFoundError("Favorites not found")

        favorites.remove(command.product_id)
        repo.add(favorites)
