"""Category aggregate: gendered, two-level product taxonomy."""

import re
from enum import Enum

from protean import handle, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class CategoryGender(Enum):
    MALE = "male"
    FEMALE = "female"
    UNISEX = "unisex"


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


@storefront.aggregate
class Category:
    """A node in the catalogue taxonomy.

    Main categories have no parent; subcategories point at a main category
    of the same gender.
    """

    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120, unique=True)
    gender: String(required=True, choices=CategoryGender)
    parent_id: Identifier()
    image: String(max_length=500)
    is_active: Boolean(default=True)

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and not _SLUG_RE.match(self.slug):
            raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and hyphens"]})

    @property
    def is_main(self) -> bool:
        return self.parent_id is None


@storefront.repository(part_of=Category)
class CategoryRepository:
    def find_by_slug(self, slug: str, active_only: bool = True) -> Category | None:
        query = self._dao.query.filter(slug=slug)
        if active_only:
            query = query.filter(is_active=True)
        return query.all().first

    def active(self, gender: str | None = None) -> list[Category]:
        query = self._dao.query.filter(is_active=True)
        if gender:
            query = query.filter(gender=gender)
        return query.order_by(["gender", "name"]).limit(None).all().items

    def children_of(self, category_id) -> list[Category]:
        return self._dao.query.filter(parent_id=str(category_id), is_active=True).order_by("name").limit(None).all().items


def organize(categories: list[Category]) -> dict:
    """Group categories by gender, then into main categories and subcategories keyed by parent slug."""
    by_id = {str(c.id): c for c in categories}
    organized = {gender.value: {"main": [], "subcategories": {}} for gender in CategoryGender}

    for category in categories:
        bucket = organized[category.gender]
        if category.is_main:
            bucket["main"].append(category)
            continue

        parent = by_id.get(str(category.parent_id))
        parent_slug = parent.slug if parent else str(category.parent_id)
        bucket["subcategories"].setdefault(parent_slug, []).append(category)

    return organized


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    slug: String(max_length=120)
    gender: String(required=True, max_length=10)
    parent_id: Identifier()
    image: String(max_length=500)


@storefront.command_handler(part_of=Category)
class CreateCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        slug = command.slug or slugify(command.name)
        if repo.find_by_slug(slug, active_only=False) is not None:
            raise ValidationError({"slug": ["Category with this slug already exists"]})

        if command.parent_id:
            try:
                parent = repo.get(command.parent_id)
            except ObjectNotFoundError as exc:
                raise ObjectNotFoundError("Parent category not found") from exc
            if not parent.is_main:
                raise ValidationError({"parent_id": ["Subcategories cannot have subcategories"]})

        category = Category(
            name=command.name,
            slug=slug,
            gender=command.gender,
            parent_id=command.parent_id,
            image=command.image,
        )
        repo.add(category)
        logger.info("category_created", category_id=str(category.id), slug=slug)
        return str(category.id)
