import pytest
from protean.exceptions import ValidationError

from storefront.catalogue.category import Category, organize, slugify


def _category(name, gender="male", parent=None, slug=None):
    return Category(name=name, slug=slug or slugify(f"{gender} {name}"), gender=gender, parent_id=parent)


class TestCategory:
    def test_main_category_has_no_parent(self):
        assert _category("Topwear").is_main is True
        assert _category("Shirts", parent="abc").is_main is False

    def test_slug_must_be_url_safe(self):
        with pytest.raises(ValidationError):
            _category("Topwear", slug="Top Wear")

    @pytest.mark.parametrize(
        "name, slug",
        [
            ("Ethnic Wear", "ethnic-wear"),
            ("T-Shirts & Polos", "t-shirts-polos"),
            ("  Jeans ", "jeans"),
        ],
    )
    def test_slugify(self, name, slug):
        assert slugify(name) == slug


class TestOrganize:
    def test_groups_by_gender_and_parent_slug(self):
        topwear = _category("Topwear")
        shirts = _category("Shirts", parent=topwear.id)
        ethnic = _category("Ethnic Wear", gender="female")
        kurtas = _category("Kurtas", gender="female", parent=ethnic.id)

        organized = organize([topwear, shirts, ethnic, kurtas])

        assert [c.name for c in organized["male"]["main"]] == ["Topwear"]
        assert [c.name for c in organized["male"]["subcategories"]["male-topwear"]] == ["Shirts"]
        assert [c.name for c in organized["female"]["subcategories"]["female-ethnic-wear"]] == ["Kurtas"]
        assert organized["unisex"] == {"main": [], "subcategories": {}}

    def test_orphan_subcategory_keyed_by_parent_id(self):
        orphan = _category("Socks", parent="gone")
        organized = organize([orphan])
        assert organized["male"]["subcategories"]["gone"] == [orphan]
