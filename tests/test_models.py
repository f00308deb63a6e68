"""Unit tests for model helpers: ingredient codec and money rounding."""

from decimal import Decimal

import pytest

from restaurant_admin.models import (
    MenuCategory,
    OrderStatus,
    decode_ingredients,
    encode_ingredients,
    to_money,
)


@pytest.mark.unit
class TestIngredientCodec:
    """Test suite for the ingredient list encode/decode pair."""

    @pytest.mark.parametrize(
        "ingredients",
        [
            [],
            ["espresso beans"],
            ["pizza dough", "tomato sauce", "mozzarella", "basil"],
            ["crème fraîche", "jalapeño", "🌶"],
            ['say "cheese"', "back\\slash", "50% cocoa", "under_score"],
            ["b", "a", "b"],
        ],
    )
    def test_round_trip_is_lossless(self, ingredients: list[str]) -> None:
        assert decode_ingredients(encode_ingredients(ingredients)) == ingredients

    def test_none_is_stored_as_null(self) -> None:
        assert encode_ingredients(None) is None

    def test_null_and_empty_column_decode_to_empty_list(self) -> None:
        assert decode_ingredients(None) == []
        assert decode_ingredients("") == []

    def test_non_ascii_is_kept_verbatim(self) -> None:
        """Search runs against the encoded text, so accents must survive."""
        assert "café" in encode_ingredients(["café"])

    def test_tuple_input_decodes_to_list(self) -> None:
        assert decode_ingredients(encode_ingredients(("salt", "pepper"))) == ["salt", "pepper"]


@pytest.mark.unit
class TestMoney:
    """Test suite for cent quantization."""

    def test_quantizes_to_cents(self) -> None:
        assert to_money(Decimal("3")) == Decimal("3.00")
        assert str(to_money(Decimal("3"))) == "3.00"

    def test_rounds_half_up(self) -> None:
        assert to_money(Decimal("2.345")) == Decimal("2.35")

    def test_accepts_floats_and_ints(self) -> None:
        assert to_money(6.0) == Decimal("6.00")
        assert to_money(0) == Decimal("0.00")

    def test_none_is_zero(self) -> None:
        assert to_money(None) == Decimal("0.00")


@pytest.mark.unit
def test_enum_values_are_display_labels() -> None:
    assert MenuCategory("Main Course") is MenuCategory.MAIN_COURSE
    assert [s.value for s in OrderStatus] == [
        "Pending",
        "Preparing",
        "Ready",
        "Delivered",
        "Cancelled",
    ]
