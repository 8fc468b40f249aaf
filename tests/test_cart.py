"""
Tests for the cart reducer
"""

import pytest
from decimal import Decimal

from cakeshop.cart import (
    AddAddon,
    AddItem,
    Addon,
    AddonLine,
    CartState,
    ClearCart,
    RemoveItem,
    UpdateItem,
    UpdateQuantity,
    apply,
    compute_totals,
)


def _run(*actions, state=None):
    state = state or CartState.empty()
    for action in actions:
        state = apply(state, action)
    return state


class TestCartModels:
    """Tests for the cart dataclasses."""

    def test_addon_price_parsed(self, sample_addon):
        assert sample_addon.unit_price == Decimal("50")

    def test_addon_unparseable_price_is_zero(self):
        assert Addon(id=1, name="Card", price="free").unit_price == Decimal("0")
        assert Addon(id=2, name="Card", price="NaN").unit_price == Decimal("0")
        assert Addon(id=3, name="Card", price="").unit_price == Decimal("0")

    def test_cake_price_for_weight(self, sample_cake):
        assert sample_cake.price_for("2kg") == Decimal("950")
        # Unknown weight falls back to the first variant
        assert sample_cake.price_for("5kg") == Decimal("500")

    def test_line_item_total_price(self, make_item, sample_addon):
        item = make_item(quantity=2, addons=[AddonLine(sample_addon, 3)])

        assert item.total_price == Decimal("1150")
        assert item.merge_key == (1, "1kg", "vanilla")


class TestAddItem:
    """Tests for AddItem."""

    def test_add_to_empty_cart(self, make_item):
        state = _run(AddItem(make_item(quantity=2)))

        assert len(state.items) == 1
        assert state.items[0].id == 1
        assert state.item_count == 2
        assert state.total == Decimal("1000")

    def test_same_merge_key_merges(self, make_item):
        state = _run(AddItem(make_item(quantity=1)), AddItem(make_item(quantity=4)))

        assert len(state.items) == 1
        assert state.items[0].quantity == 5

    def test_merge_keeps_existing_customization(self, make_item, sample_addon):
        first = make_item(
            quantity=1,
            custom_message="Happy Birthday Asha",
            personalization={"uploadedImage": "/uploads/a.png", "imageSize": 80},
        )
        second = make_item(
            quantity=2,
            custom_message="Congrats",
            custom_image="/uploads/b.png",
            addons=[AddonLine(sample_addon, 1)],
        )

        state = _run(AddItem(first), AddItem(second))

        assert len(state.items) == 1
        merged = state.items[0]
        assert merged.quantity == 3
        assert merged.custom_message == "Happy Birthday Asha"
        assert merged.custom_image is None
        assert merged.personalization == {"uploadedImage": "/uploads/a.png", "imageSize": 80}
        assert merged.addons == ()

    def test_different_variant_appends(self, make_item, other_cake):
        state = _run(
            AddItem(make_item(weight="1kg")),
            AddItem(make_item(weight="2kg", unit_price="950")),
            AddItem(make_item(flavor="chocolate")),
            AddItem(make_item(cake=other_cake, unit_price="650")),
        )

        assert [item.id for item in state.items] == [1, 2, 3, 4]
        assert [item.merge_key for item in state.items] == [
            (1, "1kg", "vanilla"),
            (1, "2kg", "vanilla"),
            (1, "1kg", "chocolate"),
            (2, "1kg", "vanilla"),
        ]

    def test_ids_unique_after_removal(self, make_item, other_cake):
        state = _run(
            AddItem(make_item()),
            AddItem(make_item(cake=other_cake)),
            RemoveItem(1),
            AddItem(make_item(flavor="chocolate")),
        )

        ids = [item.id for item in state.items]
        assert ids == [2, 3]

    def test_non_positive_candidate_is_noop(self, make_item):
        state = _run(AddItem(make_item(quantity=0)))

        assert state.items == ()
        assert state.item_count == 0

    def test_candidate_addons_kept_on_new_line(self, make_item, sample_addon):
        candles = AddonLine(sample_addon, 2)
        card = AddonLine(Addon(id=10, name="Card", price="30"), 0)

        state = _run(AddItem(make_item(addons=[candles, card])))

        assert state.items[0].addons == (candles,)
        assert state.total == Decimal("600")

    def test_input_state_not_mutated(self, make_item):
        before = _run(AddItem(make_item(quantity=1)))
        after = apply(before, AddItem(make_item(quantity=2)))

        assert before.items[0].quantity == 1
        assert after.items[0].quantity == 3


class TestUpdateQuantity:
    """Tests for UpdateQuantity and RemoveItem."""

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_non_positive_quantity_removes(self, make_item, quantity):
        state = _run(AddItem(make_item(quantity=3)), UpdateQuantity(1, quantity))

        assert state.items == ()
        assert state.total == Decimal("0")
        assert state.item_count == 0

    def test_set_quantity(self, make_item):
        state = _run(AddItem(make_item(quantity=1)), UpdateQuantity(1, 4))

        assert state.items[0].quantity == 4
        assert state.total == Decimal("2000")
        assert state.item_count == 4

    def test_remove_item(self, make_item, other_cake):
        state = _run(
            AddItem(make_item()),
            AddItem(make_item(cake=other_cake, unit_price="650")),
            RemoveItem(1),
        )

        assert [item.cake.id for item in state.items] == [2]
        assert state.total == Decimal("650")


class TestUpdateItem:
    """Tests for UpdateItem (personalization edits)."""

    def test_patch_personalization(self, make_item):
        state = _run(
            AddItem(make_item()),
            UpdateItem(1, {"custom_message": "Love you", "personalization": {"customText": "Mom"}}),
        )

        item = state.items[0]
        assert item.custom_message == "Love you"
        assert item.personalization == {"customText": "Mom"}
        assert item.quantity == 1

    def test_id_and_unknown_fields_ignored(self, make_item):
        state = _run(AddItem(make_item()), UpdateItem(1, {"id": 99, "colour": "pink"}))

        assert state.items[0].id == 1

    def test_price_patch_recomputes_total(self, make_item):
        state = _run(AddItem(make_item(quantity=2)), UpdateItem(1, {"unit_price": "450"}))

        assert state.total == Decimal("900")

    def test_patch_colliding_with_other_line_is_noop(self, make_item):
        state = _run(
            AddItem(make_item(flavor="vanilla")),
            AddItem(make_item(flavor="chocolate")),
        )
        patched = apply(state, UpdateItem(2, {"flavor": "vanilla"}))

        assert patched == state

    def test_quantity_patch_to_zero_removes(self, make_item):
        state = _run(AddItem(make_item()), UpdateItem(1, {"quantity": 0}))

        assert state.items == ()


class TestAddAddon:
    """Tests for AddAddon."""

    def test_append_then_increment(self, make_item, sample_addon):
        state = _run(
            AddItem(make_item()),
            AddAddon(1, sample_addon, 2),
            AddAddon(1, sample_addon, 1),
        )

        addons = state.items[0].addons
        assert len(addons) == 1
        assert addons[0].quantity == 3
        assert state.total == Decimal("650")

    def test_distinct_addons_keep_order(self, make_item, sample_addon):
        card = Addon(id=10, name="Greeting Card", price="30.00")
        state = _run(
            AddItem(make_item()),
            AddAddon(1, card, 1),
            AddAddon(1, sample_addon, 1),
        )

        assert [line.addon.id for line in state.items[0].addons] == [10, 9]

    def test_unparseable_addon_price_counts_zero(self, make_item):
        broken = Addon(id=11, name="Balloons", price="n/a")
        state = _run(AddItem(make_item()), AddAddon(1, broken, 5))

        assert state.total == Decimal("500")

    def test_non_positive_addon_quantity_is_noop(self, make_item, sample_addon):
        state = _run(AddItem(make_item()), AddAddon(1, sample_addon, 0))

        assert state.items[0].addons == ()

    @pytest.mark.parametrize("price", ["1e30", "-1e30", "1E+999999"])
    def test_out_of_range_addon_price_counts_zero(self, make_item, price):
        huge = Addon(id=12, name="Gold leaf", price=price)

        state = _run(AddItem(make_item()), AddAddon(1, huge, 1))

        assert state.items[0].addons[0].quantity == 1
        assert state.total == Decimal("500")


class TestNoOps:
    """Actions against missing ids return an equal, distinct state."""

    @pytest.mark.parametrize(
        "action",
        [
            RemoveItem(404),
            UpdateQuantity(404, 3),
            UpdateItem(404, {"custom_message": "x"}),
            AddAddon(404, Addon(id=9, name="Candles", price="50"), 1),
        ],
    )
    def test_missing_id(self, make_item, action):
        state = _run(AddItem(make_item(quantity=2)))

        result = apply(state, action)

        assert result == state
        assert result is not state


class TestTotals:
    """Tests for compute_totals and ClearCart."""

    def test_large_line_totals_round_without_error(self, make_item):
        state = _run(AddItem(make_item(quantity=10**12, unit_price="999999999999999999.99")))

        assert state.item_count == 10**12
        assert state.total > Decimal("1e29")

    def test_decimal_price_beyond_context_precision(self, make_item):
        state = _run(AddItem(make_item(quantity=3, unit_price="1e30")))

        assert state.total == Decimal("3e30")
        assert state.to_dict()["total"].endswith(".00")

    def test_totals_match_recompute(self, make_item, other_cake, sample_addon):
        state = _run(
            AddItem(make_item(quantity=2)),
            AddItem(make_item(cake=other_cake, quantity=1, unit_price="650.50")),
            AddAddon(2, sample_addon, 3),
            UpdateQuantity(1, 5),
            AddItem(make_item(flavor="chocolate", unit_price="499.99")),
            RemoveItem(3),
        )

        totals = compute_totals(state.items)
        assert state.total == totals.total
        assert state.item_count == sum(item.quantity for item in state.items) == 6
        assert state.total == Decimal("3300.50")

    def test_empty_totals(self):
        totals = compute_totals([])

        assert totals.total == Decimal("0")
        assert totals.item_count == 0

    def test_clear_cart(self, make_item):
        state = _run(AddItem(make_item(quantity=3)), ClearCart())

        assert state == CartState.empty()
        assert state.total == Decimal("0")


def test_example_scenario(make_item, sample_addon):
    """Full walk-through: merge, add-on, quantity to zero."""
    state = CartState.empty()

    state = apply(state, AddItem(make_item(quantity=1, weight="1kg", flavor="vanilla", unit_price="500")))
    state = apply(state, AddItem(make_item(quantity=2, weight="1kg", flavor="vanilla", unit_price="500")))

    assert len(state.items) == 1
    assert state.items[0].quantity == 3
    assert state.total == Decimal("1500")
    assert state.item_count == 3

    item_id = state.items[0].id
    state = apply(state, AddAddon(item_id, sample_addon, 2))
    assert state.total == Decimal("1600")

    state = apply(state, UpdateQuantity(item_id, 0))
    assert state.items == ()
    assert state.total == Decimal("0")
    assert state.item_count == 0
