"""
Tests for the session cart store
"""

import json

import pytest

from thermal.cart import CART_STORAGE_KEY, CartItem, CartStore, ItemKind, MemoryStorage, get_cart_store


class _BrokenStorage:
    """Storage whose every call fails."""

    def __init__(self):
        self.calls = 0

    def get(self, key):
        self.calls += 1
        raise ConnectionError("storage unavailable")

    def set(self, key, value):
        self.calls += 1
        raise ConnectionError("storage unavailable")

    def remove(self, key):
        self.calls += 1
        raise ConnectionError("storage unavailable")


class _RecordingStorage(MemoryStorage):
    """Memory storage that records writes."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []
        self.removals = []

    def set(self, key, value):
        self.writes.append((key, value))
        super().set(key, value)

    def remove(self, key):
        self.removals.append(key)
        super().remove(key)


def _punch(item_id="punch-5", quantity=None, price=6500):
    return CartItem(
        id=item_id,
        kind=ItemKind.PUNCH_CARD,
        name=f"Punch card {item_id}",
        unit_price_minor_units=price,
        quantity=quantity,
    )


def _membership(item_id, price, quantity=1):
    return CartItem(
        id=item_id,
        kind=ItemKind.MEMBERSHIP,
        name=item_id,
        unit_price_minor_units=price,
        quantity=quantity,
    )


def _expected_total(store):
    return sum(item.unit_price_minor_units * item.quantity for item in store.items)


class TestCartItem:
    """Tests for CartItem dataclass."""

    def test_quantity_defaults_to_one(self):
        assert _punch().quantity == 1

    def test_kind_accepts_string(self):
        item = CartItem(id="x", kind="punch_card", name="X", unit_price_minor_units=100)
        assert item.kind is ItemKind.PUNCH_CARD

    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            _punch(price=-1)

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValueError):
            _punch(quantity=0)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            CartItem(id="x", kind="gift_card", name="X", unit_price_minor_units=100)

    def test_total_price(self):
        assert _punch(quantity=3, price=1500).total_price == 4500

    def test_from_dict_keeps_payload(self):
        data = {
            "id": "plan-vip",
            "kind": "membership",
            "name": "VIP",
            "unit_price_minor_units": 14900,
            "payload": {"features": ["private suite"]},
        }
        item = CartItem.from_dict(data)
        assert item.quantity == 1
        assert item.description == ""
        assert item.payload == {"features": ["private suite"]}


class TestMembershipReplacement:

    def test_second_membership_replaces_first(self, memory_storage, basic_plan, premium_plan):
        store = CartStore(memory_storage)
        store.add_item(basic_plan)
        store.add_item(premium_plan)

        assert [item.id for item in store.items] == ["plan-premium"]
        assert store.items[0].quantity == 1
        assert store.get_total_price() == 9900

    def test_membership_quantity_forced_to_one(self, memory_storage):
        store = CartStore(memory_storage)
        store.add_item(_membership("plan-basic", 6500, quantity=4))
        assert store.items[0].quantity == 1
        assert store.get_item_count() == 1

    def test_many_memberships_leave_only_latest(self, memory_storage):
        store = CartStore(memory_storage)
        for index in range(6):
            store.add_item(_membership(f"plan-{index}", 1000 * (index + 1)))
            memberships = [item for item in store.items if item.kind == ItemKind.MEMBERSHIP]
            assert len(memberships) == 1
            assert memberships[0].id == f"plan-{index}"

    def test_replacement_moves_membership_to_end(self, memory_storage, basic_plan, premium_plan, ten_visit_card):
        store = CartStore(memory_storage)
        store.add_item(basic_plan)
        store.add_item(ten_visit_card)
        store.add_item(premium_plan)

        assert [item.id for item in store.items] == ["punch-10", "plan-premium"]

    def test_re_adding_same_membership_keeps_one(self, memory_storage, basic_plan):
        store = CartStore(memory_storage)
        store.add_item(basic_plan)
        store.add_item(basic_plan)
        assert len(store.items) == 1
        assert store.items[0].quantity == 1


class TestPunchCardMerge:

    def test_repeat_add_sums_quantities(self, memory_storage):
        store = CartStore(memory_storage)
        store.add_item(_punch(quantity=2))
        store.add_item(_punch(quantity=3))

        assert len(store.items) == 1
        assert store.items[0].quantity == 5

    def test_incoming_quantity_defaults_to_one(self, memory_storage):
        store = CartStore(memory_storage)
        store.add_item(_punch(quantity=2))
        store.add_item(_punch())
        assert store.items[0].quantity == 3

    def test_merge_keeps_position(self, memory_storage):
        store = CartStore(memory_storage)
        store.add_item(_punch("punch-5"))
        store.add_item(_punch("punch-10"))
        store.add_item(_punch("punch-5", quantity=2))

        assert [(item.id, item.quantity) for item in store.items] == [("punch-5", 3), ("punch-10", 1)]

    def test_item_count_counts_units(self, memory_storage):
        store = CartStore(memory_storage)
        store.add_item(_punch(quantity=3))
        assert len(store.items) == 1
        assert store.get_item_count() == 3


class TestRemoveAndUpdate:

    def test_remove_item(self, memory_storage, ten_visit_card, basic_plan):
        store = CartStore(memory_storage)
        store.add_item(basic_plan)
        store.add_item(ten_visit_card)
        store.remove_item("punch-10")
        assert [item.id for item in store.items] == ["plan-basic"]

    def test_remove_unknown_is_noop(self, memory_storage, basic_plan):
        store = CartStore(memory_storage)
        store.add_item(basic_plan)
        store.remove_item("missing")
        assert len(store.items) == 1

    @pytest.mark.parametrize("quantity", [0, -5])
    def test_non_positive_quantity_removes(self, memory_storage, quantity):
        store = CartStore(memory_storage)
        store.add_item(_punch(quantity=2))
        store.update_quantity("punch-5", quantity)
        assert store.items == ()

    def test_update_quantity_in_place(self, memory_storage, basic_plan):
        store = CartStore(memory_storage)
        store.add_item(_punch("punch-5"))
        store.add_item(basic_plan)
        store.update_quantity("punch-5", 4)

        assert [(item.id, item.quantity) for item in store.items] == [("punch-5", 4), ("plan-basic", 1)]

    def test_update_unknown_is_noop(self, memory_storage):
        store = CartStore(memory_storage)
        store.add_item(_punch())
        store.update_quantity("missing", 9)
        assert store.items[0].quantity == 1


class TestTotals:

    def test_empty_cart(self, memory_storage):
        store = CartStore(memory_storage)
        assert store.get_total_price() == 0
        assert store.get_item_count() == 0
        assert store.summary()["is_empty"] is True

    def test_total_matches_items_after_every_mutation(self, memory_storage, basic_plan, premium_plan):
        store = CartStore(memory_storage)
        steps = [
            lambda: store.add_item(_punch("punch-5", quantity=2, price=6000)),
            lambda: store.add_item(basic_plan),
            lambda: store.add_item(_punch("punch-10", price=11000)),
            lambda: store.add_item(_punch("punch-5", quantity=1, price=6000)),
            lambda: store.update_quantity("punch-10", 3),
            lambda: store.add_item(premium_plan),
            lambda: store.remove_item("punch-5"),
            lambda: store.update_quantity("punch-10", -1),
            lambda: store.clear_cart(),
        ]
        for step in steps:
            step()
            assert store.get_total_price() == _expected_total(store)
            assert store.get_item_count() == sum(item.quantity for item in store.items)

    def test_summary(self, memory_storage, basic_plan):
        store = CartStore(memory_storage)
        store.add_item(basic_plan)
        store.add_item(_punch(quantity=2, price=1000))

        summary = store.summary()
        assert summary["item_count"] == 3
        assert summary["total_price"] == 8500
        assert summary["has_membership"] is True
        assert summary["items"][1]["total_price"] == 2000


class TestPersistence:

    def test_round_trip(self, memory_storage, basic_plan, ten_visit_card):
        store = CartStore(memory_storage)
        store.add_item(ten_visit_card)
        store.add_item(basic_plan)
        store.update_quantity("punch-10", 2)

        reloaded = CartStore(memory_storage)
        assert reloaded.items == store.items

    def test_loads_existing_state(self, basic_plan):
        storage = MemoryStorage({CART_STORAGE_KEY: json.dumps([basic_plan.to_dict()])})
        store = CartStore(storage)
        assert store.items == (basic_plan,)

    def test_no_write_before_mutation(self, basic_plan):
        storage = _RecordingStorage({CART_STORAGE_KEY: json.dumps([basic_plan.to_dict()])})
        store = CartStore(storage)
        store.get_total_price()
        store.remove_item("missing")
        store.update_quantity("missing", 3)

        assert storage.writes == []
        assert json.loads(storage.get(CART_STORAGE_KEY))[0]["id"] == "plan-basic"

    def test_first_mutation_keeps_stored_items(self, basic_plan, ten_visit_card):
        storage = _RecordingStorage({CART_STORAGE_KEY: json.dumps([basic_plan.to_dict()])})
        store = CartStore(storage)
        store.add_item(ten_visit_card)

        saved = json.loads(storage.writes[-1][1])
        assert [entry["id"] for entry in saved] == ["plan-basic", "punch-10"]

    def test_clear_cart_removes_same_key(self, basic_plan):
        storage = _RecordingStorage()
        store = CartStore(storage, key="cart:abc")
        store.add_item(basic_plan)
        store.clear_cart()

        assert storage.writes[0][0] == "cart:abc"
        assert storage.removals == ["cart:abc"]
        assert "cart:abc" not in storage
        assert CartStore(storage, key="cart:abc").items == ()

    @pytest.mark.parametrize("raw", ["{not json", '{"id": "plan"}', '[{"id": "x"}]', '[{"id": "x", "kind": "gift", "name": "X", "unit_price_minor_units": 1}]'])
    def test_corrupted_data_reads_as_empty(self, raw):
        store = CartStore(MemoryStorage({CART_STORAGE_KEY: raw}))
        assert store.items == ()

    def test_read_failure_reads_as_empty(self):
        store = CartStore(_BrokenStorage())
        assert store.items == ()

    def test_write_failure_keeps_memory_state(self, basic_plan, ten_visit_card):
        storage = _BrokenStorage()
        store = CartStore(storage)
        store.add_item(basic_plan)
        store.add_item(ten_visit_card)
        store.clear_cart()
        store.add_item(ten_visit_card)

        assert [item.id for item in store.items] == ["punch-10"]
        assert storage.calls > 0

    def test_get_cart_store_uses_session_key(self, memory_storage, basic_plan):
        get_cart_store("session-a", storage=memory_storage).add_item(basic_plan)

        assert get_cart_store("session-a", storage=memory_storage).items == (basic_plan,)
        assert get_cart_store("session-b", storage=memory_storage).items == ()
        assert "cart:session-a" in memory_storage
