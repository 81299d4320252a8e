"""Unit tests for the ingredient roster."""

from ecochef.models.models import Ingredient
from ecochef.roster.roster import IngredientRoster, capitalize_first


class TestAddManual:
    def test_appends_non_priority_ingredient(self):
        roster = IngredientRoster()
        added = roster.add_manual("  tomate ")

        assert added is not None
        assert roster.names() == ["tomate"]
        assert added.is_priority is False
        assert added.id.startswith("manual-")

    def test_blank_name_is_a_no_op(self):
        roster = IngredientRoster()
        assert roster.add_manual("   ") is None
        assert len(roster) == 0

    def test_duplicate_names_get_distinct_ids(self):
        roster = IngredientRoster()
        first = roster.add_manual("Leche")
        second = roster.add_manual("Leche")

        assert roster.names() == ["Leche", "Leche"]
        assert first.id != second.id


class TestRemoveAndToggle:
    """Edits by id; unknown ids change nothing."""

    def test_remove_existing(self):
        roster = IngredientRoster([Ingredient(id="a", name="Queso"), Ingredient(id="b", name="Pan")])
        assert roster.remove("a") is True
        assert roster.names() == ["Pan"]

    def test_remove_unknown_id_is_a_no_op(self):
        roster = IngredientRoster([Ingredient(id="a", name="Queso")])
        before = roster.items

        assert roster.remove("missing") is False
        assert roster.items == before

    def test_toggle_unknown_id_is_a_no_op(self):
        roster = IngredientRoster([Ingredient(id="a", name="Queso")])
        before = roster.items

        assert roster.toggle_priority("missing") is False
        assert roster.items == before

    def test_toggle_twice_round_trips(self):
        roster = IngredientRoster([Ingredient(id="a", name="Queso")])

        roster.toggle_priority("a")
        assert roster.get("a").is_priority is True
        assert roster.priority_names() == ["Queso"]

        roster.toggle_priority("a")
        restored = roster.get("a")
        assert restored == Ingredient(id="a", name="Queso", is_priority=False)


class TestMergeDetected:
    """Detected names are appended, never replacing existing entries."""

    def test_appends_one_ingredient_per_name(self):
        roster = IngredientRoster([Ingredient(id="x", name="Pan", is_priority=True)])
        added = roster.merge_detected(["tomate", "queso"])

        assert len(added) == 2
        assert roster.names() == ["Pan", "Tomate", "Queso"]
        assert roster.get("x").is_priority is True
        assert len({item.id for item in roster}) == 3

    def test_detected_ingredients_are_not_priority(self):
        roster = IngredientRoster()
        roster.merge_detected(["huevo"])
        assert roster.items[0].is_priority is False

    def test_no_dedup_across_batches(self):
        roster = IngredientRoster()
        roster.merge_detected(["tomate"])
        roster.merge_detected(["tomate"])

        assert roster.names() == ["Tomate", "Tomate"]
        assert roster.items[0].id != roster.items[1].id


class TestCapitalizeFirst:
    def test_only_first_character_changes(self):
        assert capitalize_first("queso azul") == "Queso azul"
        assert capitalize_first("ñame") == "Ñame"
        assert capitalize_first("") == ""
