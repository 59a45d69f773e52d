"""Tests for grocery_catalog/catalog/normalizer.py"""

import pytest

from grocery_catalog.catalog import CatalogNormalizer, normalize
from grocery_catalog.models import NetWeight
from grocery_catalog.rendering import TableView


class TestMalformedDocuments:
    @pytest.mark.parametrize("document", [
        {},
        {"name": "Salad"},
        {"items": None},
        {"items": "leafy"},
        {"items": ["leafy"]},
        None,
        [],
        "items",
    ])
    def test_no_items_mapping_gives_empty(self, document):
        assert normalize(document, "salad") == []
        assert normalize(document, "salad", "as") == []

    def test_non_mapping_subcategories_skipped(self):
        document = {"items": {"leafy": "n/a", "herbs": 3, "roots": None}}
        assert normalize(document, "vegs") == []

    def test_non_mapping_product_group_skipped(self):
        document = {"items": {"leafy": {"as": ["p1"], "tc": "none"}}}
        assert normalize(document, "salad") == []


class TestRecordSkipping:
    def test_records_without_name_excluded(self):
        document = {"items": {"leafy": {"as": {
            "p1": {"p": 1.0, "img": "x.jpg", "nw": {"t": 1, "u": "kg"}},
            "p2": {"n": "", "p": 2.0},
            "p3": {"n": None},
            "p4": {"n": "Lettuce"},
        }}}}
        rows = normalize(document, "salad")
        assert [row.id for row in rows] == ["p4"]

    def test_non_mapping_records_excluded(self):
        document = {"items": {"leafy": {"as": {"count": 3, "tags": ["a"], "p1": {"n": "Cress"}}}}}
        rows = normalize(document, "salad")
        assert [row.name for row in rows] == ["Cress"]


class TestScenarios:
    def test_direct_supermarket_map(self, spinach_document):
        rows = normalize(spinach_document, "salad")
        assert len(rows) == 1
        row = rows[0]
        assert row.id == "p1"
        assert row.name == "Spinach"
        assert row.category == "salad"
        assert row.subcategory == "leafy"
        assert row.price == 120
        assert row.supermarket == "Asda"

    def test_filter_not_present_gives_empty(self, spinach_document):
        assert normalize(spinach_document, "salad", "ms") == []

    def test_filter_present_at_top_level(self, spinach_document):
        rows = normalize(spinach_document, "salad", "as")
        assert [row.name for row in rows] == ["Spinach"]

    def test_nested_grouping_level(self, kale_document):
        rows = normalize(kale_document, "salad")
        assert len(rows) == 1
        assert rows[0].id == "p2"
        assert rows[0].name == "Kale"
        assert rows[0].subcategory == "leafy - organic"
        assert rows[0].price == 0
        assert rows[0].supermarket == "Asda"

    def test_nested_grouping_level_with_filter(self, kale_document):
        rows = normalize(kale_document, "salad", "as")
        assert [row.subcategory for row in rows] == ["leafy - organic"]

    def test_category_label_comes_from_argument(self, spinach_document):
        rows = normalize(spinach_document, "Anything")
        assert rows[0].category == "Anything"


class TestMixedDocument:
    def test_all_supermarkets_in_document_order(self, salad_document):
        rows = normalize(salad_document, "salad")
        assert [row.id for row in rows] == ["p1", "p2", "t1", "o1", "o2", "a1"]
        assert [row.subcategory for row in rows] == [
            "leafy", "leafy", "leafy", "leafy - organic", "leafy - organic", "tomatoes",
        ]
        assert [row.supermarket for row in rows] == [
            "Asda", "Asda", "Tesco", "Asda", "Morrisons", "Aldi",
        ]

    def test_field_mapping(self, salad_document):
        spinach = normalize(salad_document, "salad")[0]
        assert spinach.quantity == 1
        assert spinach.unit == "bag"
        assert spinach.price_per_unit == "£4.80/kg"
        assert spinach.image == "https://img.example.com/spinach.jpg"
        assert spinach.net_weight == NetWeight(t=250, u="g")

    def test_prices_in_pence(self, salad_document):
        prices = {row.id: row.price for row in normalize(salad_document, "salad")}
        assert prices == {"p1": 120, "p2": 95, "t1": 101, "o1": 250, "o2": 0, "a1": 79}

    def test_filter_found_at_top_level_skips_nested_groups(self, salad_document):
        # "as" is present directly under "leafy", so "leafy - organic" is not searched
        rows = normalize(salad_document, "salad", "as")
        assert [row.id for row in rows] == ["p1", "p2"]

    def test_filter_found_only_in_nested_group(self, salad_document):
        rows = normalize(salad_document, "salad", "ms")
        assert [(row.id, row.subcategory, row.supermarket) for row in rows] == [
            ("o2", "leafy - organic", "Morrisons"),
        ]

    def test_filter_absent_everywhere(self, salad_document):
        assert normalize(salad_document, "salad", "oc") == []

    def test_empty_filter_means_all(self, salad_document):
        assert len(normalize(salad_document, "salad", "")) == 6

    def test_empty_filtered_map_stops_nested_search(self):
        # An empty "as" map still claims "leafy"; "leafy - organic" is not searched
        document = {"items": {"leafy": {"as": {}, "organic": {"as": {"p1": {"n": "Kale"}}}}}}
        assert normalize(document, "salad", "as") == []

    def test_empty_nested_filtered_map_gives_no_rows(self):
        document = {"items": {"leafy": {"organic": {"as": {}}}}}
        assert normalize(document, "salad", "as") == []

    def test_null_filtered_entry_falls_through_to_nested_group(self):
        document = {"items": {"leafy": {"as": None, "organic": {"as": {"p1": {"n": "Kale"}}}}}}
        rows = normalize(document, "salad", "as")
        assert [(row.id, row.subcategory) for row in rows] == [("p1", "leafy - organic")]

    def test_mixed_net_weight_types_sort(self):
        document = {"items": {"leafy": {"as": {
            "p1": {"n": "Spinach", "nw": {"t": "0.5", "u": "kg"}},
            "p2": {"n": "Rocket", "nw": {"t": 250, "u": "g"}},
        }}}}
        rows = normalize(document, "salad")
        assert rows[0].net_weight == NetWeight(t=None, u="kg")

        table = TableView()
        table.update(rows)
        table.sort("netWeight")
        assert [row.id for row in table.rows] == ["p2", "p1"]

    def test_does_not_mutate_document(self, salad_document):
        import copy
        before = copy.deepcopy(salad_document)
        normalize(salad_document, "salad")
        assert salad_document == before


class TestDepthLimit:
    """Supermarket maps are only searched two grouping levels below "items"."""

    def test_three_levels_deep_is_dropped(self):
        document = {"items": {"leafy": {"organic": {"uk": {"as": {"p1": {"n": "Deep Kale"}}}}}}}
        assert normalize(document, "salad") == []
        assert normalize(document, "salad", "as") == []

    def test_two_levels_deep_is_found(self):
        document = {"items": {"leafy": {"organic": {"as": {"p1": {"n": "Kale"}}}}}}
        assert len(normalize(document, "salad")) == 1


class TestCatalogNormalizer:
    def test_unknown_supermarket_name_resolves_to_id(self):
        normalizer = CatalogNormalizer()
        assert normalizer.supermarket_name("xx") == "xx"
        assert normalizer.supermarket_name("tc") == "Tesco"

    def test_custom_supermarket_table(self):
        normalizer = CatalogNormalizer({"lidl": "Lidl"})
        document = {"items": {
            "leafy": {"lidl": {"l1": {"n": "Iceberg"}}, "as": {"a1": {"n": "Romaine"}}},
        }}
        rows = normalizer.normalize(document, "salad")
        # "as" is not known to this table, so it is treated as a grouping level
        assert [(row.name, row.supermarket) for row in rows] == [("Iceberg", "Lidl")]

    def test_rows_are_new_lists(self, spinach_document):
        normalizer = CatalogNormalizer()
        first = normalizer.normalize(spinach_document, "salad")
        second = normalizer.normalize(spinach_document, "salad")
        assert first == second
        assert first is not second
