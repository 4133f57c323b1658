"""Tests for src/enrichment/identifiers.py"""

from src.enrichment.identifiers import category_links, extract_identifiers


class TestCategoryLinks:
    def test_reads_extension_attributes(self, sample_products):
        assert len(category_links(sample_products[0])) == 2

    def test_missing_extension_attributes(self):
        assert category_links({"sku": "A"}) == []

    def test_non_list_links(self):
        assert category_links({"extension_attributes": {"category_links": "3"}}) == []


class TestExtractIdentifiers:
    def test_unique_canonical_category_ids(self, sample_products):
        category_ids, _ = extract_identifiers(sample_products)
        assert category_ids == {"3", "7"}

    def test_skus_in_product_order(self, sample_products):
        _, skus = extract_identifiers(sample_products)
        assert skus == ["SKU-1", "SKU-2", "SKU-3"]

    def test_skips_empty_values(self):
        products = [
            {"sku": "", "extension_attributes": {"category_links": [{"category_id": ""}, {"category_id": None}]}},
            {"sku": "B"},
        ]
        category_ids, skus = extract_identifiers(products)
        assert category_ids == set()
        assert skus == ["B"]

    def test_empty(self):
        assert extract_identifiers([]) == (set(), [])
