"""Tests for src/export/recs_exporter.py"""

import csv

import pytest

from src.export.recs_exporter import (
    RECS_FIELDNAMES,
    RECS_HEADERS,
    RECS_PREAMBLE,
    RecsCSVExporter,
    custom_attribute,
)


@pytest.fixture
def exporter():
    return RecsCSVExporter(store_url="https://shop.example.com/")


@pytest.fixture
def enriched_product():
    return {
        "sku": "SKU-1",
        "name": "Trail Shoe",
        "price": 89.5,
        "type_id": "simple",
        "qty": 6.0,
        "categories": [{"id": "3", "name": "Shoes", "position": 0}],
        "images": [{"url": "https://store.example.com/media/catalog/product/t/s/trail-shoe.jpg"}],
        "custom_attributes": [
            {"attribute_code": "url_key", "value": "trail-shoe"},
            {"attribute_code": "short_description", "value": "Light trail shoe"},
        ],
    }


class TestHeaders:
    def test_nineteen_columns(self):
        assert len(RECS_HEADERS) == 19
        assert len(RECS_FIELDNAMES) == 19

    def test_first_and_last(self):
        assert RECS_HEADERS[0] == "##RECSentity.id"
        assert RECS_HEADERS[-1] == "entity.custom10"

    def test_preamble_lines(self):
        assert len(RECS_PREAMBLE) == 6
        assert all(line.startswith("## RECS") for line in RECS_PREAMBLE)


class TestCustomAttribute:
    def test_found(self, enriched_product):
        assert custom_attribute(enriched_product, "url_key") == "trail-shoe"

    def test_missing(self, enriched_product):
        assert custom_attribute(enriched_product, "color") is None


class TestProductToRow:
    def test_maps_fields(self, exporter, enriched_product):
        row = exporter.product_to_row(enriched_product)

        assert row["sku"] == "SKU-1"
        assert row["name"] == "Trail Shoe"
        assert row["category_id"] == "Shoes"
        assert row["message"] == "Light trail shoe"
        assert row["thumbnail_url"].endswith("/t/s/trail-shoe.jpg")
        assert row["value"] == 89.5
        assert row["page_url"] == "https://shop.example.com/trail-shoe.html"
        assert row["inventory"] == 6
        assert row["type"] == "simple"
        assert row["custom2"] == ""
        assert list(row) == RECS_FIELDNAMES

    def test_defaults_for_bare_product(self, exporter):
        row = exporter.product_to_row({"sku": "SKU-3", "price": "n/a"})

        assert row["category_id"] == ""
        assert row["message"] == ""
        assert row["thumbnail_url"] == ""
        assert row["value"] == 0
        assert row["inventory"] == 0
        assert row["page_url"] == ""

    def test_message_falls_back_to_name(self, exporter):
        assert exporter.product_to_row({"name": "Gift Card"})["message"] == "Gift Card"

    def test_explicit_url_wins(self, exporter, enriched_product):
        enriched_product["url"] = "https://shop.example.com/custom/path"
        assert exporter.page_url(enriched_product) == "https://shop.example.com/custom/path"

    def test_no_store_url_leaves_page_url_empty(self, enriched_product):
        assert RecsCSVExporter().page_url(enriched_product) == ""


class TestExport:
    def test_writes_recs_file(self, exporter, enriched_product, tmp_path):
        path = tmp_path / "output" / "products.csv"

        count = exporter.export([enriched_product, {"sku": "SKU-2", "name": "Rain Jacket"}], path)

        assert count == 2
        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[:6] == RECS_PREAMBLE
        assert lines[6].split(",") == RECS_HEADERS

        rows = list(csv.reader(lines[7:]))
        assert len(rows) == 2
        assert all(len(row) == 19 for row in rows)
        assert rows[0][0] == "SKU-1"
        assert rows[1][1] == "Rain Jacket"

    def test_empty_export_writes_headers(self, exporter, tmp_path):
        path = tmp_path / "empty.csv"
        assert exporter.export([], path) == 0
        assert len(path.read_text(encoding="utf-8").splitlines()) == 7
