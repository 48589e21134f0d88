"""Unit tests for the product form schemas."""

import pytest
from pydantic import ValidationError

from product_console.application.schemas import (
    ProductForm,
    SupplierForm,
    VariantForm,
    collect_field_errors,
    server_field_path,
)


def _errors(data: dict) -> dict[str, str]:
    with pytest.raises(ValidationError) as exc_info:
        ProductForm.model_validate(data)
    return collect_field_errors(exc_info.value)


def test_required_fields():
    errors = _errors({})

    assert errors["name"] == "Product name is required."
    assert errors["category_id"] == "Category is required."
    assert errors["buying_price"] == "Buying price is required."
    assert "sku" not in errors


def test_sku_required_only_when_editing():
    errors = _errors({"id": "p1", "name": "Shirt", "category_id": "c1", "buying_price": 5})

    assert errors == {"sku": "Product SKU is required for editing."}


def test_buying_price_must_be_positive():
    errors = _errors({"name": "Shirt", "category_id": "c1", "buying_price": 0})

    assert list(errors) == ["buying_price"]


def test_child_errors_use_indexed_paths():
    errors = _errors({
        "name": "Shirt",
        "category_id": "c1",
        "buying_price": 5,
        "variants": [{"name": "Red"}, {"name": ""}],
        "suppliers": [{"supplier_id": "s1", "cost_price": -1}],
    })

    assert errors["variants.1.name"] == "Variant name cannot be empty."
    assert "suppliers.0.cost_price" in errors
    assert "variants.0.name" not in errors


def test_custom_fields_json_text():
    form = ProductForm.model_validate({
        "name": "Shirt", "category_id": "c1", "buying_price": "5",
        "custom_fields": '{"origin": "PT"}',
    })
    assert form.custom_fields == {"origin": "PT"}

    errors = _errors({
        "name": "Shirt", "category_id": "c1", "buying_price": "5",
        "custom_fields": "{not json",
    })
    assert errors == {"custom_fields": "Invalid JSON format for custom fields."}


def test_image_urls_accept_single_string_and_reject_blank_entries():
    form = ProductForm.model_validate({
        "name": "Shirt", "category_id": "c1", "buying_price": 5, "image_urls": "/a.png",
    })
    assert form.image_urls == ["/a.png"]

    errors = _errors({
        "name": "Shirt", "category_id": "c1", "buying_price": 5, "image_urls": ["/a.png", ""],
    })
    assert errors == {"image_urls": "Invalid image URL."}


def test_variant_blank_numbers_become_none():
    form = VariantForm.model_validate({
        "name": "Red", "retail_price": "", "stock_quantity": " ", "weight": "",
    })

    assert form.retail_price is None
    assert form.stock_quantity is None
    assert form.weight is None
    assert form.reorder_point == 5


def test_variant_attributes_json():
    form = VariantForm.model_validate({"name": "Red", "attributes": '{"size": "L"}'})
    assert form.to_entity().attributes == {"size": "L"}

    with pytest.raises(ValidationError):
        VariantForm.model_validate({"name": "Red", "attributes": "[1, 2]"})


def test_supplier_form_to_entity():
    record = SupplierForm.model_validate({
        "supplier_id": "s1", "cost_price": "2.5", "minimum_order_quantity": "", "is_preferred": True,
    }).to_entity()

    assert record.cost_price == 2.5
    assert record.minimum_order_quantity is None
    assert record.is_preferred is True


def test_server_field_path():
    assert server_field_path("sku") == "sku"
    assert server_field_path("buyingPrice") == "buying_price"
    assert server_field_path("variants.0.reorderQty") == "variants.0.reorder_qty"
