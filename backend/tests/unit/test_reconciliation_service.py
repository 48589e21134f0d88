"""Unit tests for the ProductReconciler."""

from product_console.application.services import ChildDeletionPolicy, ProductReconciler
from product_console.application.services.reconciliation_service import normalize_number
from product_console.domain.entities import Product, SupplierLink, VariantRecord


def _product(**overrides) -> Product:
    defaults = dict(id="p1", name="Shirt", sku="SH-1", category_id="cat-1", buying_price=10)
    defaults.update(overrides)
    return Product(**defaults)


def test_known_ids_kept_and_new_children_sent_without_id():
    original = _product(variants=[VariantRecord(id="v1", name="Red")])
    edited = original.clone()
    edited.variants[0].name = "Red-Large"
    edited.variants.append(VariantRecord(name="Blue"))

    result = ProductReconciler().reconcile(original, edited)
    variants = result.payload["variants"]

    assert len(variants) == 2
    assert variants[0]["id"] == "v1"
    assert variants[0]["name"] == "Red-Large"
    assert "id" not in variants[1]
    assert variants[1]["name"] == "Blue"


def test_unknown_child_id_is_treated_as_insert():
    original = _product(variants=[VariantRecord(id="v1", name="Red")])
    edited = original.clone()
    edited.variants.append(VariantRecord(id="ghost", name="Copied"))

    variants = ProductReconciler().reconcile(original, edited).payload["variants"]

    assert variants[0]["id"] == "v1"
    assert "id" not in variants[1]


def test_create_mode_never_sends_child_ids():
    edited = _product(
        id=None,
        variants=[VariantRecord(id="v1", name="Red")],
        suppliers=[SupplierLink(id="s1", supplier_id="sup-1", cost_price=4)],
    )

    payload = ProductReconciler().reconcile(None, edited).payload

    assert "id" not in payload["variants"][0]
    assert "id" not in payload["suppliers"][0]
    assert payload["suppliers"][0]["supplierId"] == "sup-1"


def test_length_and_order_preserved():
    original = _product(variants=[VariantRecord(id=f"v{i}", name=f"V{i}") for i in range(4)])
    edited = original.clone()

    variants = ProductReconciler().reconcile(original, edited).payload["variants"]

    assert [v["id"] for v in variants] == ["v0", "v1", "v2", "v3"]


def test_reconcile_is_idempotent():
    original = _product(variants=[VariantRecord(id="v1", name="Red")])
    edited = original.clone()
    edited.variants.append(VariantRecord(name="Blue", attributes={"color": "blue"}))
    reconciler = ProductReconciler()

    assert reconciler.reconcile(original, edited).payload == reconciler.reconcile(original, edited).payload


def test_payload_uses_camel_case_and_omits_root_id():
    edited = _product(default_location_id="loc-1", items_per_unit=6, image_urls=["/a.png"])

    payload = ProductReconciler().reconcile(edited.clone(), edited).payload

    assert "id" not in payload
    assert payload["categoryId"] == "cat-1"
    assert payload["defaultLocationId"] == "loc-1"
    assert payload["itemsPerUnit"] == 6
    assert payload["imageUrls"] == ["/a.png"]


def test_numeric_text_is_normalized():
    edited = _product(
        buying_price="12.5",
        retail_price="",
        variants=[VariantRecord(name="Red", stock_quantity="7", retail_price="")],
    )

    payload = ProductReconciler().reconcile(None, edited).payload

    assert payload["buyingPrice"] == 12.5
    assert payload["retailPrice"] is None
    assert payload["variants"][0]["stockQuantity"] == 7
    assert payload["variants"][0]["retailPrice"] is None


def test_payload_does_not_alias_the_aggregate():
    edited = _product(image_urls=["/a.png"], custom_fields={"origin": "PT"})

    payload = ProductReconciler().reconcile(None, edited).payload
    payload["imageUrls"].append("/b.png")
    payload["customFields"]["origin"] = "ES"

    assert edited.image_urls == ["/a.png"]
    assert edited.custom_fields == {"origin": "PT"}


def test_removed_ids_reported_per_collection():
    original = _product(
        variants=[VariantRecord(id="v1", name="Red"), VariantRecord(id="v2", name="Blue")],
        suppliers=[SupplierLink(id="s1", supplier_id="sup-1", cost_price=3)],
    )
    edited = original.clone()
    edited.variants.pop(1)
    edited.suppliers.clear()

    result = ProductReconciler().reconcile(original, edited)

    assert result.removed_ids == {"variants": ["v2"], "suppliers": ["s1"]}


def test_full_replace_policy_has_no_pending_deletes():
    original = _product(variants=[VariantRecord(id="v1", name="Red")])
    edited = original.clone()
    edited.variants.clear()

    result = ProductReconciler(ChildDeletionPolicy.FULL_REPLACE).reconcile(original, edited)

    assert result.pending_deletes == []
    assert result.payload["variants"] == []


def test_explicit_delete_policy_lists_pending_deletes():
    original = _product(
        variants=[VariantRecord(id="v1", name="Red"), VariantRecord(id="v2", name="Blue")],
        suppliers=[SupplierLink(id="s1", supplier_id="sup-1", cost_price=3)],
    )
    edited = original.clone()
    edited.variants.pop(0)
    edited.suppliers.clear()

    result = ProductReconciler("explicit_delete").reconcile(original, edited)

    assert result.pending_deletes == [("variants", "v1"), ("suppliers", "s1")]


def test_normalize_number():
    assert normalize_number("") is None
    assert normalize_number("  ") is None
    assert normalize_number("3") == 3
    assert normalize_number("3.25") == 3.25
    assert normalize_number("nan") is None
    assert normalize_number(float("nan")) is None
    assert normalize_number("abc") == "abc"
    assert normalize_number(4) == 4
