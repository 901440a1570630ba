import asyncio
from types import SimpleNamespace

from fastapi import status

from conftest import API, create_product
from storefront.models.catalog import CatalogItemStatus
from storefront.services.catalog import ProductFilter, ProductPage
from storefront.services.storefront import StorefrontService

NOT_FOUND = {"error": "Not found"}


def test_public_listing_hides_sold_products(client, owner):
    create_product(client, owner, name="Corolla")
    create_product(client, owner, name="Civic")
    create_product(client, owner, name="Camry", status="sold")

    response = client.get(f"{API}/public/products/{owner['tenant_id']}")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert len(body["products"]) == 2
    assert body["pagination"]["total"] == 2
    assert all(p["status"] != "sold" for p in body["products"])


def test_public_listing_never_shows_sold_even_when_filtered(client, owner):
    create_product(client, owner, name="Sold corolla", status="sold")
    create_product(client, owner, name="Out of stock corolla", status="out_of_stock")

    for params in ({}, {"search": "corolla"}, {"status": "sold"}, {"category": "cars"}, {"sort": "price-high"}):
        body = client.get(f"{API}/public/products/{owner['tenant_id']}", params=params).json()
        assert [p["name"] for p in body["products"]] == ["Out of stock corolla"]


def test_public_listing_hides_engagement_counters(client, owner):
    create_product(client, owner)

    product = client.get(f"{API}/public/products/{owner['tenant_id']}").json()["products"][0]

    assert "view_count" not in product
    assert "click_count" not in product


def test_public_listing_for_unknown_tenant(client):
    response = client.get(f"{API}/public/products/no-such-tenant")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == NOT_FOUND


def test_price_sort_orders_full_set_before_paging(client, owner):
    for price in (300, 100, 400, 50, 200):
        create_product(client, owner, name=f"Item {price}", price=price)
    url = f"{API}/public/products/{owner['tenant_id']}"

    def prices(sort, page):
        body = client.get(url, params={"sort": sort, "limit": 2, "page": page}).json()
        return [p["price"] for p in body["products"]]

    assert prices("price-low", 1) == [50, 100]
    assert prices("price-low", 2) == [200, 300]
    assert prices("price-low", 3) == [400]
    assert prices("price-high", 1) == [400, 300]


def test_price_range_is_inclusive(client, owner):
    for price in (100, 200, 300):
        create_product(client, owner, name=f"Item {price}", price=price)

    body = client.get(
        f"{API}/public/products/{owner['tenant_id']}",
        params={"min_price": 100, "max_price": 200, "sort": "price-low"},
    ).json()

    assert [p["price"] for p in body["products"]] == [100, 200]


def test_inverted_price_range_is_rejected(client, owner):
    response = client.get(
        f"{API}/public/products/{owner['tenant_id']}", params={"min_price": 500, "max_price": 100}
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_public_business_profile(client, owner):
    response = client.get(f"{API}/public/business/{owner['slug']}")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["id"] == owner["tenant_id"]
    assert "owner_id" not in body


def test_slug_lookup_is_case_insensitive(client, owner):
    response = client.get(f"{API}/public/business/{owner['slug'].upper()}")

    assert response.status_code == status.HTTP_200_OK


def test_resolve_storefront(client, owner):
    create_product(client, owner, name="Corolla")
    create_product(client, owner, name="Camry", status="sold")

    response = client.get(f"{API}/public/store/{owner['slug']}")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["business"]["slug"] == owner["slug"]
    assert [p["name"] for p in body["products"]] == ["Corolla"]
    assert body["pagination"]["limit"] == 50


def test_unknown_slug(client):
    response = client.get(f"{API}/public/store/no-such-store")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == NOT_FOUND


def test_product_detail_records_a_view(client, owner):
    product = create_product(client, owner)

    response = client.get(f"{API}/public/store/{owner['slug']}/products/{product['id']}")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["product"]["id"] == product["id"]
    assert body["business"]["id"] == owner["tenant_id"]

    owned = client.get(f"{API}/products/{product['id']}", headers=owner["headers"]).json()
    assert owned["view_count"] == 1


def test_sold_product_stays_reachable_by_link(client, owner):
    product = create_product(client, owner, status="sold")

    response = client.get(f"{API}/public/store/{owner['slug']}/products/{product['id']}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["product"]["status"] == "sold"


def test_product_lookup_failures_look_the_same(client, owner, other_owner):
    product = create_product(client, owner)

    unknown_slug = client.get(f"{API}/public/store/no-such-store/products/{product['id']}")
    unknown_product = client.get(f"{API}/public/store/{owner['slug']}/products/nope")
    wrong_tenant = client.get(f"{API}/public/store/{other_owner['slug']}/products/{product['id']}")

    for response in (unknown_slug, unknown_product, wrong_tenant):
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == NOT_FOUND

    owned = client.get(f"{API}/products/{product['id']}", headers=owner["headers"]).json()
    assert owned["view_count"] == 0


def test_contact_click_is_counted(client, owner):
    product = create_product(client, owner)
    url = f"{API}/public/store/{owner['slug']}/products/{product['id']}/click"

    assert client.post(url).status_code == status.HTTP_200_OK
    assert client.post(url).status_code == status.HTTP_200_OK

    owned = client.get(f"{API}/products/{product['id']}", headers=owner["headers"]).json()
    assert owned["click_count"] == 2


def test_click_on_other_tenants_product(client, owner, other_owner):
    product = create_product(client, owner)

    response = client.post(f"{API}/public/store/{other_owner['slug']}/products/{product['id']}/click")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == NOT_FOUND


class StubTenants:
    async def get_tenant(self, db, tenant_id):
        return SimpleNamespace(id=tenant_id)


class RecordingCatalog:
    def __init__(self):
        self.filters = None

    async def list_products(self, db, tenant_id, filters, page=1, page_size=20):
        self.filters = filters
        return ProductPage(items=[], total=0, page=page, page_size=page_size)


def test_public_listing_leaves_caller_filter_untouched():
    catalog = RecordingCatalog()
    service = StorefrontService(tenant_service=StubTenants(), catalog_service=catalog)
    filters = ProductFilter(search="corolla", status=CatalogItemStatus.SOLD)

    asyncio.run(service.list_public_products(None, "tenant-1", filters, page=1, page_size=10))

    assert filters.status == CatalogItemStatus.SOLD
    assert filters.visible_only is False
    assert catalog.filters.visible_only is True
    assert catalog.filters.status is None
    assert catalog.filters.search == "corolla"
