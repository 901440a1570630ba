from datetime import date

from fastapi import status

from conftest import API, create_product


def test_get_my_business(client, owner):
    response = client.get(f"{API}/business/me", headers=owner["headers"])

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["id"] == owner["tenant_id"]
    assert body["owner_id"] == owner["account_id"]
    assert body["slug"] == "joes-auto-repair"


def test_partial_profile_update(client, owner):
    url = f"{API}/business/{owner['tenant_id']}"
    client.patch(url, json={"phone": "+254700000000"}, headers=owner["headers"])

    response = client.patch(
        url,
        json={
            "description": "Family-run garage since 1998",
            "brand_color": "#1a2b3c",
            "year_established": 1998,
            "social_links": {"instagram": "https://instagram.com/joes"},
        },
        headers=owner["headers"],
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["message"] == "Business updated successfully"
    business = body["business"]
    assert business["description"] == "Family-run garage since 1998"
    assert business["brand_color"] == "#1a2b3c"
    assert business["year_established"] == 1998
    assert business["social_links"]["instagram"] == "https://instagram.com/joes"
    assert business["phone"] == "+254700000000"
    assert business["display_name"] == "Joe's Auto Repair!!"


def test_slug_cannot_be_changed(client, owner):
    response = client.patch(
        f"{API}/business/{owner['tenant_id']}", json={"slug": "new-slug"}, headers=owner["headers"]
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert client.get(f"{API}/public/business/joes-auto-repair").status_code == status.HTTP_200_OK


def test_renaming_keeps_slug(client, owner):
    response = client.patch(
        f"{API}/business/{owner['tenant_id']}", json={"display_name": "Joe's Garage"}, headers=owner["headers"]
    )

    assert response.json()["business"]["display_name"] == "Joe's Garage"
    assert response.json()["business"]["slug"] == "joes-auto-repair"


def test_cannot_update_another_business(client, owner, other_owner):
    response = client.patch(
        f"{API}/business/{other_owner['tenant_id']}",
        json={"display_name": "Hijacked"},
        headers=owner["headers"],
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"error": "Forbidden"}
    profile = client.get(f"{API}/public/business/{other_owner['slug']}").json()
    assert profile["display_name"] == "Mary's Boutique"


def test_profile_validation(client, owner):
    url = f"{API}/business/{owner['tenant_id']}"

    for payload in (
        {"brand_color": "red"},
        {"brand_color": None},
        {"display_name": None},
        {"year_established": 1800},
        {"year_established": date.today().year + 2},
    ):
        response = client.patch(url, json=payload, headers=owner["headers"])
        assert response.status_code == status.HTTP_400_BAD_REQUEST, payload


def test_update_requires_session(client, owner):
    response = client.patch(f"{API}/business/{owner['tenant_id']}", json={"phone": "1"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_dashboard_stats(client, owner, other_owner):
    first = create_product(client, owner, name="Corolla")
    create_product(client, owner, name="Civic", status="sold")
    create_product(client, owner, name="Camry", status="out_of_stock")
    create_product(client, other_owner, name="Dress")

    client.get(f"{API}/public/store/{owner['slug']}/products/{first['id']}")
    client.get(f"{API}/public/store/{owner['slug']}/products/{first['id']}")
    client.post(f"{API}/public/store/{owner['slug']}/products/{first['id']}/click")

    response = client.get(f"{API}/dashboard/stats", headers=owner["headers"])

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "total_products": 3,
        "total_views": 2,
        "total_clicks": 1,
        "by_status": {"available": 1, "sold": 1, "out_of_stock": 1},
    }


def test_dashboard_stats_for_empty_catalog(client, owner):
    body = client.get(f"{API}/dashboard/stats", headers=owner["headers"]).json()

    assert body["total_products"] == 0
    assert body["by_status"] == {"available": 0, "sold": 0, "out_of_stock": 0}


def test_contact_email_is_validated(client, owner):
    url = f"{API}/business/{owner['tenant_id']}"

    rejected = client.patch(url, json={"email": "not-an-email"}, headers=owner["headers"])
    accepted = client.patch(url, json={"email": " Shop@Example.com "}, headers=owner["headers"])
    cleared = client.patch(url, json={"email": None}, headers=owner["headers"])

    assert rejected.status_code == status.HTTP_400_BAD_REQUEST
    assert accepted.json()["business"]["email"] == "shop@example.com"
    assert cleared.json()["business"]["email"] is None
