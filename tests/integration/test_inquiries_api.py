"""
Integration tests for the inquiry endpoints.
"""

import pytest

from conftest import add_products, auth_headers


@pytest.fixture
def product(db_session, seller):
    (product,) = add_products(db_session, seller, ["S1"], brand="Rolex")
    return product


def create(client, product, user=None, note="Is this still available?"):
    headers = auth_headers(user) if user else {}
    response = client.post("/api/inquiries", json={"product_id": product.id, "note": note}, headers=headers)
    assert response.status_code == 201
    return response.json()["inquiry"]


def test_create_authenticated(client, product, buyer):
    inquiry = create(client, product, buyer)

    assert inquiry["user_id"] == buyer.id
    assert inquiry["status"] == "Pending"


def test_create_anonymous(client, product):
    assert create(client, product)["user_id"] is None


def test_create_with_invalid_token_is_anonymous(client, product):
    response = client.post(
        "/api/inquiries",
        json={"product_id": product.id, "note": "hi"},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 201
    assert response.json()["inquiry"]["user_id"] is None


def test_sent_and_received(client, product, seller, buyer):
    create(client, product, buyer, note="From buyer")
    create(client, product, note="Anonymous")

    sent = client.get("/api/inquiries/sent", headers=auth_headers(buyer)).json()
    received = client.get("/api/inquiries/recive", headers=auth_headers(seller)).json()

    assert [i["note"] for i in sent] == ["From buyer"]
    assert sent[0]["brand"] == "Rolex"
    assert [i["note"] for i in received] == ["From buyer"]
    assert received[0]["company_name"] == seller.company_name


def test_owner_accepts(client, product, seller, buyer):
    inquiry = create(client, product, buyer)

    response = client.post(
        "/api/inquiries/updatestatus", json={"id": inquiry["id"], "status": "Accept"}, headers=auth_headers(seller)
    )

    assert response.status_code == 200
    assert response.json()["inquiry"]["status"] == "Accept"


def test_non_owner_cannot_decide(client, product, buyer):
    inquiry = create(client, product, buyer)

    response = client.post(
        "/api/inquiries/updatestatus", json={"id": inquiry["id"], "status": "Accept"}, headers=auth_headers(buyer)
    )

    assert response.status_code == 404


def test_decided_inquiry_cannot_reopen(client, product, seller, buyer):
    inquiry = create(client, product, buyer)
    headers = auth_headers(seller)
    client.post("/api/inquiries/updatestatus", json={"id": inquiry["id"], "status": "Reject"}, headers=headers)

    response = client.post(
        "/api/inquiries/updatestatus", json={"id": inquiry["id"], "status": "Pending"}, headers=headers
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"] == {"current": "Reject", "requested": "Pending"}


def test_unknown_status_value(client, product, seller, buyer):
    inquiry = create(client, product, buyer)

    response = client.post(
        "/api/inquiries/updatestatus", json={"id": inquiry["id"], "status": "Maybe"}, headers=auth_headers(seller)
    )

    assert response.status_code == 400


def test_inquirer_reads_and_edits(client, product, seller, buyer):
    inquiry = create(client, product, buyer)
    url = f"/api/inquiries/{inquiry['id']}"

    edited = client.put(url, json={"note": "Would you take 13k?"}, headers=auth_headers(buyer))

    assert edited.json()["inquiry"]["note"] == "Would you take 13k?"
    assert client.get(url, headers=auth_headers(buyer)).json()["note"] == "Would you take 13k?"
    assert client.get(url, headers=auth_headers(seller)).status_code == 404


def test_product_listing_for_owner(client, product, seller, buyer):
    create(client, product, buyer)
    create(client, product)

    own = client.get(f"/api/inquiries/product/{product.id}", headers=auth_headers(seller))
    foreign = client.get(f"/api/inquiries/product/{product.id}", headers=auth_headers(buyer))

    assert len(own.json()) == 2
    assert foreign.status_code == 404


def test_delete(client, product, seller, buyer):
    inquiry = create(client, product, buyer)

    response = client.delete(f"/api/inquiries/{inquiry['id']}", headers=auth_headers(seller))

    assert response.json() == {"message": "Inquiry deleted successfully"}
    assert client.get(f"/api/inquiries/{inquiry['id']}", headers=auth_headers(buyer)).status_code == 404


def test_listings_require_credential(client):
    assert client.get("/api/inquiries/sent").status_code == 401
    assert client.get("/api/inquiries/recive").status_code == 401
