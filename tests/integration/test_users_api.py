"""
Integration tests for registration, OTP sign-in, profile and administration.
"""

import pytest

from conftest import TEST_PASSWORD, auth_headers, make_user
from dealerhub.api.security import verify_password, verify_token
from dealerhub.db.models import Order, PaymentMethod, User

SIGN_UP = {
    "username": "horologia",
    "email": "desk@horologia.ch",
    "password": "tourbillon",
    "companyName": "Horologia SA",
    "companyAddress": "Rue du Rhone 10, Geneva",
    "registeredLegalNumber": "0041 22 555 01 23",
    "plan": "premium",
}


def sign_in(client, mailer, identifier, password=TEST_PASSWORD):
    response = client.post("/api/users/sign-in", json={"emailOrPhone": identifier, "password": password})
    assert response.status_code == 200
    return response.json()["userId"], mailer.sent[-1][1]


class TestSignUp:
    def test_registers_unverified_member(self, client):
        response = client.post("/api/users/sign-up", json=SIGN_UP)

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["registered_legal_number"] == "+41225550123"
        assert user["is_verified"] is False
        assert user["role_id"] == 3
        assert "password_hash" not in user

    def test_duplicate_identity(self, client):
        client.post("/api/users/sign-up", json=SIGN_UP)

        response = client.post("/api/users/sign-up", json={**SIGN_UP, "username": "someone-else"})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Username, email, or phone number is already registered"

    @pytest.mark.parametrize(
        "field, value",
        [("email", "not-an-email"), ("password", "123"), ("registeredLegalNumber", "12-34"), ("plan", "  ")],
    )
    def test_invalid_fields(self, client, field, value):
        response = client.post("/api/users/sign-up", json={**SIGN_UP, field: value})

        assert response.status_code == 400


class TestSignIn:
    def test_otp_flow(self, client, mailer, seller):
        user_id, code = sign_in(client, mailer, seller.email)

        assert user_id == seller.id
        assert mailer.sent == [(seller.email, code)]

        response = client.post("/api/users/verify-otp", json={"userId": seller.id, "otp": code})

        assert response.status_code == 200
        body = response.json()
        assert body["user"]["id"] == seller.id
        assert verify_token(body["token"])["sub"] == str(seller.id)
        assert response.cookies.get("token") == body["token"]

    def test_sign_in_by_phone(self, client, mailer, seller):
        user_id, _ = sign_in(client, mailer, "0041 44 000 0001")

        assert user_id == seller.id

    def test_code_is_single_use(self, client, mailer, seller):
        _, code = sign_in(client, mailer, seller.email)
        client.post("/api/users/verify-otp", json={"userId": seller.id, "otp": code})

        response = client.post("/api/users/verify-otp", json={"userId": seller.id, "otp": code})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid or expired OTP"

    def test_expired_code(self, client, mailer, fake_redis, seller):
        _, code = sign_in(client, mailer, seller.email)
        fake_redis.expire_now(f"otp:{seller.id}")

        response = client.post("/api/users/verify-otp", json={"userId": seller.id, "otp": code})

        assert response.status_code == 400

    @pytest.mark.parametrize("identifier, password", [("seller@example.com", "wrong"), ("nobody@example.com", TEST_PASSWORD)])
    def test_bad_credentials(self, client, mailer, seller, identifier, password):
        response = client.post("/api/users/sign-in", json={"emailOrPhone": identifier, "password": password})

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid email/phone or password"
        assert mailer.sent == []

    def test_sign_out_clears_cookie(self, client, seller):
        response = client.post("/api/users/sign-out", headers=auth_headers(seller))

        assert response.status_code == 200
        cookie = response.headers["set-cookie"]
        assert cookie.startswith("token=")
        assert "Max-Age=0" in cookie


class TestProfile:
    def test_read_and_update(self, client, seller):
        headers = auth_headers(seller)

        updated = client.put("/api/users/profile", json={"companyName": "Seller Fine Watches"}, headers=headers)

        assert updated.status_code == 200
        assert client.get("/api/users/profile", headers=headers).json()["company_name"] == "Seller Fine Watches"

    def test_email_taken(self, client, seller, buyer):
        response = client.put("/api/users/profile", json={"email": buyer.email}, headers=auth_headers(seller))

        assert response.status_code == 400

    def test_change_password(self, client, seller, db_session):
        headers = auth_headers(seller)

        wrong = client.put(
            "/api/users/change-password", json={"oldPassword": "nope", "newPassword": "new-secret"}, headers=headers
        )
        right = client.put(
            "/api/users/change-password",
            json={"oldPassword": TEST_PASSWORD, "newPassword": "new-secret"},
            headers=headers,
        )

        assert wrong.status_code == 400
        assert right.status_code == 200
        db_session.expire_all()
        assert verify_password("new-secret", db_session.get(User, seller.id).password_hash)


class TestAdministration:
    def test_members_are_forbidden(self, client, seller):
        response = client.post("/api/users/get-all", headers=auth_headers(seller))

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Access denied. Admins only."

    def test_list_users(self, client, admin, seller):
        response = client.post("/api/users/get-all", headers=auth_headers(admin))

        assert response.status_code == 200
        assert {u["username"] for u in response.json()["users"]} == {"admin", "seller"}

    def test_verify_member(self, client, admin, seller):
        headers = auth_headers(admin)

        first = client.post("/api/users/update-verification-status", json={"userId": seller.id}, headers=headers)
        again = client.post("/api/users/update-verification-status", json={"userId": seller.id}, headers=headers)
        missing = client.post("/api/users/update-verification-status", json={"userId": 999}, headers=headers)

        assert first.json()["user"]["is_verified"] is True
        assert again.status_code == 400
        assert missing.status_code == 404

    def test_delete_member(self, client, admin, db_session):
        member = make_user(db_session, "leaving")

        response = client.post("/api/users/delete", json={"userId": member.id}, headers=auth_headers(admin))

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(User, member.id) is None

    def test_member_with_orders_is_kept(self, client, admin, buyer, db_session):
        db_session.add(Order(customer_id=buyer.id, quantity=1, price=100, payment_method=PaymentMethod.COD))
        db_session.commit()

        response = client.post("/api/users/delete", json={"userId": buyer.id}, headers=auth_headers(admin))

        assert response.status_code == 400
        db_session.expire_all()
        assert db_session.get(User, buyer.id) is not None
