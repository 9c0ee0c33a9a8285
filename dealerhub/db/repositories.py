"""
Ownership-Scoped Repositories
Every lookup and mutation of products, orders and inquiries goes through these
classes, and every query is filtered by the acting user's id.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from .models import Inquiry, Order, Product, UploadHistory, User

logger = logging.getLogger(__name__)


class UserRepository:
    """Lookups by identity; users are not tenant-scoped rows themselves."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def exists(self, user_id: int) -> bool:
        return self.session.query(User.id).filter(User.id == user_id).first() is not None

    def find_by_email_or_phone(self, email_or_phone: str) -> Optional[User]:
        return (
            self.session.query(User)
            .filter(
                (User.email == email_or_phone)
                | (User.registered_legal_number == email_or_phone)
            )
            .first()
        )

    def find_conflicting(self, username: str, email: str, phone: str) -> Optional[User]:
        return (
            self.session.query(User)
            .filter(
                (User.username == username)
                | (User.email == email)
                | (User.registered_legal_number == phone)
            )
            .first()
        )

    def list_all(self) -> List[User]:
        return self.session.query(User).order_by(User.id).all()


class ProductRepository:
    """Catalog entries, always scoped by owner."""

    def __init__(self, session: Session):
        self.session = session

    def list_for_owner(self, owner_id: int, visible_only: bool = False) -> List[Product]:
        query = self.session.query(Product).filter(Product.user_id == owner_id)
        if visible_only:
            query = query.filter(Product.visibility.is_(True))
        return query.order_by(Product.id).all()

    def get_owned(self, product_id: int, owner_id: int) -> Optional[Product]:
        return (
            self.session.query(Product)
            .filter(Product.id == product_id, Product.user_id == owner_id)
            .first()
        )

    def get(self, product_id: int) -> Optional[Product]:
        """Unscoped existence lookup, used when a buyer references a listing."""
        return self.session.get(Product, product_id)

    def delete_for_owner(self, owner_id: int) -> int:
        """Delete the owner's whole catalog. Does not commit."""
        return (
            self.session.query(Product)
            .filter(Product.user_id == owner_id)
            .delete(synchronize_session=False)
        )

    def add_all(self, owner_id: int, entries: Sequence[Dict[str, Any]]) -> List[Product]:
        """Insert projected catalog entries for the owner. Does not commit."""
        products = [Product(**entry, user_id=owner_id) for entry in entries]
        self.session.add_all(products)
        self.session.flush()
        return products


class UploadHistoryRepository:
    """Append-only ingestion audit records."""

    def __init__(self, session: Session):
        self.session = session

    def record(self, **fields: Any) -> UploadHistory:
        entry = UploadHistory(**fields)
        self.session.add(entry)
        self.session.flush()
        return entry

    def list_for_user(self, user_id: int) -> List[UploadHistory]:
        return (
            self.session.query(UploadHistory)
            .filter(UploadHistory.user_id == user_id)
            .order_by(desc(UploadHistory.upload_date), desc(UploadHistory.id))
            .all()
        )


class OrderRepository:
    """Orders, scoped by customer."""

    def __init__(self, session: Session):
        self.session = session

    def add(self, order: Order) -> Order:
        self.session.add(order)
        self.session.flush()
        return order

    def list_for_customer(self, customer_id: int) -> List[Order]:
        return (
            self.session.query(Order)
            .filter(Order.customer_id == customer_id)
            .order_by(Order.order_id)
            .all()
        )

    def get_owned(self, order_id: int, customer_id: int) -> Optional[Order]:
        return (
            self.session.query(Order)
            .filter(Order.order_id == order_id, Order.customer_id == customer_id)
            .first()
        )


# Columns returned by the sent/received inquiry listings
_LISTING_COLUMNS = (
    Product.brand,
    Product.gender,
    Product.total_price,
    Product.launch_year,
    Product.model_no,
    Product.metal_type,
    Product.case_size,
    Product.condition,
    Product.image_link,
    Product.location,
    Inquiry.id,
    Inquiry.create_time,
    Inquiry.product_id,
    Inquiry.user_id,
    Inquiry.note,
    Inquiry.status,
    User.username,
    User.email,
    User.company_name,
    User.company_address,
)


class InquiryRepository:
    """
    Inquiries, scoped either by inquirer or by ownership of the product the
    inquiry is about.
    """

    def __init__(self, session: Session):
        self.session = session

    def add(self, inquiry: Inquiry) -> Inquiry:
        self.session.add(inquiry)
        self.session.flush()
        return inquiry

    def get_by_inquirer(self, inquiry_id: int, user_id: int) -> Optional[Inquiry]:
        return (
            self.session.query(Inquiry)
            .filter(Inquiry.id == inquiry_id, Inquiry.user_id == user_id)
            .first()
        )

    def get_for_product_owner(self, inquiry_id: int, owner_id: int) -> Optional[Inquiry]:
        return (
            self.session.query(Inquiry)
            .join(Product, Product.id == Inquiry.product_id)
            .filter(Inquiry.id == inquiry_id, Product.user_id == owner_id)
            .first()
        )

    def get_for_participant(self, inquiry_id: int, user_id: int) -> Optional[Inquiry]:
        """Inquiry visible to either its inquirer or the owner of its product."""
        return (
            self.session.query(Inquiry)
            .join(Product, Product.id == Inquiry.product_id)
            .filter(
                Inquiry.id == inquiry_id,
                (Inquiry.user_id == user_id) | (Product.user_id == user_id),
            )
            .first()
        )

    def list_for_owned_product(self, product_id: int, owner_id: int) -> List[Inquiry]:
        return (
            self.session.query(Inquiry)
            .join(Product, Product.id == Inquiry.product_id)
            .filter(Inquiry.product_id == product_id, Product.user_id == owner_id)
            .order_by(Inquiry.id)
            .all()
        )

    def list_sent(self, user_id: int) -> List[Dict[str, Any]]:
        """Inquiries the user created, joined with the product and the inquirer."""
        stmt = (
            select(*_LISTING_COLUMNS)
            .select_from(Inquiry)
            .join(Product, Product.id == Inquiry.product_id)
            .join(User, User.id == Inquiry.user_id)
            .where(Inquiry.user_id == user_id)
            .order_by(Inquiry.id)
        )
        return [dict(row._mapping) for row in self.session.execute(stmt)]

    def list_received(self, user_id: int) -> List[Dict[str, Any]]:
        """
        Inquiries on products the user owns, excluding the user's own.

        `Inquiry.user_id != :user_id` keeps SQL NULL semantics, so anonymous
        inquiries are not part of this listing.
        """
        stmt = (
            select(*_LISTING_COLUMNS)
            .select_from(Inquiry)
            .join(Product, Inquiry.product_id == Product.id)
            .join(User, Product.user_id == User.id)
            .where(
                Inquiry.user_id != user_id,
                Product.user_id == user_id,
                User.id == user_id,
            )
            .order_by(Inquiry.id)
        )
        return [dict(row._mapping) for row in self.session.execute(stmt)]

    def delete(self, inquiry: Inquiry) -> None:
        self.session.delete(inquiry)
        self.session.flush()
