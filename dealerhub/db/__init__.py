"""
Database ORM Models
SQLAlchemy ORM models, session factory and ownership-scoped repositories.
"""

from .models import (
    Base,
    User,
    Product,
    UploadHistory,
    Inquiry,
    Order,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    InquiryStatus,
)

__all__ = [
    "Base",
    "User",
    "Product",
    "UploadHistory",
    "Inquiry",
    "Order",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "InquiryStatus",
]
