"""
SQLAlchemy ORM Models
Database table definitions using SQLAlchemy ORM.
"""

from __future__ import annotations

import enum

from sqlalchemy import (
    Column, String, Integer, Float, Boolean, TIMESTAMP, Enum,
    ForeignKey, Numeric, Text, Index, JSON
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _enum_column(enum_cls, name: str) -> Enum:
    """Persist enum values ("Credit Card"), not member names (CREDIT_CARD)."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class OrderStatus(str, enum.Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELED = "Canceled"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "Credit Card"
    PAYPAL = "PayPal"
    COD = "COD"


class PaymentStatus(str, enum.Enum):
    PAID = "Paid"
    PENDING = "Pending"
    FAILED = "Failed"


class InquiryStatus(str, enum.Enum):
    PENDING = "Pending"
    ACCEPT = "Accept"
    REJECT = "Reject"


class User(Base):
    """
    User model.

    A tenant identity: a dealer company that lists inventory and/or buys.
    """
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)

    # Authentication fields
    password_hash = Column(String(255), nullable=False,
                          comment='Bcrypt hashed password')
    is_verified = Column(Boolean, nullable=False, default=False,
                        comment='Whether the company has been verified by an administrator')
    role_id = Column(Integer, nullable=False, default=3)

    # Company metadata
    company_name = Column(String(255), nullable=False)
    company_address = Column(String(500), nullable=False)
    registered_legal_number = Column(String(32), unique=True, nullable=False,
                                     comment='Company phone number, normalised to +digits')
    documents = Column(JSON, nullable=True)
    plan = Column(String(100), nullable=False)
    company_logo = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    products = relationship("Product", back_populates="owner",
                            cascade="all, delete-orphan", passive_deletes=True)
    upload_history = relationship("UploadHistory", back_populates="user",
                                  cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"


class Product(Base):
    """
    Product model.

    One catalog entry (a watch in stock) owned by exactly one user. Rows are
    only ever created by inventory ingestion, which replaces the owner's whole
    catalog.
    """
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Identifiers
    stock_id = Column(String(255), nullable=False)
    model_no = Column(String(255), nullable=True)
    brand = Column(String(255), nullable=False, index=True)

    # Descriptive attributes
    gender = Column(String(50), nullable=False)
    metal_type = Column(String(100), nullable=True)
    case_size = Column(Float, nullable=True, comment='Case size in millimetres')
    condition = Column(String(100), nullable=False)
    box = Column(String(50), nullable=False)
    paper = Column(String(50), nullable=False)
    total_price = Column(Float, nullable=False, default=0, comment='Total price in USD')
    launch_year = Column(Integer, nullable=True)
    image_link = Column(Text, nullable=True)
    video_link = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)

    visibility = Column(Boolean, nullable=False, default=True)

    # Ownership
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'),
                     nullable=False, index=True)

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())
    updated_at = Column(TIMESTAMP, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    owner = relationship("User", back_populates="products")

    def __repr__(self):
        return f"<Product(id={self.id}, stock_id={self.stock_id}, user_id={self.user_id})>"


class UploadHistory(Base):
    """
    Ingestion run model.

    Append-only record of one inventory upload and its counters.
    """
    __tablename__ = 'upload_history'

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_name = Column(String(255), nullable=False)
    upload_date = Column(TIMESTAMP, nullable=False)
    total_entries = Column(Integer, nullable=False)
    successful_entries = Column(Integer, nullable=False)
    errored_entries = Column(Integer, nullable=False)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE', onupdate='CASCADE'),
                     nullable=False)

    created_at = Column(TIMESTAMP, nullable=False, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="upload_history")

    __table_args__ = (
        Index('idx_upload_history_user_date', 'user_id', 'upload_date'),
    )

    def __repr__(self):
        return f"<UploadHistory(id={self.id}, file_name={self.file_name}, user_id={self.user_id})>"


class Inquiry(Base):
    """
    Inquiry model.

    A buyer's note about one product. The inquirer may be anonymous.
    """
    __tablename__ = 'inquiries'

    id = Column(Integer, primary_key=True, autoincrement=True)
    create_time = Column(TIMESTAMP, nullable=False, server_default=func.now())
    product_id = Column(Integer, ForeignKey('products.id', ondelete='CASCADE'),
                        nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'),
                     nullable=True, index=True,
                     comment='Inquirer, NULL for anonymous inquiries')
    note = Column(Text, nullable=True)
    status = Column(_enum_column(InquiryStatus, 'inquiry_status'), nullable=False,
                    default=InquiryStatus.PENDING)

    def __repr__(self):
        return f"<Inquiry(id={self.id}, product_id={self.product_id}, status={self.status})>"


class Order(Base):
    """
    Order model.

    Links a customer to a product with price and payment metadata. Orders are
    never physically deleted; cancelling sets order_status to Canceled.
    """
    __tablename__ = 'orders'

    order_id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    # Catalog replacement deletes products; the order keeps its price snapshot.
    product_id = Column(Integer, ForeignKey('products.id', ondelete='SET NULL'), nullable=True)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    order_date = Column(TIMESTAMP, nullable=False, server_default=func.now())
    delivery_date = Column(TIMESTAMP, nullable=True)

    payment_method = Column(_enum_column(PaymentMethod, 'payment_method'), nullable=False)
    payment_status = Column(_enum_column(PaymentStatus, 'payment_status'), nullable=False,
                            default=PaymentStatus.PENDING)
    transaction_id = Column(String(255), nullable=True)

    order_status = Column(_enum_column(OrderStatus, 'order_status'), nullable=False,
                          default=OrderStatus.PENDING)
    tracking_number = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index('idx_orders_customer_order', 'customer_id', 'order_id'),
    )

    def __repr__(self):
        return f"<Order(order_id={self.order_id}, customer_id={self.customer_id}, status={self.order_status})>"
