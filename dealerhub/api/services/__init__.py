"""
API Services
Business logic services for API endpoints.
"""

from .inquiries import INQUIRY_TRANSITIONS, InquiryService, can_transition
from .mailer import MailDeliveryError, OTPMailer, get_mailer
from .orders import OrderService
from .otp_store import OTPStoreError, RedisOTPStore, get_otp_store

__all__ = [
    "INQUIRY_TRANSITIONS",
    "InquiryService",
    "can_transition",
    "MailDeliveryError",
    "OTPMailer",
    "get_mailer",
    "OrderService",
    "OTPStoreError",
    "RedisOTPStore",
    "get_otp_store",
]
