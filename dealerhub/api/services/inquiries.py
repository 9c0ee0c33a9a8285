"""
Inquiry Service
Buyer inquiries on listed products: creation (possibly anonymous), the
sent/received listings, note edits by the inquirer, and status decisions by
the product owner.
"""

import logging
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from sqlalchemy.orm import Session

from ...db.models import Inquiry, InquiryStatus
from ...db.repositories import InquiryRepository, ProductRepository
from ..errors import InvalidRequestError, ResourceNotFoundError

logger = logging.getLogger(__name__)

# Allowed target states per current state. Staying in the same state is
# always allowed (no-op); Accept and Reject are final.
INQUIRY_TRANSITIONS: Mapping[InquiryStatus, FrozenSet[InquiryStatus]] = {
    InquiryStatus.PENDING: frozenset({InquiryStatus.ACCEPT, InquiryStatus.REJECT}),
    InquiryStatus.ACCEPT: frozenset(),
    InquiryStatus.REJECT: frozenset(),
}


def can_transition(current: InquiryStatus, target: InquiryStatus) -> bool:
    current, target = InquiryStatus(current), InquiryStatus(target)
    return current == target or target in INQUIRY_TRANSITIONS[current]


class InquiryService:
    """
    Inquiry state-transition controller.

    Args:
        session: Database session
        strict_transitions: Enforce INQUIRY_TRANSITIONS; when False any
            target status overwrites the current one
    """

    def __init__(self, session: Session, strict_transitions: bool = True):
        self.session = session
        self.strict_transitions = strict_transitions
        self.inquiries = InquiryRepository(session)
        self.products = ProductRepository(session)

    def create(self, product_id: int, note: Optional[str], inquirer_id: Optional[int]) -> Inquiry:
        """Create a Pending inquiry. inquirer_id is None for anonymous buyers."""
        if self.products.get(product_id) is None:
            raise ResourceNotFoundError("Product", product_id)

        inquiry = self.inquiries.add(
            Inquiry(product_id=product_id, user_id=inquirer_id, note=note)
        )
        self.session.commit()

        logger.info(
            f"Inquiry {inquiry.id} created on product {product_id} "
            f"by {'user ' + str(inquirer_id) if inquirer_id is not None else 'anonymous'}"
        )
        return inquiry

    @staticmethod
    def _require_actor(actor_id: Optional[int]) -> int:
        if not actor_id:
            raise InvalidRequestError("User ID is missing or invalid.")
        return actor_id

    def sent(self, actor_id: Optional[int]) -> List[Dict[str, Any]]:
        """Inquiries the actor created."""
        return self.inquiries.list_sent(self._require_actor(actor_id))

    def received(self, actor_id: Optional[int]) -> List[Dict[str, Any]]:
        """Inquiries other users made on the actor's products."""
        return self.inquiries.list_received(self._require_actor(actor_id))

    def get(self, inquiry_id: int, actor_id: int) -> Inquiry:
        inquiry = self.inquiries.get_by_inquirer(inquiry_id, actor_id)
        if inquiry is None:
            raise ResourceNotFoundError("Inquiry", inquiry_id)
        return inquiry

    def update_note(self, inquiry_id: int, actor_id: int, note: Optional[str]) -> Inquiry:
        """Replace the note; an empty or missing note keeps the current one."""
        inquiry = self.get(inquiry_id, actor_id)
        if note:
            inquiry.note = note
            self.session.commit()
        return inquiry

    def update_status(self, inquiry_id: int, owner_id: int, target: InquiryStatus) -> Inquiry:
        """
        Accept or reject an inquiry on one of the owner's products.

        Raises:
            ResourceNotFoundError: inquiry missing or not on the owner's product
            InvalidRequestError: transition not allowed in strict mode
        """
        inquiry = self.inquiries.get_for_product_owner(inquiry_id, owner_id)
        if inquiry is None:
            raise ResourceNotFoundError("Inquiry", inquiry_id)

        target = InquiryStatus(target)
        current = InquiryStatus(inquiry.status)

        if self.strict_transitions and not can_transition(current, target):
            raise InvalidRequestError(
                f"Cannot change inquiry status from {current.value} to {target.value}",
                details={"current": current.value, "requested": target.value},
            )

        if current != target:
            inquiry.status = target
            self.session.commit()
            logger.info(f"Inquiry {inquiry_id} status {current.value} -> {target.value}")

        return inquiry

    def delete(self, inquiry_id: int, actor_id: Optional[int]) -> None:
        """Delete an inquiry as its inquirer or as the owner of its product."""
        inquiry = self.inquiries.get_for_participant(inquiry_id, self._require_actor(actor_id))
        if inquiry is None:
            raise ResourceNotFoundError("Inquiry", inquiry_id)

        self.inquiries.delete(inquiry)
        self.session.commit()
        logger.info(f"Inquiry {inquiry_id} deleted by user {actor_id}")

    def list_for_product(self, product_id: int, owner_id: int) -> List[Inquiry]:
        """All inquiries on a product, visible to the product owner only."""
        if self.products.get_owned(product_id, owner_id) is None:
            raise ResourceNotFoundError("Product", product_id)
        return self.inquiries.list_for_owned_product(product_id, owner_id)
