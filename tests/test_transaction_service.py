import re
from datetime import datetime
from decimal import Decimal

import pytest

from models import OfferStatus, PaymentTransaction, PaymentType, TransactionStatus
from services import transaction_service
from services.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError

TXN_PATTERN = re.compile(r"^TXN_[0-9A-Z]+_[0-9A-Z]{8}$")


def _count(db_session, **filters):
    return db_session.query(PaymentTransaction).filter_by(**filters).count()


class TestBookingTransaction:
    def test_creates_booking_from_requested_advance(self, db_session, tenant, offer, id_generator):
        tx, reused = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id, id_generator)

        assert reused is False
        assert TXN_PATTERN.match(tx.transaction_id)
        assert tx.payment_type == PaymentType.BOOKING
        assert tx.status == TransactionStatus.CREATED
        assert tx.amount == Decimal("5000")
        assert tx.currency == "INR"
        assert tx.rent_month is None
        assert (tx.property_id, tx.owner_id, tx.tenant_id) == (offer.property_id, offer.owner_id, offer.tenant_id)
        assert tx.owner_verified is False

    def test_falls_back_to_offered_booking_amount(self, db_session, tenant, make_offer):
        offer = make_offer(requested_advance_amount=None, offer_booking_amount=Decimal("3000"))
        tx, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        assert tx.amount == Decimal("3000")

    def test_second_call_reuses(self, db_session, tenant, offer, id_generator):
        first, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id, id_generator)
        second, reused = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id, id_generator)

        assert reused is True
        assert second.id == first.id
        assert _count(db_session, offer_id=offer.id, payment_type=PaymentType.BOOKING) == 1

    def test_booking_allowed_before_acceptance(self, db_session, tenant, make_offer):
        offer = make_offer(status=OfferStatus.PENDING)
        tx, reused = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        assert reused is False
        assert tx.offer_id == offer.id

    def test_requires_booking_amount(self, db_session, tenant, make_offer):
        offer = make_offer(requested_advance_amount=None, offer_booking_amount=None)
        with pytest.raises(ValidationError, match="requestedAdvanceAmount"):
            transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)

    def test_only_tenant_can_create(self, db_session, owner, offer):
        with pytest.raises(ForbiddenError):
            transaction_service.create_booking_transaction(db_session, owner.id, offer.id)

    def test_missing_offer(self, db_session, tenant):
        with pytest.raises(NotFoundError, match="Offer not found"):
            transaction_service.create_booking_transaction(db_session, tenant.id, 12345)

    def test_concurrent_create_resolves_to_stored_transaction(self, db_session, tenant, offer, monkeypatch):
        stored, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        db_session.commit()
        # Simulate a request whose lookup ran before `stored` was committed
        monkeypatch.setattr(transaction_service, "_latest_for_offer", lambda db, offer_id: None)

        tx, reused = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)

        assert reused is True
        assert tx.id == stored.id
        assert _count(db_session, offer_id=offer.id) == 1

    def test_id_collision_raises_conflict(self, db_session, tenant, offer, make_offer):
        fixed = lambda: "TXN_FIXED_AAAAAAAA"
        transaction_service.create_booking_transaction(db_session, tenant.id, offer.id, fixed)
        db_session.commit()
        other = make_offer()

        with pytest.raises(ConflictError):
            transaction_service.create_booking_transaction(db_session, tenant.id, other.id, fixed)
        assert _count(db_session, offer_id=other.id) == 0

    def test_taken_ids_are_redrawn(self, db_session, tenant, offer, make_offer):
        transaction_service.create_booking_transaction(db_session, tenant.id, offer.id, lambda: "TXN_1_AAAAAAAA")
        db_session.commit()
        candidates = iter(["TXN_1_AAAAAAAA", "TXN_1_AAAAAAAA", "TXN_2_BBBBBBBB"])
        other = make_offer()

        tx, reused = transaction_service.create_booking_transaction(
            db_session, tenant.id, other.id, lambda: next(candidates)
        )

        assert reused is False
        assert tx.transaction_id == "TXN_2_BBBBBBBB"


class TestRentTransaction:
    def test_idempotent_per_month(self, db_session, tenant, offer, id_generator):
        january, reused = transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, "2025-01", id_generator)
        assert reused is False
        again, reused_again = transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, "2025-01", id_generator)
        february, reused_feb = transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, "2025-02", id_generator)

        assert reused_again is True
        assert again.id == january.id
        assert reused_feb is False
        assert february.id != january.id
        assert january.amount == Decimal("15000")
        assert january.rent_month == "2025-01"
        assert _count(db_session, offer_id=offer.id, payment_type=PaymentType.RENT) == 2

    def test_booking_request_returns_latest_transaction_of_any_type(self, db_session, tenant, offer):
        transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, "2026-01")
        booking, reused = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        assert reused is True
        assert booking.payment_type == PaymentType.RENT

    @pytest.mark.parametrize("month", ["2025-1", "abc", "2025/01", "202501", "25-01", "２０２５-０１"])
    def test_rejects_malformed_month(self, db_session, tenant, offer, month):
        with pytest.raises(ValidationError, match="YYYY-MM"):
            transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, month)

    def test_requires_month(self, db_session, tenant, offer):
        with pytest.raises(ValidationError, match="rentMonth is required"):
            transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, "  ")

    @pytest.mark.parametrize("status", [OfferStatus.PENDING, OfferStatus.REJECTED])
    def test_requires_accepted_offer(self, db_session, tenant, make_offer, status):
        offer = make_offer(status=status)
        with pytest.raises(ValidationError, match="not accepted"):
            transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, "2026-01")
        assert _count(db_session, offer_id=offer.id) == 0

    def test_only_tenant_can_create(self, db_session, stranger, offer):
        with pytest.raises(ForbiddenError):
            transaction_service.create_rent_transaction(db_session, stranger.id, offer.id, "2026-01")


class TestMarkPaid:
    def test_marks_paid_once(self, db_session, tenant, offer):
        tx, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        first_time = datetime(2026, 1, 3, 10, 0)

        transaction_service.mark_paid(db_session, tx.transaction_id, tenant.id, now=first_time)
        again = transaction_service.mark_paid(db_session, tx.transaction_id, tenant.id, now=datetime(2026, 1, 4))

        assert again.status == TransactionStatus.PAID
        assert again.paid_at == first_time

    def test_only_tenant_marks_paid(self, db_session, owner, tenant, offer):
        tx, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        with pytest.raises(ForbiddenError):
            transaction_service.mark_paid(db_session, tx.transaction_id, owner.id)
        assert tx.status == TransactionStatus.CREATED

    def test_unknown_transaction(self, db_session, tenant):
        with pytest.raises(NotFoundError, match="Transaction not found"):
            transaction_service.mark_paid(db_session, "TXN_NOPE_00000000", tenant.id)


class TestVerify:
    def test_wrong_owner_is_forbidden_and_changes_nothing(self, db_session, tenant, stranger, offer):
        tx, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        transaction_service.mark_paid(db_session, tx.transaction_id, tenant.id)

        with pytest.raises(ForbiddenError):
            transaction_service.verify(db_session, tx.transaction_id, stranger.id)

        assert tx.owner_verified is False
        assert tx.owner_verified_at is None
        assert offer.booking_verified is False

    def test_verify_unpaid_sets_flag_but_skips_cascade(self, db_session, owner, tenant, offer):
        tx, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        when = datetime(2026, 1, 15, 9, 0)

        result = transaction_service.verify(db_session, tx.transaction_id, owner.id, now=when)

        assert result.transaction.owner_verified is True
        assert result.transaction.owner_verified_at == when
        assert result.cascade.ran is False
        assert result.cascade.skipped_reason == "transaction_not_paid"
        assert offer.booking_verified is False


class TestListing:
    def test_incoming_and_outgoing_filters(self, db_session, owner, tenant, offer):
        booking, _ = transaction_service.create_booking_transaction(db_session, tenant.id, offer.id)
        rent, _ = transaction_service.create_rent_transaction(db_session, tenant.id, offer.id, "2026-01")
        transaction_service.mark_paid(db_session, rent.transaction_id, tenant.id)

        incoming = transaction_service.list_incoming(db_session, owner.id)
        assert [tx.id for tx in incoming] == [rent.id, booking.id]

        assert [tx.id for tx in transaction_service.list_outgoing(db_session, tenant.id, payment_type="booking")] == [booking.id]
        assert [tx.id for tx in transaction_service.list_incoming(db_session, owner.id, status="PAID")] == [rent.id]
        assert transaction_service.list_incoming(db_session, owner.id, owner_verified=True) == []
        assert transaction_service.list_outgoing(db_session, owner.id) == []

    def test_invalid_filter(self, db_session, owner):
        with pytest.raises(ValidationError, match="paymentType"):
            transaction_service.list_incoming(db_session, owner.id, payment_type="deposit")
