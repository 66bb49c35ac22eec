from datetime import date, datetime
from decimal import Decimal

import pytest

from models import Offer, OfferStatus
from services.errors import ForbiddenError, NotFoundError, ValidationError
from services.offer_service import ACTION_ADVANCE_REQUESTED, OfferService


def _terms(**overrides):
    terms = {
        "offer_rent": "15000",
        "joining_date_estimate": "Early March",
        "desired_joining_date": "2026-03-10",
        "offer_booking_amount": 5000,
        "needs_bike_parking": True,
        "tenant_type": " family ",
        "accepts_rules": True,
        "match_percent": 82.4,
    }
    terms.update(overrides)
    return terms


class TestCreateOffer:
    def test_creates_pending_offer_with_parties_from_property(self, db_session, owner, tenant, listing):
        offer = OfferService.create_offer(db_session, tenant.id, listing.id, _terms())

        assert offer.id is not None
        assert offer.status == OfferStatus.PENDING
        assert offer.owner_id == owner.id
        assert offer.tenant_id == tenant.id
        assert offer.offer_rent == Decimal("15000")
        assert offer.desired_joining_date == date(2026, 3, 10)
        assert offer.tenant_type == "family"
        assert offer.match_percent == 82
        assert offer.needs_bike_parking is True
        assert offer.needs_car_parking is False
        assert offer.booking_verified is False

    @pytest.mark.parametrize("rent", [None, "", "abc", 0, -100, "NaN"])
    def test_rejects_invalid_rent(self, db_session, tenant, listing, rent):
        with pytest.raises(ValidationError, match="offerRent"):
            OfferService.create_offer(db_session, tenant.id, listing.id, _terms(offer_rent=rent))

    def test_requires_joining_estimate(self, db_session, tenant, listing):
        with pytest.raises(ValidationError, match="joiningDateEstimate"):
            OfferService.create_offer(db_session, tenant.id, listing.id, _terms(joining_date_estimate="   "))

    def test_rejects_unparseable_joining_date(self, db_session, tenant, listing):
        with pytest.raises(ValidationError, match="desiredJoiningDate"):
            OfferService.create_offer(db_session, tenant.id, listing.id, _terms(desired_joining_date="soon"))

    def test_match_percent_out_of_range(self, db_session, tenant, listing):
        with pytest.raises(ValidationError, match="matchPercent"):
            OfferService.create_offer(db_session, tenant.id, listing.id, _terms(match_percent=140))

    def test_non_numeric_match_percent_is_zero(self, db_session, tenant, listing):
        offer = OfferService.create_offer(db_session, tenant.id, listing.id, _terms(match_percent="high"))
        assert offer.match_percent == 0

    def test_unknown_property(self, db_session, tenant):
        with pytest.raises(NotFoundError, match="Property not found"):
            OfferService.create_offer(db_session, tenant.id, 999, _terms())


class TestOwnerDecisions:
    def test_accept(self, db_session, owner, make_offer):
        offer = make_offer(status=OfferStatus.PENDING)
        OfferService.accept_or_reject(db_session, offer.id, owner.id, "Accepted")
        assert offer.status == OfferStatus.ACCEPTED

    def test_reject(self, db_session, owner, make_offer):
        offer = make_offer(status=OfferStatus.PENDING)
        OfferService.accept_or_reject(db_session, offer.id, owner.id, OfferStatus.REJECTED)
        assert offer.status == OfferStatus.REJECTED

    @pytest.mark.parametrize("decision", ["pending", "maybe", "", None])
    def test_invalid_decision(self, db_session, owner, make_offer, decision):
        offer = make_offer(status=OfferStatus.PENDING)
        with pytest.raises(ValidationError, match="Invalid status"):
            OfferService.accept_or_reject(db_session, offer.id, owner.id, decision)
        assert offer.status == OfferStatus.PENDING

    def test_only_owner_decides(self, db_session, tenant, make_offer):
        offer = make_offer(status=OfferStatus.PENDING)
        with pytest.raises(ForbiddenError):
            OfferService.accept_or_reject(db_session, offer.id, tenant.id, "accepted")

    def test_missing_offer(self, db_session, owner):
        with pytest.raises(NotFoundError, match="Offer not found"):
            OfferService.accept_or_reject(db_session, 404, owner.id, "accepted")


class TestRequestAdvance:
    def test_sets_advance_and_joining_date(self, db_session, owner, make_offer):
        offer = make_offer(requested_advance_amount=None, desired_joining_date=None)
        meeting = datetime(2026, 2, 20, 11, 0)

        OfferService.request_advance(
            db_session, offer.id, owner.id, "7500",
            validity_days="3.9", proposed_meeting_time=meeting, desired_joining_date="2026-03-31"
        )

        assert offer.requested_advance_amount == Decimal("7500")
        assert offer.requested_advance_validity_days == 3
        assert offer.proposed_meeting_time == meeting
        assert offer.desired_joining_date == date(2026, 3, 31)
        assert offer.action_type == ACTION_ADVANCE_REQUESTED
        assert offer.booking_amount == Decimal("7500")

    @pytest.mark.parametrize("amount", [0, "-1", "x", None])
    def test_invalid_amount(self, db_session, owner, offer, amount):
        with pytest.raises(ValidationError, match="requestedAdvanceAmount"):
            OfferService.request_advance(db_session, offer.id, owner.id, amount)

    def test_invalid_validity(self, db_session, owner, offer):
        with pytest.raises(ValidationError, match="requestedAdvanceValidityDays"):
            OfferService.request_advance(db_session, offer.id, owner.id, 5000, validity_days=0)

    def test_tenant_cannot_request(self, db_session, tenant, offer):
        with pytest.raises(ForbiddenError):
            OfferService.request_advance(db_session, offer.id, tenant.id, 5000)


class TestConfirmMoveIn:
    def test_requires_verified_booking(self, db_session, owner, offer):
        with pytest.raises(ValidationError, match="not verified"):
            OfferService.confirm_move_in(db_session, offer.id, owner.id)

    def test_requires_accepted_offer(self, db_session, owner, make_offer):
        offer = make_offer(status=OfferStatus.PENDING)
        with pytest.raises(ValidationError, match="not accepted"):
            OfferService.confirm_move_in(db_session, offer.id, owner.id)

    def test_confirms(self, db_session, owner, offer):
        offer.mark_booking_verified(datetime(2026, 1, 2))
        moved_in = datetime(2026, 1, 5, 9, 30)

        OfferService.confirm_move_in(db_session, offer.id, owner.id, now=moved_in)

        assert offer.tenant_move_in_confirmed is True
        assert offer.tenant_move_in_confirmed_at == moved_in


class TestListing:
    def test_received_and_sent_are_newest_first(self, db_session, owner, tenant, make_offer):
        first = make_offer()
        second = make_offer()

        received = OfferService.list_received(db_session, owner.id)
        sent = OfferService.list_sent(db_session, tenant.id)

        assert [o.id for o in received] == [second.id, first.id]
        assert [o.id for o in sent] == [second.id, first.id]
        assert OfferService.list_received(db_session, tenant.id) == []

    def test_history_is_scoped_to_owner(self, db_session, owner, tenant, listing, make_offer):
        make_offer()
        make_offer()

        history = OfferService.offer_history(db_session, owner.id, listing.id, tenant.id)
        assert len(history) == 2
        assert all(isinstance(o, Offer) for o in history)
        assert OfferService.offer_history(db_session, tenant.id, listing.id, tenant.id) == []
