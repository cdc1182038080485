"""Status workflows reject illegal transitions."""

import pytest

from zamora.errors import ConflictError
from zamora.services.bookings import room_status_for
from zamora.services.status import (
    BOOKING_TRANSITIONS,
    FOLIO_TRANSITIONS,
    ORDER_TRANSITIONS,
    SERVICE_REQUEST_TRANSITIONS,
    BookingStatus,
    FolioStatus,
    OrderStatus,
    RoomStatus,
    can_transition,
    ensure_transition,
)


class TestBookingWorkflow:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("pending", "confirmed"),
            ("pending", "cancelled"),
            ("confirmed", "checked_in"),
            ("confirmed", "cancelled"),
            ("checked_in", "checked_out"),
        ],
    )
    def test_legal(self, current, target):
        assert ensure_transition(BOOKING_TRANSITIONS, current, target, entity="booking") is True

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("cancelled", "checked_in"),
            ("checked_out", "checked_in"),
            ("pending", "checked_out"),
            ("checked_in", "cancelled"),
        ],
    )
    def test_illegal(self, current, target):
        with pytest.raises(ConflictError) as exc_info:
            ensure_transition(BOOKING_TRANSITIONS, current, target, entity="booking")
        assert exc_info.value.code == "INVALID_TRANSITION"
        assert exc_info.value.status_code == 409

    def test_same_status_is_noop(self):
        assert ensure_transition(BOOKING_TRANSITIONS, "confirmed", "confirmed", entity="booking") is False

    def test_terminal_statuses_have_no_exits(self):
        assert BOOKING_TRANSITIONS[BookingStatus.CANCELLED] == frozenset()
        assert BOOKING_TRANSITIONS[BookingStatus.CHECKED_OUT] == frozenset()


class TestRoomSideEffects:
    def test_mapping(self):
        assert room_status_for("checked_in") == RoomStatus.OCCUPIED
        assert room_status_for("checked_out") == RoomStatus.DIRTY
        assert room_status_for("cancelled") == RoomStatus.AVAILABLE

    def test_other_statuses_leave_room_alone(self):
        assert room_status_for("confirmed") is None
        assert room_status_for("pending") is None


class TestOrderWorkflow:
    def test_kitchen_flow(self):
        path = ["pending", "preparing", "ready", "delivered", "pos_completed"]
        for current, target in zip(path, path[1:]):
            assert can_transition(ORDER_TRANSITIONS, current, target)

    def test_paid_order_cannot_reopen(self):
        assert not can_transition(ORDER_TRANSITIONS, OrderStatus.POS_COMPLETED, OrderStatus.PENDING)

    def test_delivered_cannot_be_cancelled(self):
        with pytest.raises(ConflictError):
            ensure_transition(ORDER_TRANSITIONS, "delivered", "cancelled", entity="order")


class TestFolioWorkflow:
    def test_closed_folio_can_reopen(self):
        assert can_transition(FOLIO_TRANSITIONS, FolioStatus.CLOSED, FolioStatus.OPEN)

    def test_paid_is_terminal(self):
        assert not can_transition(FOLIO_TRANSITIONS, FolioStatus.PAID, FolioStatus.OPEN)


def test_service_request_resolves_once():
    assert can_transition(SERVICE_REQUEST_TRANSITIONS, "pending", "resolved")
    assert not can_transition(SERVICE_REQUEST_TRANSITIONS, "resolved", "pending")
