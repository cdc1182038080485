"""Role/property authorization rules."""

import uuid

import pytest

from zamora.auth.policy import ROLE_ACTIONS, Action, Caller, Role, authorize, is_allowed, load_caller
from zamora.errors import AuthorizationError
from zamora.models.user import User

PROPERTY_A = uuid.uuid4()
PROPERTY_B = uuid.uuid4()


def _caller(role: str, *, member_of=(), owns=()) -> Caller:
    user = User(id=uuid.uuid4(), email=f"{role}@test.com", role=role, is_active=True)
    return Caller(
        user=user,
        role=role,
        property_ids=frozenset(member_of),
        owned_property_ids=frozenset(owns),
    )


class TestIsAllowed:
    def test_every_action_has_an_entry(self):
        assert set(ROLE_ACTIONS) == set(Action)

    def test_admin_bypasses_everything(self):
        for role in ("admin", "super_admin"):
            caller = _caller(role)
            assert is_allowed(caller, Action.ADMIN_CONSOLE)
            assert is_allowed(caller, Action.FOLIOS_SETTLE, PROPERTY_A)

    def test_admin_console_is_admin_only(self):
        assert not is_allowed(_caller("owner", owns=[PROPERTY_A]), Action.ADMIN_CONSOLE)

    def test_role_must_be_granted(self):
        waiter = _caller("waiter", member_of=[PROPERTY_A])
        assert is_allowed(waiter, Action.ORDERS_UPDATE_STATUS, PROPERTY_A)
        assert not is_allowed(waiter, Action.STOCK_MANAGE, PROPERTY_A)

    def test_till_is_for_cashiers_and_management(self):
        cashier = _caller("cashier", member_of=[PROPERTY_A])
        assert is_allowed(cashier, Action.CASHIER_READ, PROPERTY_A)
        assert not is_allowed(cashier, Action.PAYMENTS_MANAGE, PROPERTY_A)
        assert not is_allowed(_caller("waiter", member_of=[PROPERTY_A]), Action.CASHIER_READ, PROPERTY_A)

    def test_menu_and_tables_are_management_only(self):
        for action in (Action.MENU_MANAGE, Action.TABLES_MANAGE):
            assert is_allowed(_caller("manager", member_of=[PROPERTY_A]), action, PROPERTY_A)
            assert not is_allowed(_caller("chef", member_of=[PROPERTY_A]), action, PROPERTY_A)

    def test_property_scope(self):
        chef = _caller("chef", member_of=[PROPERTY_A])
        assert is_allowed(chef, Action.ORDERS_READ, PROPERTY_A)
        assert not is_allowed(chef, Action.ORDERS_READ, PROPERTY_B)

    def test_owner_scope_comes_from_ownership(self):
        owner = _caller("owner", owns=[PROPERTY_A])
        assert is_allowed(owner, Action.STATS_READ, PROPERTY_A)
        assert not is_allowed(owner, Action.STATS_READ, PROPERTY_B)

    def test_plain_user_has_no_staff_actions(self):
        user = _caller("user")
        assert not is_allowed(user, Action.ORDERS_READ)
        assert not is_allowed(user, Action.NOTIFICATIONS_SUBSCRIBE)


class TestAuthorize:
    def test_wrong_role_message(self):
        with pytest.raises(AuthorizationError, match="insufficient role"):
            authorize(_caller("housekeeping", member_of=[PROPERTY_A]), Action.FOLIOS_SETTLE, PROPERTY_A)

    def test_wrong_property_message(self):
        with pytest.raises(AuthorizationError, match="do not have access to this property"):
            authorize(_caller("cashier", member_of=[PROPERTY_A]), Action.FOLIOS_SETTLE, PROPERTY_B)

    def test_allowed_returns_none(self):
        assert authorize(_caller(Role.MANAGER, member_of=[PROPERTY_A]), Action.STOCK_MANAGE, PROPERTY_A) is None


class TestLoadCaller:
    async def test_collects_memberships(self, db_session, hotel, restaurant, make_staff):
        waiter = await make_staff("waiter", hotel)
        caller = await load_caller(db_session, waiter)

        assert caller.role == "waiter"
        assert caller.belongs_to(hotel.id)
        assert not caller.belongs_to(restaurant.id)

    async def test_property_creator_is_promoted_to_owner(self, db_session, make_user, hotel):
        user = await make_user("user")
        hotel.created_by = user.id
        await db_session.flush()

        caller = await load_caller(db_session, user)
        assert caller.role == "owner"
        assert hotel.id in caller.owned_property_ids
