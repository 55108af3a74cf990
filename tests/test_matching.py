"""
Tests for the property request match pass
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.models.enums import NotificationType
from app.models.notification_model import Notification
from app.schemas.property_request_schema import PropertyRequestCreate
from app.services import notification_service, property_request_service


def make_request(**fields) -> PropertyRequestCreate:
    data = {"title": "Looking for a flat", "property_type": "sale", "category": "apartment"}
    data.update(fields)
    return PropertyRequestCreate(**data)


def match_notifications(db_session, owner_id):
    return (
        db_session.query(Notification)
        .filter(
            Notification.user_id == owner_id,
            Notification.type == NotificationType.PROPERTY_MATCH.value,
        )
        .order_by(Notification.id)
        .all()
    )


class TestMatchScenario:
    """End to end: a listing owner hears about a matching request"""

    def test_baghdad_apartment(self, client, alice, bob, auth_headers):
        listing = client.post(
            "/api/properties/",
            data={
                "title": "شقة في الكرادة",
                "price": "100000000",
                "property_type": "sale",
                "category": "apartment",
                "location": "الكرادة",
                "city": "بغداد",
            },
            headers=auth_headers(alice),
        ).json()["property"]

        response = client.post(
            "/api/property-requests/",
            json={
                "title": "أبحث عن شقة",
                "property_type": "sale",
                "category": "apartment",
                "max_price": 150000000,
                "preferred_cities": ["بغداد"],
            },
            headers=auth_headers(bob),
        )
        assert response.status_code == 201
        created = response.json()
        assert created["match_count"] == 1

        notifications = client.get("/api/notifications/", headers=auth_headers(alice)).json()["notifications"]
        assert len(notifications) == 1
        match = notifications[0]
        assert match["type"] == "property_match"
        assert match["request"]["id"] == created["request_id"]
        assert match["request"]["requester_username"] == "bob"
        assert match["property"]["id"] == listing["id"]
        assert listing["title"] in match["content"]

        # the requester is not notified
        assert client.get("/api/notifications/unread-count", headers=auth_headers(bob)).json() == {"count": 0}


class TestMatchingService:
    """Tests for property_request_service matching"""

    def test_price_type_and_category_bound_matches(self, db_session, alice, bob, make_property):
        make_property(alice, title="In budget", price=140000000)
        make_property(alice, title="Too expensive", price=160000000)
        make_property(alice, title="Rental", property_type="rent", price=1000000)
        make_property(alice, title="House", category="house", price=1000000)

        request, count = property_request_service.create_request(
            db_session, bob, make_request(max_price=150000000)
        )
        assert count == 1
        titles = [n.property.title for n in match_notifications(db_session, alice.id)]
        assert titles == ["In budget"]
        assert all(n.property_request_id == request.id for n in match_notifications(db_session, alice.id))

    def test_inclusive_bounds(self, db_session, alice, bob, make_property):
        make_property(alice, price=100, bedrooms=2, area=80)
        _, count = property_request_service.create_request(
            db_session,
            bob,
            make_request(
                min_price=100, max_price=100,
                min_bedrooms=2, max_bedrooms=2,
                min_area=80, max_area=80,
            ),
        )
        assert count == 1

    def test_bedroom_and_area_bounds(self, db_session, alice, bob, make_property):
        make_property(alice, bedrooms=1, area=200)
        make_property(alice, bedrooms=4, area=60)
        make_property(alice, bedrooms=None, area=None)
        _, count = property_request_service.create_request(
            db_session, bob, make_request(min_bedrooms=2, min_area=100)
        )
        assert count == 0

    def test_city_substring_any_of(self, db_session, alice, bob, make_property):
        make_property(alice, title="New Baghdad", city="بغداد الجديدة")
        make_property(alice, title="Basra", city="البصرة")
        make_property(alice, title="Erbil", city="أربيل")
        _, count = property_request_service.create_request(
            db_session, bob, make_request(preferred_cities=["بغداد", "أربيل"])
        )
        assert count == 2
        titles = sorted(n.property.title for n in match_notifications(db_session, alice.id))
        assert titles == ["Erbil", "New Baghdad"]

    def test_inactive_properties_never_match(self, db_session, alice, bob, make_property):
        make_property(alice, status="sold")
        make_property(alice, status="inactive")
        _, count = property_request_service.create_request(db_session, bob, make_request())
        assert count == 0

    def test_one_notification_per_owner_listing(self, db_session, alice, bob, make_user, make_property):
        carol = make_user("carol")
        make_property(alice)
        make_property(alice)
        make_property(carol)
        _, count = property_request_service.create_request(db_session, bob, make_request())
        assert count == 3
        assert len(match_notifications(db_session, alice.id)) == 2
        assert len(match_notifications(db_session, carol.id)) == 1

    def test_no_dedup_across_requests(self, db_session, alice, bob, make_property):
        make_property(alice)
        property_request_service.create_request(db_session, bob, make_request())
        property_request_service.create_request(db_session, bob, make_request())
        assert len(match_notifications(db_session, alice.id)) == 2

    def test_failed_insert_is_skipped(self, db_session, alice, bob, make_property):
        make_property(alice, title="First")
        make_property(alice, title="Second")
        original = notification_service.build_property_match
        calls = []

        def flaky_build(request, prop):
            calls.append(prop.title)
            notification = original(request, prop)
            if prop.title == "First":
                # violates NOT NULL on insert
                notification.title = None
            return notification

        with patch.object(notification_service, "build_property_match", side_effect=flaky_build):
            request, count = property_request_service.create_request(db_session, bob, make_request())

        assert calls == ["First", "Second"]
        assert count == 1
        assert [n.property.title for n in match_notifications(db_session, alice.id)] == ["Second"]
        assert request.id is not None

    def test_match_count_matches_notifications(self, db_session, alice, bob, make_property):
        make_property(alice)
        make_property(alice)
        request, count = property_request_service.create_request(db_session, bob, make_request())
        [listed] = property_request_service.list_user_requests(db_session, bob.id)
        assert listed.id == request.id
        assert listed.match_count == count == 2
        assert len(match_notifications(db_session, alice.id)) == 2

    def test_wildcard_city_is_literal(self, db_session, alice, bob, make_property):
        make_property(alice, city="Basra")
        make_property(alice, city="Ba_ra")
        _, count = property_request_service.create_request(
            db_session, bob, make_request(preferred_cities=["%"])
        )
        assert count == 0
        _, count = property_request_service.create_request(
            db_session, bob, make_request(preferred_cities=["a_r"])
        )
        assert count == 1
        assert [n.property.city for n in match_notifications(db_session, alice.id)] == ["Ba_ra"]

    def test_request_rolls_back_on_commit_failure(self, db_session, alice, bob, make_property):
        make_property(alice)
        with patch.object(db_session, "commit", side_effect=SQLAlchemyError("boom")):
            with pytest.raises(SQLAlchemyError):
                property_request_service.create_request(db_session, bob, make_request())
        assert match_notifications(db_session, alice.id) == []
