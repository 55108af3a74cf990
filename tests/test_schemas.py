"""
Tests for schemas and validation
"""
from datetime import datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from app.core.config import settings
from app.models.enums import PropertyType, RequestStatus
from app.schemas import (
    message_schema,
    notification_schema,
    pagination_schema,
    property_request_schema,
    property_schema,
    user_schema,
)


class TestUserSchemas:
    """Tests for user schemas"""

    def test_user_create_valid(self):
        user = user_schema.UserCreate(
            username="testuser",
            email="test@example.com",
            full_name="Test User",
            password="password123",
        )
        assert user.username == "testuser"
        assert user.is_admin is False

    def test_user_create_invalid_email(self):
        with pytest.raises(ValidationError):
            user_schema.UserCreate(username="testuser", email="invalid_email", password="password123")

    def test_user_create_short_password(self):
        with pytest.raises(ValidationError):
            user_schema.UserCreate(username="testuser", email="test@example.com", password="12345")

    def test_username_without_spaces(self):
        with pytest.raises(ValidationError):
            user_schema.UserCreate(username="test user", email="test@example.com", password="password123")

    def test_user_update_all_none(self):
        update = user_schema.UserUpdate()
        assert update.model_dump(exclude_none=True) == {}


class TestPropertySchemas:
    """Tests for property schemas"""

    def test_split_features(self):
        assert property_schema.split_features("pool, garden,,garage ") == ["pool", "garden", "garage"]
        assert property_schema.split_features(None) == []
        assert property_schema.split_features("") == []

    def test_property_create_valid(self):
        prop = property_schema.PropertyCreate(
            title=" Flat ",
            price=1000,
            property_type="sale",
            category="villa",
            location="Zayouna",
            city="بغداد",
        )
        assert prop.title == "Flat"
        assert prop.property_type is PropertyType.SALE
        assert prop.features == []
        assert prop.currency == settings.DEFAULT_CURRENCY == "IQD"

    def test_property_create_blank_city(self):
        with pytest.raises(ValidationError):
            property_schema.PropertyCreate(
                title="Flat", price=1, property_type="sale", category="villa", location="x", city="  "
            )

    def test_property_create_negative_price(self):
        with pytest.raises(ValidationError):
            property_schema.PropertyCreate(
                title="Flat", price=-1, property_type="sale", category="villa", location="x", city="y"
            )

    def test_property_create_unknown_category(self):
        with pytest.raises(ValidationError):
            property_schema.PropertyCreate(
                title="Flat", price=1, property_type="sale", category="castle", location="x", city="y"
            )

    def test_comment_not_blank(self):
        assert property_schema.CommentCreate(content=" hi ").content == "hi"
        with pytest.raises(ValidationError):
            property_schema.CommentCreate(content="   ")


class TestPropertyRequestSchemas:
    """Tests for property request schemas"""

    def test_lists_deduplicated_in_order(self):
        request = property_request_schema.PropertyRequestCreate(
            title="Looking",
            property_type="rent",
            category="house",
            preferred_cities=["بغداد", " أربيل", "بغداد", ""],
            features=None,
        )
        assert request.preferred_cities == ["بغداد", "أربيل"]
        assert request.features == []
        assert request.currency == settings.DEFAULT_CURRENCY

    def test_ranges_must_be_ordered(self):
        with pytest.raises(ValidationError):
            property_request_schema.PropertyRequestCreate(
                title="Looking", property_type="rent", category="house", min_area=200, max_area=100
            )

    def test_open_ranges_allowed(self):
        request = property_request_schema.PropertyRequestCreate(
            title="Looking", property_type="rent", category="house", min_bedrooms=3
        )
        assert request.max_bedrooms is None

    def test_blank_title(self):
        with pytest.raises(ValidationError):
            property_request_schema.PropertyRequestCreate(title="  ", property_type="rent", category="house")

    def test_status_update(self):
        assert property_request_schema.StatusUpdate(status="fulfilled").status is RequestStatus.FULFILLED
        with pytest.raises(ValidationError):
            property_request_schema.StatusUpdate(status="archived")


class TestMessageSchemas:
    """Tests for message schemas"""

    def test_message_defaults_to_text(self):
        message = message_schema.MessageCreate(receiver_id=1, content="hello")
        assert message.message_type.value == "text"

    def test_blank_content(self):
        with pytest.raises(ValidationError):
            message_schema.MessageCreate(receiver_id=1, content="   ")


class TestNotificationSchemas:
    """Tests for the notification union"""

    def test_discriminated_by_type(self):
        adapter = TypeAdapter(notification_schema.NotificationOut)
        base = {"id": 1, "title": "t", "is_read": False, "created_at": datetime(2024, 1, 1)}

        like = adapter.validate_python({**base, "type": "like", "actor": {"id": 2, "username": "bob"}})
        assert isinstance(like, notification_schema.LikeNotification)

        match = adapter.validate_python(
            {**base, "type": "property_match", "property": {"id": 3, "title": "Flat"}}
        )
        assert isinstance(match, notification_schema.PropertyMatchNotification)
        assert match.request is None

    def test_unknown_type_rejected(self):
        adapter = TypeAdapter(notification_schema.NotificationOut)
        with pytest.raises(ValidationError):
            adapter.validate_python(
                {"id": 1, "title": "t", "is_read": False, "created_at": datetime(2024, 1, 1), "type": "follow"}
            )


class TestPaginationSchemas:
    """Tests for pagination schemas"""

    def test_offset(self):
        assert pagination_schema.PaginationParams(page=3, limit=10).offset == 20

    def test_invalid_page(self):
        with pytest.raises(ValidationError):
            pagination_schema.PaginationParams(page=0, limit=10)

    def test_paginated_response_create(self):
        response = pagination_schema.PaginatedResponse[int].create(
            items=[1, 2, 3, 4, 5], total=10, page=1, limit=5
        )
        assert response.items == [1, 2, 3, 4, 5]
        assert response.total_pages == 2

    def test_paginated_response_empty(self):
        response = pagination_schema.PaginatedResponse[int].create(items=[], total=0, page=1, limit=10)
        assert response.items == []
        assert response.total_pages == 0

    def test_paginated_response_last_page(self):
        response = pagination_schema.PaginatedResponse[int].create(items=[6, 7, 8], total=8, page=2, limit=5)
        assert response.total_pages == 2
        assert len(response.items) == 3
