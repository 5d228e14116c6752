"""Unit tests for framework helpers: mapping, audit, pagination and model keys."""
import pytest
from types import SimpleNamespace
from datetime import datetime, timezone
from pydantic import BaseModel
from sqlalchemy import inspect

from framework.audit import SYSTEM_ACTOR, current_actor, populate_created, populate_updated
from framework.logging.logger import _current_request
from framework.mapping import MappingNotRegisteredError, MappingRegistry, copy_fields, mapper
from framework.repository.entity import AuditedEntity, as_utc
from framework.repository.pagination import Page, clamp_page
from framework.response import ResponseModel
import apps.models  # noqa: F401


class Source:
    def __init__(self):
        self.id = "s1"
        self.name = "Name"
        self.secret = "hidden"


class Target(BaseModel):
    id: str
    name: str
    secret: str = ""


class TestMapping:

    def test_registered_pair_maps(self):
        registry = MappingRegistry()

        @registry.register(Source, Target)
        def to_target(src):
            return copy_fields(src, Target)

        result = registry.map(Source(), Target)
        assert result == Target(id="s1", name="Name", secret="hidden")
        assert registry.has(Source, Target)
        assert registry.map_many([Source(), Source()], Target)[1].id == "s1"

    def test_unregistered_pair_raises(self):
        with pytest.raises(MappingNotRegisteredError):
            MappingRegistry().map(Source(), Target)

    def test_duplicate_registration_raises(self):
        registry = MappingRegistry()
        registry.register(Source, Target)(lambda src: None)
        with pytest.raises(ValueError):
            registry.register(Source, Target)(lambda src: None)

    def test_copy_fields_exclude_and_overrides(self):
        result = copy_fields(Source(), Target, exclude=["secret"], name="Other")
        assert result.name == "Other"
        assert result.secret == ""

    def test_application_mappings_are_registered(self):
        from apps.identity.models import User
        from apps.identity.schemas import UserDto
        import apps.mappers  # noqa: F401
        assert mapper.has(User, UserDto)


class TestAudit:

    def test_actor_without_request_is_system(self):
        assert current_actor() == SYSTEM_ACTOR

    def test_actor_from_request_state(self):
        token = _current_request.set(SimpleNamespace(state=SimpleNamespace(user_id="u9")))
        try:
            assert current_actor() == "u9"
        finally:
            _current_request.reset(token)

    def test_anonymous_request_is_system(self):
        token = _current_request.set(SimpleNamespace(state=SimpleNamespace()))
        try:
            assert current_actor() == SYSTEM_ACTOR
        finally:
            _current_request.reset(token)

    def test_populate_created_keeps_existing_creator(self):
        entity = SimpleNamespace(created_by="seed", updated_by=None)
        populate_created(entity, "u1")
        assert entity.created_by == "seed"
        assert entity.updated_by == "u1"

    def test_populate_errors_are_swallowed(self):
        # no audit attributes at all
        populate_created(object(), "u1")
        populate_updated(object(), "u1")


class TestPagination:

    @pytest.mark.parametrize("given, expected", [
        ((0, 0), (1, 1)),
        ((-2, 10), (1, 10)),
        ((3, 500), (3, 100)),
        ((None, None), (1, 1)),
    ])
    def test_clamp_page(self, given, expected):
        assert clamp_page(*given, max_page_size=100) == expected

    def test_page_properties(self):
        page = Page(items=[1, 2], total_count=12, page_number=2, page_size=5)
        assert page.total_pages == 3
        assert page.has_next_page is True
        assert page.has_previous_page is True
        assert page.offset == 5

    def test_empty_page(self):
        page = Page(items=[], total_count=0, page_number=1, page_size=10)
        assert page.total_pages == 0
        assert page.has_next_page is False
        assert page.has_previous_page is False

    def test_paginated_envelope(self):
        page = Page(items=["a"], total_count=11, page_number=2, page_size=10)
        body = ResponseModel.paginated(page, ["A"])
        assert body["data"] == ["A"]
        assert body["totalCount"] == 11
        assert body["totalPages"] == 2
        assert body["hasNextPage"] is False
        assert body["hasPreviousPage"] is True


def test_as_utc_attaches_timezone_to_naive_values():
    naive = datetime(2024, 1, 1, 12, 0)
    assert as_utc(naive).tzinfo is timezone.utc
    assert as_utc(None) is None


def _table_models():
    for name in apps.models.__all__:
        cls = getattr(apps.models, name)
        if isinstance(cls, type) and issubclass(cls, AuditedEntity):
            yield cls


@pytest.mark.parametrize("model", list(_table_models()), ids=lambda m: m.__name__)
def test_declared_key_is_the_primary_key(model):
    primary = [column.name for column in inspect(model).primary_key]
    assert primary == [model.key_field]
