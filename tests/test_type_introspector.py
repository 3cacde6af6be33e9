"""
Tests for markers and type introspection.
"""

from abc import ABC, abstractmethod
from typing import Annotated, Generic, Protocol, TypeVar

import pytest

from lightwire import (
    ContainerError,
    Inject,
    Lazy,
    Named,
    Scope,
    conditional_on_bean,
    conditional_on_property,
    inject,
    injectable,
    lazy,
    named,
    post_construct,
    pre_destroy,
    primary,
    singleton
)
from lightwire.infrastructure.introspection import TypeIntrospector, unwrap_annotation

T = TypeVar('T')


class Repository(ABC):
    @abstractmethod
    def find(self, key: str) -> str:
        pass


class Marker(ABC):
    """ABC with no abstract methods."""


class Closeable(Protocol):
    def close(self) -> None:
        ...


class Box(Generic[T]):
    pass


class Clock(ABC):
    @abstractmethod
    def now(self) -> int:
        pass


@singleton
@named("sql")
@primary
@lazy
@conditional_on_property("db.enabled", having_value="true")
@conditional_on_bean(Clock)
class SqlRepository(Repository, Marker):
    clock: Annotated[Clock, Inject]
    audit: Annotated[Clock, Inject, Named("audit"), Lazy]
    plain: int = 0

    def __init__(self, url: Annotated[str, "db-url"], timeout: int = 30):
        self.url = url
        self.timeout = timeout

    def find(self, key: str) -> str:
        return key

    @inject
    def use_clock(self, clock: Annotated[Clock, "backup"]):
        self.backup = clock

    @post_construct
    def ready(self) -> None:
        pass

    @pre_destroy
    def close(self):
        pass


@pytest.fixture
def introspector() -> TypeIntrospector:
    return TypeIntrospector()


class TestMarkers:
    """Test suite for decorator metadata."""

    def test_decorators_with_and_without_parentheses(self, introspector):
        """Test that flag decorators accept both call forms."""
        @injectable()
        @primary()
        class First:
            pass

        @singleton()
        @lazy()
        class Second:
            pass

        first = introspector.describe(First)
        second = introspector.describe(Second)

        assert first.injectable and first.primary
        assert second.injectable and second.lazy
        assert second.scope is Scope.SINGLETON

    def test_named_requires_a_name(self):
        """Test that empty qualifier names are rejected."""
        with pytest.raises(ValueError):
            named("")

    def test_class_decorator_rejects_functions(self):
        """Test that class decorators only apply to classes."""
        with pytest.raises(TypeError):
            injectable(lambda: None)

    def test_metadata_is_not_inherited(self, introspector):
        """Test that a subclass of an injectable class is not injectable by itself."""
        class Child(SqlRepository):
            pass

        descriptor = introspector.describe(Child)

        assert not descriptor.injectable
        assert descriptor.scope is Scope.PROTOTYPE
        assert not descriptor.is_conditional


class TestTypeIntrospector:
    """Test suite for type descriptors."""

    def test_class_tags(self, introspector):
        """Test that class-level tags end up in the descriptor."""
        descriptor = introspector.describe(SqlRepository)

        assert descriptor.injectable
        assert descriptor.scope is Scope.SINGLETON
        assert descriptor.qualifier == "sql"
        assert descriptor.primary
        assert descriptor.lazy
        assert descriptor.is_conditional
        assert descriptor.property_conditions[0].key == "db.enabled"
        assert descriptor.bean_conditions[0].types == (Clock,)

    def test_constructor(self, introspector):
        """Test constructor injection points."""
        url, timeout = introspector.describe(SqlRepository).constructor

        assert (url.parameter_name, url.declared_type, url.qualifier) == ("url", str, "db-url")
        assert not url.has_default
        assert timeout.has_default and timeout.default == 30

    def test_default_constructor(self, introspector):
        """Test that a class without __init__ has an empty constructor."""
        @injectable
        class Simple:
            pass

        descriptor = introspector.describe(Simple)

        assert descriptor.constructor == ()
        assert descriptor.constructor_error is None

    def test_variadic_parameters_are_skipped(self, introspector):
        """Test that *args and **kwargs are not injection points."""
        @injectable
        class Flexible:
            def __init__(self, clock: Clock, *args, **kwargs):
                pass

        points = introspector.describe(Flexible).constructor

        assert [p.parameter_name for p in points] == ["clock"]

    def test_positional_only_parameter_is_unusable(self, introspector):
        """Test that keyword injection cannot fill positional-only parameters."""
        @injectable
        class PositionalOnly:
            def __init__(self, clock: Clock, /):
                pass

        descriptor = introspector.describe(PositionalOnly)

        assert descriptor.constructor is None
        assert "positional-only" in descriptor.constructor_error

    def test_fields(self, introspector):
        """Test that only Inject-marked fields are collected."""
        fields = {f.name: f for f in introspector.describe(SqlRepository).fields}

        assert set(fields) == {"clock", "audit"}
        assert fields["clock"].declared_type is Clock
        assert not fields["clock"].lazy
        assert fields["audit"].qualifier == "audit"
        assert fields["audit"].lazy

    def test_methods_and_hooks(self, introspector):
        """Test that inject methods and lifecycle hooks are found."""
        descriptor = introspector.describe(SqlRepository)

        assert [m.name for m in descriptor.methods] == ["use_clock"]
        assert descriptor.methods[0].parameters[0].qualifier == "backup"
        assert descriptor.post_construct == "ready"
        assert descriptor.pre_destroy == "close"

    def test_overridden_method_hides_base_marker(self, introspector):
        """Test that an undecorated override is not treated as a hook."""
        @injectable
        class Override(SqlRepository):
            def close(self):
                pass

        assert introspector.describe(Override).pre_destroy is None

    def test_inject_method_parameter_needs_annotation(self, introspector):
        """Test that method parameters must be annotated."""
        @injectable
        class Untyped:
            @inject
            def setup(self, clock):
                pass

        with pytest.raises(ContainerError):
            introspector.describe(Untyped)

    def test_descriptors_are_cached(self, introspector):
        """Test that a class is described once."""
        assert introspector.describe(SqlRepository) is introspector.describe(SqlRepository)

    def test_is_interface(self, introspector):
        """Test what counts as an interface."""
        assert introspector.is_interface(Repository)
        assert introspector.is_interface(Marker)
        assert introspector.is_interface(Closeable)
        assert not introspector.is_interface(SqlRepository)
        assert not introspector.is_interface(Box)
        assert not introspector.is_interface(ABC)
        assert not introspector.is_interface(object)
        assert not introspector.is_interface("Repository")

    def test_interfaces_of(self, introspector):
        """Test interface enumeration along the MRO."""
        @injectable
        class CachedSqlRepository(SqlRepository):
            pass

        assert introspector.interfaces_of(CachedSqlRepository) == [Repository, Marker]


class TestUnwrapAnnotation:
    """Test suite for Annotated handling."""

    def test_plain_type(self):
        """Test that plain annotations pass through."""
        assert unwrap_annotation(Clock) == (Clock, None, ())

    def test_named_marker(self):
        """Test that Named supplies the qualifier."""
        base, qualifier, metadata = unwrap_annotation(Annotated[Clock, Named("utc"), Inject])

        assert base is Clock
        assert qualifier == "utc"
        assert Inject in metadata

    def test_string_qualifier(self):
        """Test that a bare string works as a qualifier."""
        assert unwrap_annotation(Annotated[Clock, "utc"])[:2] == (Clock, "utc")

    def test_named_wins_over_string(self):
        """Test that an explicit Named marker takes precedence."""
        assert unwrap_annotation(Annotated[Clock, "doc", Named("utc")])[1] == "utc"
