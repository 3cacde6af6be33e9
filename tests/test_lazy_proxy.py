"""
Tests for lazy proxies and lazy bindings.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Annotated, Protocol

import pytest

from lightwire import ContainerError, Inject, Lazy, injectable, is_initialized, is_lazy_proxy, lazy, singleton
from lightwire.proxy import LazyProxy, ProxyFactory


class Greeter(ABC):
    @abstractmethod
    def greet(self, name: str) -> str:
        pass

    @property
    @abstractmethod
    def language(self) -> str:
        pass


class Counter(ABC):
    @abstractmethod
    def increment(self) -> int:
        pass


class Sized(Protocol):
    def size(self) -> int:
        ...


class EnglishGreeter(Greeter):
    def __init__(self):
        self.greeted = []

    def greet(self, name: str) -> str:
        self.greeted.append(name)
        return f"Hello, {name}"

    @property
    def language(self) -> str:
        return "en"


class SimpleCounter(Counter):
    def __init__(self):
        self.value = 0

    def increment(self) -> int:
        self.value += 1
        return self.value

    def size(self) -> int:
        return self.value


class TrackingSupplier:
    """Supplier that counts how often it was called."""

    def __init__(self, factory=EnglishGreeter, delay: float = 0.0):
        self.factory = factory
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return self.factory()


@pytest.fixture
def factory() -> ProxyFactory:
    return ProxyFactory()


class TestProxyFactory:
    """Test suite for proxy creation."""

    def test_proxy_implements_interface(self, factory):
        """Test that a proxy passes isinstance checks for its interface."""
        proxy = factory.create_lazy_proxy(Greeter, TrackingSupplier())

        assert isinstance(proxy, Greeter)
        assert isinstance(proxy, LazyProxy)
        assert is_lazy_proxy(proxy)

    def test_supplier_not_called_until_first_use(self, factory):
        """Test that creating and inspecting a proxy does not materialize it."""
        supplier = TrackingSupplier()
        proxy = factory.create_lazy_proxy(Greeter, supplier)

        repr(proxy)
        str(proxy)
        hash(proxy)
        assert proxy == proxy

        assert supplier.calls == 0
        assert not is_initialized(proxy)

    def test_supplier_runs_under_given_lock(self, factory):
        """Test that a caller-supplied lock is held while the delegate is created."""
        lock = threading.RLock()
        acquired_elsewhere = []

        def supplier():
            other = threading.Thread(
                target=lambda: acquired_elsewhere.append(lock.acquire(blocking=False))
            )
            other.start()
            other.join()
            return EnglishGreeter()

        proxy = factory.create_lazy_proxy(Greeter, supplier, lock)

        assert proxy.greet("Ada") == "Hello, Ada"
        assert acquired_elsewhere == [False]

    def test_supplier_called_once(self, factory):
        """Test that the delegate is created on first use and reused afterwards."""
        supplier = TrackingSupplier()
        proxy = factory.create_lazy_proxy(Greeter, supplier)

        assert proxy.greet("Ada") == "Hello, Ada"
        assert is_initialized(proxy)
        assert supplier.calls == 1

        proxy.greet("Grace")
        proxy.greet("Linus")

        assert supplier.calls == 1
        assert ProxyFactory.get_target(proxy).greeted == ["Ada", "Grace", "Linus"]

    def test_properties_are_forwarded(self, factory):
        """Test that interface properties reach the delegate."""
        proxy = factory.create_lazy_proxy(Greeter, TrackingSupplier())

        assert proxy.language == "en"

    def test_undeclared_attributes_are_forwarded(self, factory):
        """Test that attributes outside the interface still reach the delegate."""
        proxy = factory.create_lazy_proxy(Greeter, TrackingSupplier())

        assert proxy.greeted == []
        assert is_initialized(proxy)

    def test_repr_reflects_state(self, factory):
        """Test that the representation shows whether the proxy materialized."""
        proxy = factory.create_lazy_proxy(Counter, TrackingSupplier(SimpleCounter))

        assert repr(proxy) == "LazyProxy[not initialized]"

        proxy.increment()
        target = ProxyFactory.get_target(proxy)

        assert repr(proxy) == f"LazyProxy[{target!r}]"
        assert str(proxy) == repr(proxy)

    def test_equality_uses_proxy_identity(self, factory):
        """Test that equality and hashing act on the proxy itself."""
        first = factory.create_lazy_proxy(Greeter, TrackingSupplier())
        second = factory.create_lazy_proxy(Greeter, TrackingSupplier())

        assert first == first
        assert first != second
        assert hash(first) == id(first)
        assert len({first, second}) == 2

    def test_failed_supplier_can_be_retried(self, factory):
        """Test that a failing supplier leaves the proxy uninitialized."""
        attempts = []

        def flaky():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("not yet")
            return SimpleCounter()

        proxy = factory.create_lazy_proxy(Counter, flaky)

        with pytest.raises(RuntimeError):
            proxy.increment()
        assert not is_initialized(proxy)

        assert proxy.increment() == 1
        assert len(attempts) == 2

    def test_concurrent_first_use_creates_one_delegate(self, factory):
        """Test that racing threads observe a single delegate."""
        supplier = TrackingSupplier(SimpleCounter, delay=0.01)
        proxy = factory.create_lazy_proxy(Counter, supplier)
        barrier = threading.Barrier(16)
        targets = []

        def use():
            barrier.wait()
            proxy.increment()
            targets.append(ProxyFactory.get_target(proxy))

        threads = [threading.Thread(target=use) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert supplier.calls == 1
        assert len({id(t) for t in targets}) == 1

    def test_non_interface_is_rejected_eagerly(self, factory):
        """Test that only interfaces can be proxied."""
        supplier = TrackingSupplier()

        with pytest.raises(ContainerError):
            factory.create_lazy_proxy(EnglishGreeter, supplier)

        assert supplier.calls == 0

    def test_protocol_can_be_proxied(self, factory):
        """Test that Protocol classes count as interfaces."""
        proxy = factory.create_lazy_proxy(Sized, TrackingSupplier(SimpleCounter))

        assert proxy.size() == 0

    def test_multi_interface_proxy(self, factory):
        """Test a proxy implementing several interfaces."""
        class GreetingCounter(EnglishGreeter, SimpleCounter):
            def __init__(self):
                EnglishGreeter.__init__(self)
                SimpleCounter.__init__(self)

        supplier = TrackingSupplier(GreetingCounter)
        proxy = factory.create_multi_interface_proxy([Greeter, Counter], supplier)

        assert isinstance(proxy, Greeter)
        assert isinstance(proxy, Counter)
        assert proxy.increment() == 1
        assert proxy.greet("Ada") == "Hello, Ada"
        assert supplier.calls == 1

    def test_multi_interface_proxy_requires_interfaces(self, factory):
        """Test the eager validation of multi-interface proxies."""
        with pytest.raises(ContainerError):
            factory.create_multi_interface_proxy([], TrackingSupplier())

        with pytest.raises(ContainerError):
            factory.create_multi_interface_proxy([Greeter, EnglishGreeter], TrackingSupplier())

    def test_proxy_classes_are_cached(self, factory):
        """Test that one class is generated per interface set."""
        first = factory.create_lazy_proxy(Greeter, TrackingSupplier())
        second = factory.create_lazy_proxy(Greeter, TrackingSupplier())

        assert type(first) is type(second)
        assert type(first).__name__ == "LazyGreeterProxy"

    def test_get_target_rejects_plain_objects(self):
        """Test that only proxies have a target."""
        with pytest.raises(ContainerError):
            ProxyFactory.get_target(object())

        assert not is_lazy_proxy(object())
        assert not is_initialized(object())


class TestLazyBindings:
    """Test suite for lazy registrations in the container."""

    def test_lazy_singleton_through_interface(self, container):
        """Test that a lazy singleton materializes once on first method call."""
        constructed = []

        @singleton
        @lazy
        class SlowGreeter(EnglishGreeter):
            def __init__(self):
                super().__init__()
                constructed.append(self)

        container.register(SlowGreeter)

        proxy = container.get(Greeter)

        assert is_lazy_proxy(proxy)
        assert not is_initialized(proxy)
        assert constructed == []
        assert container.get(Greeter) is proxy

        assert proxy.greet("Ada") == "Hello, Ada"
        assert is_initialized(proxy)
        assert len(constructed) == 1

        proxy.greet("Grace")
        container.get(Greeter).greet("Linus")

        assert len(constructed) == 1

    def test_lazy_singleton_delegate_is_the_singleton(self, container):
        """Test that the proxy target and the concrete request share one object."""
        @singleton
        @lazy
        class SlowGreeter(EnglishGreeter):
            pass

        container.register(SlowGreeter)

        proxy = container.get(Greeter)
        real = container.get(SlowGreeter)

        assert not is_lazy_proxy(real)
        assert ProxyFactory.get_target(proxy) is real

    def test_lazy_prototype_creates_proxy_per_request(self, container):
        """Test that each request of a lazy prototype yields its own proxy."""
        constructed = []

        @injectable
        @lazy
        class CountingGreeter(EnglishGreeter):
            def __init__(self):
                super().__init__()
                constructed.append(self)

        container.register(CountingGreeter)

        first = container.get(Greeter)
        second = container.get(Greeter)

        assert first is not second
        assert constructed == []

        first.greet("Ada")
        second.greet("Grace")

        assert len(constructed) == 2

    def test_lazy_ignored_for_concrete_requests(self, container):
        """Test that requesting the concrete type returns a real instance."""
        @injectable
        @lazy
        class CountingGreeter(EnglishGreeter):
            pass

        container.register(CountingGreeter)

        assert not is_lazy_proxy(container.get(CountingGreeter))

    def test_lazy_field(self, container):
        """Test that a lazy field gets a proxy even for a non-lazy binding."""
        constructed = []

        @injectable
        class EagerGreeter(EnglishGreeter):
            def __init__(self):
                super().__init__()
                constructed.append(self)

        @injectable
        class Reception:
            greeter: Annotated[Greeter, Inject, Lazy]
            counter: Annotated[Counter, Inject]

        @injectable
        class EagerCounter(SimpleCounter):
            pass

        container.register(EagerGreeter).register(EagerCounter).register(Reception)

        reception = container.get(Reception)

        assert is_lazy_proxy(reception.greeter)
        assert not is_lazy_proxy(reception.counter)
        assert constructed == []

        reception.greeter.greet("Ada")

        assert len(constructed) == 1

    def test_lazy_constructor_parameter_is_eager(self, container):
        """Test that Lazy only applies to fields."""
        @injectable
        class EagerGreeter(EnglishGreeter):
            pass

        @injectable
        class Reception:
            def __init__(self, greeter: Annotated[Greeter, Lazy]):
                self.greeter = greeter

        container.register(EagerGreeter).register(Reception)

        assert not is_lazy_proxy(container.get(Reception).greeter)
