"""
Tests for concurrent use of one container.
"""

import threading
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import List

from lightwire import injectable, is_initialized, lazy, singleton


class Pinger(ABC):
    @abstractmethod
    def ping(self) -> str:
        pass


class TestConcurrentResolution:
    """Test suite for thread safety of resolution."""

    def test_singleton_created_once_under_contention(self, container):
        """Test that racing first requests observe a single instance."""
        constructed: List[object] = []

        @singleton
        class SlowSingleton:
            def __init__(self):
                time.sleep(0.02)
                constructed.append(self)

        container.register(SlowSingleton)
        barrier = threading.Barrier(16)

        def resolve():
            barrier.wait()
            return container.get(SlowSingleton)

        with ThreadPoolExecutor(max_workers=16) as executor:
            results = list(executor.map(lambda _: resolve(), range(16)))

        assert len(constructed) == 1
        assert all(r is constructed[0] for r in results)

    def test_nested_singletons_under_contention(self, container):
        """Test that singleton dependencies are also created once."""
        constructed: List[str] = []

        @singleton
        class Connection:
            def __init__(self):
                time.sleep(0.01)
                constructed.append("connection")

        @singleton
        class Gateway:
            def __init__(self, connection: Connection):
                constructed.append("gateway")
                self.connection = connection

        container.register(Connection).register(Gateway)

        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = [
                executor.submit(container.get, Gateway if i % 2 else Connection)
                for i in range(32)
            ]
            results = [f.result() for f in futures]

        assert sorted(constructed) == ["connection", "gateway"]
        gateway = container.get(Gateway)
        assert all(r is gateway or r is gateway.connection for r in results)

    def test_concurrent_requests_do_not_share_cycle_tracking(self, container):
        """Test that parallel resolution of the same prototype never reports a false cycle."""
        @injectable
        class Leaf:
            def __init__(self):
                time.sleep(0.005)

        @injectable
        class Branch:
            def __init__(self, leaf: Leaf):
                self.leaf = leaf

        container.register(Leaf).register(Branch)

        with ThreadPoolExecutor(max_workers=8) as executor:
            branches = list(executor.map(lambda _: container.get(Branch), range(32)))

        assert len({id(b) for b in branches}) == 32

    def test_shared_lazy_proxy_used_while_another_singleton_is_built(self, container):
        """Test that a cached lazy proxy and singleton creation never block each other."""
        building = threading.Event()

        @singleton
        @lazy
        class RemotePinger(Pinger):
            def ping(self) -> str:
                return "pong"

        @singleton
        class Monitor:
            def __init__(self, pinger: Pinger):
                building.set()
                time.sleep(0.2)
                self.status = pinger.ping()

        container.register(RemotePinger).register(Monitor)
        proxy = container.get(Pinger)
        results = {}

        def build_monitor():
            results["monitor"] = container.get(Monitor).status

        def use_proxy():
            building.wait(2)
            results["proxy"] = proxy.ping()

        threads = [threading.Thread(target=build_monitor), threading.Thread(target=use_proxy)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(5)

        assert not any(thread.is_alive() for thread in threads)
        assert results == {"monitor": "pong", "proxy": "pong"}
        assert is_initialized(proxy)
