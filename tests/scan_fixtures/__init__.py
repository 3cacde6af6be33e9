"""Package scanned by the scanner tests."""

from abc import ABC, abstractmethod

from lightwire import injectable


class Clock(ABC):
    """Time source."""

    @abstractmethod
    def now(self) -> int:
        pass


@injectable
class FixedClock(Clock):
    def now(self) -> int:
        return 42
