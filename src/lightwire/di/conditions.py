"""
Conditional registration.

Conditions are evaluated at registration time against the registry as it
stands at that moment and the container's property bag. Registration
order therefore matters: a fallback guarded by "bean absent" stays
registered even if the bean it watches for is registered afterwards.
"""

from typing import Callable, Mapping, Optional

from ..core.entities import BeanCondition, PropertyCondition, TypeDescriptor


def property_matches(condition: PropertyCondition, properties: Mapping[str, str]) -> bool:
    """
    Evaluate a property condition.

    Args:
        condition: The condition to check
        properties: Current property bag

    Returns:
        bool: Whether the condition holds
    """
    if condition.key not in properties:
        return condition.match_if_missing

    value = properties[condition.key]
    if not condition.having_value:
        return str(value).lower() != "false"
    return value == condition.having_value


def bean_condition_matches(
    condition: BeanCondition,
    is_registered: Callable[[type], bool]
) -> bool:
    """
    Evaluate a bean presence or absence condition.

    Args:
        condition: The condition to check
        is_registered: Lookup against the current registry

    Returns:
        bool: Whether the condition holds
    """
    if condition.present:
        return all(is_registered(t) for t in condition.types)
    return not any(is_registered(t) for t in condition.types)


class ConditionEvaluator:
    """Evaluates every condition declared on a type descriptor."""

    def __init__(
        self,
        properties: Mapping[str, str],
        is_registered: Callable[[type], bool]
    ):
        """
        Initialize evaluator.

        Args:
            properties: Property bag read at evaluation time
            is_registered: Registry lookup read at evaluation time
        """
        self._properties = properties
        self._is_registered = is_registered

    def failed_condition(self, descriptor: TypeDescriptor) -> Optional[str]:
        """
        Find the first condition that does not hold.

        Args:
            descriptor: Descriptor of the type being registered

        Returns:
            Optional[str]: Description of the failing condition, or None
            when the type may be registered
        """
        for condition in descriptor.property_conditions:
            if not property_matches(condition, self._properties):
                return f"property condition on '{condition.key}'"

        for condition in descriptor.bean_conditions:
            if not bean_condition_matches(condition, self._is_registered):
                kind = "bean" if condition.present else "missing bean"
                names = ", ".join(t.__name__ for t in condition.types)
                return f"{kind} condition on [{names}]"

        return None
