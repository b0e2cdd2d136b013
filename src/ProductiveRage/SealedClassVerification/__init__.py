"""
Marker for classes that are open for inheritance on purpose.

Classes are expected to be closed (abstract, ``@final`` or static) unless they
were designed to be subclassed; those are decorated with ``DesignedForInheritance``
so that the decision is visible and checkable.
"""

from typing import TypeVar

T = TypeVar("T", bound=type)

__all__ = ["DesignedForInheritance", "DesignedForInheritanceAttribute"]


def DesignedForInheritance(cls: T) -> T:
    """Mark ``cls`` as designed to be derived from. The class is returned unchanged."""
    cls.__designed_for_inheritance__ = True  # type: ignore[attr-defined]
    return cls


DesignedForInheritanceAttribute = DesignedForInheritance
