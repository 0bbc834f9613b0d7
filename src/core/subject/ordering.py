"""
Declared ordering of row observers.
"""

from typing import Sequence

from src.core.errors import ObserverOrderError
from src.core.observers.base_observer import AbstractObserver


def resolve_observer_order(observers: Sequence[AbstractObserver]) -> list[AbstractObserver]:
    """
    Order observers so that each runs after the observers it requires.

    Observers without a dependency between them keep their registration
    order.

    Raises:
        ObserverOrderError: On duplicate names, unknown dependencies or cycles
    """
    names: set[str] = set()
    for observer in observers:
        if observer.name in names:
            raise ObserverOrderError(f"Observer '{observer.name}' is registered twice")
        names.add(observer.name)

    for observer in observers:
        for dependency in observer.requires:
            if dependency not in names:
                raise ObserverOrderError(
                    f"Observer '{observer.name}' requires unknown observer '{dependency}'"
                )

    ordered: list[AbstractObserver] = []
    placed: set[str] = set()
    pending = list(observers)

    while pending:
        ready = [o for o in pending if all(d in placed for d in o.requires)]
        if not ready:
            cycle = ", ".join(o.name for o in pending)
            raise ObserverOrderError(f"Observer dependencies contain a cycle: {cycle}")

        for observer in ready:
            ordered.append(observer)
            placed.add(observer.name)
        pending = [o for o in pending if o.name not in placed]

    return ordered
