# shared/workflow.py
"""
Declarative status workflows.

A TransitionTable is a closed graph over a TextChoices enum. It is validated
when the module defining it is imported, so a status with no handling (or a
transition pointing at an unknown status) fails at startup rather than
falling through at runtime.

Usage:
    ORDER_WORKFLOW = TransitionTable(
        OrderStatus,
        transitions=[
            Transition('confirm', {OrderStatus.PENDING}, OrderStatus.CONFIRMED, {'supplier'}),
        ],
        terminal={OrderStatus.COMPLETED},
    )

    transition = ORDER_WORKFLOW.check('confirm', order.status)
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List

from django.core.exceptions import ImproperlyConfigured
from django.utils import timezone

from .exceptions import InvalidTransition


@dataclass(frozen=True)
class Transition:
    """One legal edge (or fan-in of edges) of a workflow."""
    action: str
    sources: FrozenSet[str]
    target: str
    roles: FrozenSet[str] = field(default_factory=frozenset)
    owner_only: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'sources', frozenset(self.sources))
        object.__setattr__(self, 'roles', frozenset(self.roles))

    def allows_role(self, role):
        return not self.roles or role in self.roles


class TransitionTable:
    """Validated transition graph for one status enum."""

    def __init__(self, states, transitions: Iterable[Transition], terminal=()):
        self.states = states
        self.terminal = frozenset(terminal)
        self._transitions = {}
        for transition in transitions:
            if transition.action in self._transitions:
                raise ImproperlyConfigured(
                    f"Duplicate workflow action '{transition.action}' for {states.__name__}."
                )
            self._transitions[transition.action] = transition
        self._validate()

    def _validate(self):
        known = set(self.states.values)
        name = self.states.__name__

        for state in self.terminal:
            if state not in known:
                raise ImproperlyConfigured(f"Unknown terminal status '{state}' for {name}.")

        reachable_from = set()
        for transition in self._transitions.values():
            unknown = (set(transition.sources) | {transition.target}) - known
            if unknown:
                raise ImproperlyConfigured(
                    f"Action '{transition.action}' references unknown {name} values: {sorted(unknown)}"
                )
            leaving_terminal = set(transition.sources) & self.terminal
            if leaving_terminal:
                raise ImproperlyConfigured(
                    f"Action '{transition.action}' leaves terminal status {sorted(leaving_terminal)}."
                )
            reachable_from |= set(transition.sources)

        # Every non-terminal status needs at least one way out
        stuck = known - self.terminal - reachable_from
        if stuck:
            raise ImproperlyConfigured(f"{name} values with no outgoing transition: {sorted(stuck)}")

    def __contains__(self, action):
        return action in self._transitions

    def get(self, action) -> Transition:
        try:
            return self._transitions[action]
        except KeyError:
            raise ImproperlyConfigured(f"Unknown workflow action '{action}'.") from None

    def is_terminal(self, status):
        return status in self.terminal

    def check(self, action, current_status) -> Transition:
        """Return the transition for ``action`` or raise InvalidTransition."""
        transition = self.get(action)
        if current_status not in transition.sources:
            raise InvalidTransition(current_status, action)
        return transition

    def allowed_actions(self, current_status) -> List[str]:
        """Actions legal from ``current_status``, in declaration order."""
        return [
            action for action, transition in self._transitions.items()
            if current_status in transition.sources
        ]

    def apply(self, instance, action, **fields):
        """
        Move ``instance`` along ``action`` with a conditional UPDATE.

        The row is written only if its stored status still equals
        ``instance.status``. If another request moved it first, nothing is
        written and InvalidTransition carries the status found in the table.
        Extra ``fields`` go into the same UPDATE.
        """
        transition = self.check(action, instance.status)
        model = type(instance)
        if 'updated_at' not in fields and any(f.name == 'updated_at' for f in model._meta.concrete_fields):
            fields['updated_at'] = timezone.now()

        updated = model._default_manager.filter(pk=instance.pk, status=instance.status).update(
            status=transition.target, **fields
        )
        if updated != 1:
            current = model._default_manager.filter(pk=instance.pk).values_list('status', flat=True).first()
            raise InvalidTransition(current, action)

        instance.status = transition.target
        for field_name, value in fields.items():
            setattr(instance, field_name, value)
        return transition
