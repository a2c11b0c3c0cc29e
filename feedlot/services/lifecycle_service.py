# feedlot/services/lifecycle_service.py
"""
Status transition engine.

Pure decision logic: given an animal and a requested action, decide whether
the action is permitted and what the animal should look like afterwards.
Nothing here touches the database.

    current   | Treat            | RecordDeath      | Realize
    ----------+------------------+------------------+-----------------
    active    | re_treat += 1    | -> dead          | -> realized
    dead      | rejected         | amend record     | rejected
    realized  | rejected         | rejected         | no-op (re-display)
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional

from feedlot.exceptions import InvalidTransitionError
from feedlot.models.enums import AnimalStatus, LifecycleAction

ACTIVE = AnimalStatus.ACTIVE
DEAD = AnimalStatus.DEAD
REALIZED = AnimalStatus.REALIZED

TREAT = LifecycleAction.TREAT
RECORD_DEATH = LifecycleAction.RECORD_DEATH
REALIZE = LifecycleAction.REALIZE


@dataclass(frozen=True)
class Transition:
    """Outcome of an allowed action.

    Attributes:
        action: The requested action
        previous_status: Status before the action
        new_status: Status after the action
        counter_deltas: Counter name -> increment
        pen_id: Destination pen, if the action moves the animal
        amends_existing: True when the action corrects an earlier record
        mutates: False when the action must not write anything
    """
    action: LifecycleAction
    previous_status: AnimalStatus
    new_status: AnimalStatus
    counter_deltas: Dict[str, int] = field(default_factory=dict)
    pen_id: Optional[str] = None
    amends_existing: bool = False
    mutates: bool = True

    @property
    def status_changed(self) -> bool:
        return self.new_status is not self.previous_status

    def animal_updates(self, animal) -> dict:
        """Partial field update to apply to ``animal`` for this transition."""
        if not self.mutates:
            return {}
        updates = {}
        if self.status_changed:
            updates['status'] = self.new_status.value
        for counter, delta in self.counter_deltas.items():
            updates[counter] = (getattr(animal, counter) or 0) + delta
        if self.pen_id and self.pen_id != animal.pen_id:
            updates['pen_id'] = self.pen_id
        return updates


# (status, action) -> keyword arguments for Transition; absent pairs are rejected
_RULES = {
    (ACTIVE, TREAT): dict(new_status=ACTIVE, counter_deltas={'re_treat': 1}),
    (ACTIVE, RECORD_DEATH): dict(new_status=DEAD),
    (ACTIVE, REALIZE): dict(new_status=REALIZED),
    (DEAD, RECORD_DEATH): dict(new_status=DEAD, amends_existing=True),
    (REALIZED, REALIZE): dict(new_status=REALIZED, mutates=False),
}


def apply_transition(animal, action: LifecycleAction, move_to: Optional[str] = None) -> Transition:
    """Decide the outcome of ``action`` on ``animal``.

    Args:
        animal: Object exposing ``lifecycle_status`` and the counters
        action: Requested lifecycle action
        move_to: Destination pen id; only honoured for treatments

    Raises:
        InvalidTransitionError: if the action is not permitted in the current status
    """
    current = animal.lifecycle_status
    rule = _RULES.get((current, action))
    if rule is None:
        raise InvalidTransitionError(action, current)

    pen_id = move_to if action is TREAT and move_to else None
    return Transition(action=action, previous_status=current, pen_id=pen_id, **rule)


def allowed_actions(animal) -> FrozenSet[LifecycleAction]:
    """Actions that ``apply_transition`` would accept for this animal."""
    current = animal.lifecycle_status
    return frozenset(action for (status, action) in _RULES if status is current)
