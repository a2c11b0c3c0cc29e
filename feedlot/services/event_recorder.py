# feedlot/services/event_recorder.py
"""
Shared workflow for the treat, death and realize recorders.

Each submission runs the same steps: validate the form, resolve the animal,
consult the transition engine, check referenced rows, write the event record,
then update the animal. Nothing is written until every check has passed.
"""
from dataclasses import dataclass
from typing import Any, Optional

from flask import current_app

from feedlot.exceptions import (FeedlotError, InvalidTransitionError,
                                PartialWriteWarning, RepositoryError,
                                ResourceNotFoundError)
from feedlot.models import Animal
from feedlot.schemas.events import parse_form
from feedlot.services.lifecycle_service import Transition, apply_transition
from feedlot.services.repository import RecordRepository
from feedlot.utils.files import StagedUploads


@dataclass
class RecordingResult:
    """What a recorder hands back on success."""
    animal: Animal
    record: Optional[Any]
    created: bool
    transition: Transition

    def to_dict(self) -> dict:
        return {
            'animal': self.animal.to_dict(),
            'record': self.record.to_dict() if self.record is not None else None,
            'created': self.created,
            'status_changed': self.transition.status_changed,
        }


class EventRecorder:
    """Base class for the event recorders.

    Subclasses set ``action``, ``form_class`` and ``record_name`` and
    implement ``write_record``.
    """

    action = None
    form_class = None
    record_name = 'Event record'

    def __init__(self, repository=None):
        self.repository = repository or RecordRepository()

    def record(self, animal_id, data, **options) -> RecordingResult:
        """Validate and persist one submission for one animal.

        Raises:
            ValidationError: missing/malformed fields or unknown references
            ResourceNotFoundError: the animal does not exist
            InvalidTransitionError: the action is not allowed in the animal's status
            RepositoryError: the store failed; nothing was kept in atomic mode
            PartialWriteWarning: the record was kept but the animal update failed
        """
        form = parse_form(self.form_class, data)
        animal = self.resolve_animal(animal_id)

        try:
            transition = apply_transition(animal, self.action, move_to=self.destination_pen(form))
        except InvalidTransitionError as e:
            current_app.logger.warning(f"Rejected {self.action.value} for animal {animal.id}: {e.message}")
            raise

        if not transition.mutates:
            current_app.logger.info(f"{self.action.value} on animal {animal.id} is a no-op in status '{animal.status}'")
            return RecordingResult(animal, self.existing_record(animal), False, transition)

        self.check_references(form)
        return self._persist(animal, form, transition, **options)

    def resolve_animal(self, animal_id):
        animal = self.repository.get_animal(animal_id)
        if animal is None:
            raise ResourceNotFoundError('Animal', animal_id)
        return animal

    def destination_pen(self, form):
        return None

    def check_references(self, form):
        """Raise ValidationError if the form points at rows that do not exist."""
        pass

    def existing_record(self, animal):
        return None

    def write_record(self, animal, form, **options):
        """Write the event row. Returns (record, created)."""
        raise NotImplementedError

    def _persist(self, animal, form, transition, **options):
        atomic = current_app.config.get('ATOMIC_EVENT_WRITES', True)
        animal_id = animal.id
        updates = transition.animal_updates(animal)

        staged = StagedUploads()
        try:
            record, created = self.write_record(animal, form, staged=staged, **options)
            if not atomic:
                self.repository.commit()
        except FeedlotError:
            self.repository.rollback()
            staged.discard()
            raise

        try:
            if updates:
                self.repository.update_animal(animal_id, **updates)
            self.repository.commit()
        except (RepositoryError, ResourceNotFoundError) as e:
            self.repository.rollback()
            if atomic:
                staged.discard()
                current_app.logger.error(f"{self.record_name} for animal {animal_id} rolled back: {e.message}")
                raise
            # The record was committed on its own, so it owns the new files
            staged.finalize()
            current_app.logger.warning(
                f"{self.record_name} {record.id} saved but animal {animal_id} was not updated: {e.message}"
            )
            raise PartialWriteWarning(
                f"{self.record_name} saved but animal '{animal_id}' could not be updated; its status may be stale",
                record=record,
            ) from e

        staged.finalize()
        current_app.logger.info(
            f"{self.record_name} {'created' if created else 'updated'} for animal {animal_id} "
            f"(status {transition.previous_status.value} -> {transition.new_status.value})"
        )
        return RecordingResult(animal, record, created, transition)
