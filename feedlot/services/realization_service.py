# feedlot/services/realization_service.py
from feedlot.exceptions import ValidationError
from feedlot.helpers import local_today
from feedlot.models import LifecycleAction
from feedlot.schemas.events import RealizeForm
from feedlot.services.event_recorder import EventRecorder


class RealizationService(EventRecorder):
    """Records realizations (culls/sales outside the normal ship flow).

    Realizing an already realized animal writes nothing and returns the
    record on file.
    """

    action = LifecycleAction.REALIZE
    form_class = RealizeForm
    record_name = 'Realization record'

    def check_references(self, form):
        if self.repository.get_diagnosis(form.reason_id) is None:
            raise ValidationError(f"Unknown realization reason '{form.reason_id}'", fields=['reason_id'])

    def existing_record(self, animal):
        return self.repository.get_realization_record(animal.id)

    def write_record(self, animal, form, **options):
        record = self.repository.insert_realization_record(
            animal_id=animal.id,
            reason_id=form.reason_id,
            weight=form.weight,
            price=form.price,
            realization_date=form.realization_date or local_today(),
        )
        return record, True

    def get_realization_record(self, animal_id):
        """The animal's realization record, or None."""
        animal = self.resolve_animal(animal_id)
        return self.repository.get_realization_record(animal.id)
