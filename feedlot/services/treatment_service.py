# feedlot/services/treatment_service.py
from feedlot.exceptions import ValidationError
from feedlot.helpers import local_today
from feedlot.models import LifecycleAction
from feedlot.schemas.events import TreatmentForm
from feedlot.services.event_recorder import EventRecorder


class TreatmentService(EventRecorder):
    """Records treatments. Every submission appends a row, bumps re_treat
    and moves the animal to the destination pen.

    A blank treatment person falls back to the signed-in staff member passed
    as ``recorded_by``, then to 'system'.
    """

    action = LifecycleAction.TREAT
    form_class = TreatmentForm
    record_name = 'Treatment record'

    def destination_pen(self, form):
        return form.move_to

    def check_references(self, form):
        invalid = []
        diagnosis = self.repository.get_diagnosis(form.diagnosis_id)
        if diagnosis is None:
            invalid.append('diagnosis_id')

        treatment = self.repository.get_treatment(form.treatment_id)
        if treatment is None:
            invalid.append('treatment_id')
        elif diagnosis is not None and diagnosis.id not in treatment.diagnosis_ids:
            raise ValidationError(
                f"Treatment '{treatment.name}' is not applicable to diagnosis '{diagnosis.name}'",
                fields=['treatment_id'],
            )

        if self.repository.get_pen(form.move_to) is None:
            invalid.append('move_to')

        if invalid:
            raise ValidationError(f"Unknown references: {', '.join(invalid)}", fields=invalid)

    def write_record(self, animal, form, recorded_by=None, **options):
        record = self.repository.insert_treatment_record(
            animal_id=animal.id,
            diagnosis_id=form.diagnosis_id,
            treatment_id=form.treatment_id,
            treatment_person=form.treatment_person or recorded_by or 'system',
            current_weight=form.current_weight,
            severity=form.severity,
            treatment_date=form.treatment_date or local_today(),
            moved_to_pen_id=form.move_to,
        )
        return record, True

    def list_treatment_history(self, animal_id):
        """All treatments for an animal, newest first."""
        animal = self.resolve_animal(animal_id)
        return self.repository.list_treatment_records(animal.id)
