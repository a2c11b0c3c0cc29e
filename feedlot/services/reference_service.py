# feedlot/services/reference_service.py
from feedlot.exceptions import ResourceNotFoundError
from feedlot.models import DeathReason
from feedlot.services.repository import RecordRepository


class ReferenceService:
    """Read-only lookups that populate the event forms."""

    def __init__(self, repository=None):
        self.repository = repository or RecordRepository()

    def list_diagnoses(self):
        return self.repository.list_diagnoses()

    def list_treatments_for_diagnosis(self, diagnosis_id):
        """Treatments linked to the diagnosis; none until one is picked."""
        if not diagnosis_id:
            return []
        if self.repository.get_diagnosis(diagnosis_id) is None:
            raise ResourceNotFoundError('Diagnosis', diagnosis_id)
        return self.repository.list_treatments_for_diagnosis(diagnosis_id)

    def list_realization_reasons(self):
        # Realization reasons are the diagnosis list
        return self.repository.list_diagnoses()

    @staticmethod
    def death_reasons():
        """(value, label) pairs for the death form."""
        return DeathReason.choices()
