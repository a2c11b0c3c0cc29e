from feedlot.helpers import local_today
from feedlot.models import LifecycleAction
from feedlot.schemas.events import DeathForm
from feedlot.services.event_recorder import EventRecorder
from feedlot.utils.files import is_local_upload, save_death_photo


class DeathService(EventRecorder):
    """Records deaths.

    An animal has at most one death record. Submitting again for a dead
    animal amends that record (reason, necropsy, date, photo) instead of
    adding a second one. A replaced photo file is deleted once the amendment
    is committed.
    """

    action = LifecycleAction.RECORD_DEATH
    form_class = DeathForm
    record_name = 'Death record'

    def write_record(self, animal, form, photo=None, staged=None, **options):
        fields = {
            'reason': form.reason.value,
            'necropsy': form.necropsy,
            'death_date': form.death_date or local_today(),
        }

        if photo is not None and photo.filename:
            fields['image_url'] = save_death_photo(photo, animal.id)
            if staged is not None:
                staged.saved.append(fields['image_url'])
        elif form.photo_url:
            fields['image_url'] = form.photo_url
        # Otherwise an amendment keeps the photo already on file

        existing = self.repository.get_death_record(animal.id)
        previous_photo = existing.image_url if existing is not None else None
        if (staged is not None and 'image_url' in fields
                and is_local_upload(previous_photo) and previous_photo != fields['image_url']):
            staged.superseded.append(previous_photo)

        return self.repository.upsert_death_record(animal.id, **fields)

    def get_death_record(self, animal_id):
        """The animal's death record, or None."""
        animal = self.resolve_animal(animal_id)
        return self.repository.get_death_record(animal.id)
