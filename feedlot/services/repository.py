# feedlot/services/repository.py
"""
Thin repository over the feedlot record store.

Every read and write the lifecycle core performs goes through
RecordRepository. Rows are checked here, once, so the business logic can rely
on well-formed entities.
"""
from functools import wraps

from flask import current_app
from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError

from feedlot.exceptions import DataIntegrityError, ResourceNotFoundError
from feedlot.models import (Animal, AnimalDeath, AnimalRealization,
                            AnimalStatus, AnimalTreatment, Diagnosis, Lot,
                            Pen, Treatment)
from feedlot.services.base import BaseService

# Fields the lifecycle core is allowed to change on an animal
ANIMAL_UPDATE_FIELDS = frozenset({
    'pen_id', 'status', 'pulls', 're_pulls', 're_treat', 'ltd_treatment_cost',
})


def store_call(description):
    """Translate SQLAlchemy failures raised by a repository method."""
    def decorator(f):
        @wraps(f)
        def decorated_function(self, *args, **kwargs):
            try:
                return f(self, *args, **kwargs)
            except SQLAlchemyError as e:
                self._fail(f"Error {description}", e)
        return decorated_function
    return decorator


def _like_pattern(fragment):
    escaped = fragment.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"


class RecordRepository(BaseService):
    model = Animal

    # --- Animals ---

    def get_animal(self, animal_id):
        return self._checked(self.get(animal_id))

    def find_animal_by_eid_substring(self, fragment):
        """First animal whose EID contains ``fragment``, or None."""
        candidates = self.list_animals_by_eid_substring(fragment)
        return candidates[0] if candidates else None

    @store_call("searching animals by EID")
    def list_animals_by_eid_substring(self, fragment):
        """Case-insensitive substring match, exact matches first, then by tag."""
        if not fragment or not fragment.strip():
            return []
        fragment = fragment.strip()
        exact_first = case((func.lower(Animal.animal_eid) == fragment.lower(), 0), else_=1)
        animals = (Animal.query
                   .filter(Animal.animal_eid.ilike(_like_pattern(fragment), escape='\\'))
                   .order_by(exact_first, Animal.visual_tag, Animal.id)
                   .all())
        return [self._checked(a) for a in animals]

    @store_call("listing animals by lot")
    def list_animals_by_lot(self, lot_id):
        if not lot_id:
            return []
        animals = (Animal.query
                   .join(Pen, Animal.pen_id == Pen.id)
                   .filter(Pen.lot_id == lot_id)
                   .order_by(Animal.visual_tag, Animal.id)
                   .all())
        return [self._checked(a) for a in animals]

    @store_call("listing animals by pen")
    def list_animals_by_pen(self, pen_id):
        if not pen_id:
            return []
        animals = Animal.query.filter_by(pen_id=pen_id).order_by(Animal.visual_tag, Animal.id).all()
        return [self._checked(a) for a in animals]

    def update_animal(self, animal_id, **fields):
        """Apply a partial update to an animal and flush it."""
        unknown = set(fields) - ANIMAL_UPDATE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable on Animal: {', '.join(sorted(unknown))}")

        if 'status' in fields:
            # Accept enum members or their string values, nothing else
            fields['status'] = AnimalStatus(getattr(fields['status'], 'value', fields['status'])).value

        animal = self.get(animal_id)
        if animal is None:
            raise ResourceNotFoundError('Animal', animal_id)
        return self.update(animal, **fields)

    # --- Locations ---

    @store_call("listing lots")
    def list_lots(self):
        return Lot.query.order_by(Lot.lot_number).all()

    def get_lot(self, lot_id):
        return self.get(lot_id, model=Lot)

    def get_pen(self, pen_id):
        return self.get(pen_id, model=Pen)

    @store_call("listing pens by lot")
    def list_pens_by_lot(self, lot_id):
        if not lot_id:
            return []
        return Pen.query.filter_by(lot_id=lot_id).order_by(Pen.pen_number).all()

    @store_call("listing pens")
    def list_pens(self):
        return Pen.query.order_by(Pen.pen_number).all()

    # --- Reference data ---

    @store_call("listing diagnoses")
    def list_diagnoses(self):
        return Diagnosis.query.order_by(Diagnosis.name).all()

    def get_diagnosis(self, diagnosis_id):
        return self.get(diagnosis_id, model=Diagnosis)

    def get_treatment(self, treatment_id):
        return self.get(treatment_id, model=Treatment)

    @store_call("listing treatments for diagnosis")
    def list_treatments_for_diagnosis(self, diagnosis_id):
        if not diagnosis_id:
            return []
        return (Treatment.query
                .join(Treatment.diagnoses)
                .filter(Diagnosis.id == diagnosis_id)
                .order_by(Treatment.name)
                .all())

    # --- Event records ---

    def insert_treatment_record(self, **fields):
        return self.create(AnimalTreatment, **fields)

    @store_call("listing treatment records")
    def list_treatment_records(self, animal_id):
        return (AnimalTreatment.query
                .filter_by(animal_id=animal_id)
                .order_by(AnimalTreatment.treatment_date.desc(), AnimalTreatment.created_at.desc())
                .all())

    @store_call("loading death record")
    def get_death_record(self, animal_id):
        return (AnimalDeath.query
                .filter_by(animal_id=animal_id)
                .order_by(AnimalDeath.created_at.desc())
                .first())

    def upsert_death_record(self, animal_id, **fields):
        """Update the animal's death record in place, or insert the first one.

        Returns:
            (record, created) tuple
        """
        existing = self.get_death_record(animal_id)
        if existing is not None:
            current_app.logger.debug(f"Updating existing death record {existing.id} for animal {animal_id}")
            return self.update(existing, **fields), False
        return self.create(AnimalDeath, animal_id=animal_id, **fields), True

    def insert_realization_record(self, **fields):
        return self.create(AnimalRealization, **fields)

    @store_call("loading realization record")
    def get_realization_record(self, animal_id):
        return (AnimalRealization.query
                .filter_by(animal_id=animal_id)
                .order_by(AnimalRealization.created_at.desc())
                .first())

    def _checked(self, animal):
        if animal is not None and animal.status not in AnimalStatus.values():
            current_app.logger.error(f"Animal {animal.id} has unrecognised status '{animal.status}'")
            raise DataIntegrityError(f"Animal '{animal.id}' has unrecognised status '{animal.status}'")
        return animal
