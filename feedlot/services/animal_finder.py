# feedlot/services/animal_finder.py
"""
Locating animals, either by EID or by the lot/pen filter.

The last lot/pen choice lives in an explicit SelectionContext that the caller
owns (the API keeps it in the Flask session) rather than in global state.
"""
from dataclasses import asdict, dataclass
from typing import List, Optional

from flask import current_app

from feedlot.exceptions import ResourceNotFoundError, ValidationError
from feedlot.services.repository import RecordRepository


@dataclass
class SelectionContext:
    """Where the user is looking: a lot/pen filter or one searched animal."""
    lot_id: Optional[str] = None
    pen_id: Optional[str] = None
    searched_animal_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        data = data or {}
        return cls(
            lot_id=data.get('lot_id') or None,
            pen_id=data.get('pen_id') or None,
            searched_animal_id=data.get('searched_animal_id') or None,
        )

    def to_dict(self):
        return asdict(self)

    @property
    def has_filter(self):
        return bool(self.lot_id or self.pen_id)

    def select_lot(self, lot_id):
        # A new lot invalidates the pen choice
        self.lot_id = lot_id or None
        self.pen_id = None
        self.searched_animal_id = None

    def select_pen(self, pen_id):
        self.pen_id = pen_id or None
        self.searched_animal_id = None

    def select_animal(self, animal_id):
        self.searched_animal_id = animal_id
        self.lot_id = None
        self.pen_id = None

    def clear(self):
        self.lot_id = self.pen_id = self.searched_animal_id = None


class AnimalFinder:
    def __init__(self, repository=None):
        self.repository = repository or RecordRepository()

    def find_by_eid(self, eid, context: Optional[SelectionContext] = None):
        """Return the best EID match.

        Matching is a case-insensitive substring search; an exact match wins,
        then the lowest visual tag. When a context is given it switches to the
        found animal.

        Raises:
            ValidationError: if ``eid`` is blank
            ResourceNotFoundError: if nothing matches
        """
        eid = self._required_eid(eid)
        animal = self.repository.find_animal_by_eid_substring(eid)
        if animal is None:
            current_app.logger.info(f"No animal found with EID '{eid}'")
            raise ResourceNotFoundError('Animal with EID', eid, code="EID_NOT_FOUND")
        if context is not None:
            context.select_animal(animal.id)
        return animal

    def search_by_eid(self, eid) -> List:
        """Every animal whose EID contains ``eid``, best match first."""
        return self.repository.list_animals_by_eid_substring(self._required_eid(eid))

    def find_by_location(self, lot_id=None, pen_id=None) -> List:
        """Animals in the pen if one is given, else in the lot, else none."""
        if pen_id:
            return self.repository.list_animals_by_pen(pen_id)
        if lot_id:
            return self.repository.list_animals_by_lot(lot_id)
        return []

    def displayed_animals(self, context: SelectionContext) -> List:
        """What the animal list should show for ``context``."""
        if context.searched_animal_id:
            animal = self.repository.get_animal(context.searched_animal_id)
            if animal is not None:
                return [animal]
            context.searched_animal_id = None
        return self.find_by_location(context.lot_id, context.pen_id)

    def list_pens_for_lot(self, lot_id) -> List:
        if not lot_id:
            return []
        return self.repository.list_pens_by_lot(lot_id)

    def list_lots(self):
        return self.repository.list_lots()

    def list_pens(self):
        return self.repository.list_pens()

    def get_lot(self, lot_id):
        lot = self.repository.get_lot(lot_id)
        if lot is None:
            raise ResourceNotFoundError('Lot', lot_id)
        return lot

    def get_pen(self, pen_id):
        pen = self.repository.get_pen(pen_id)
        if pen is None:
            raise ResourceNotFoundError('Pen', pen_id)
        return pen

    def get_lot_for_pen(self, pen_id):
        """Lot owning the pen, or None for lot-independent pens."""
        pen = self.get_pen(pen_id)
        return self.repository.get_lot(pen.lot_id) if pen.lot_id else None

    def get_animal(self, animal_id):
        animal = self.repository.get_animal(animal_id)
        if animal is None:
            raise ResourceNotFoundError('Animal', animal_id)
        return animal

    @staticmethod
    def _required_eid(eid):
        if not eid or not str(eid).strip():
            raise ValidationError("Please enter or scan an animal EID", fields=['eid'])
        return str(eid).strip()
