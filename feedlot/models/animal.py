"""
Animal model.

The pen is the single source of truth for an animal's location: the lot is
always derived through it and never stored on the animal.
"""
import math
from datetime import datetime, timezone
from typing import Optional

from ..exceptions import DataIntegrityError
from ..extensions import db
from .enums import AnimalStatus
from .location import new_id


class Animal(db.Model):
    __tablename__ = 'animals'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    visual_tag = db.Column(db.String(50), nullable=False, index=True)
    animal_eid = db.Column(db.String(100), nullable=True, index=True)
    gender = db.Column(db.String(10), nullable=True)
    days_on_feed = db.Column(db.Integer, nullable=False, default=0)
    days_to_ship = db.Column(db.Integer, nullable=False, default=0)
    ltd_treatment_cost = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    pulls = db.Column(db.Integer, nullable=False, default=0)
    re_pulls = db.Column(db.Integer, nullable=False, default=0)
    re_treat = db.Column(db.Integer, nullable=False, default=0)
    pen_id = db.Column(db.String(36), db.ForeignKey('pens.id', ondelete='SET NULL'), nullable=True, index=True)
    # Kept as a plain string so malformed values can be detected at the repository boundary
    status = db.Column(db.String(20), nullable=False, default=AnimalStatus.ACTIVE.value, index=True)

    created_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        nullable=False
    )
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False
    )

    pen = db.relationship('Pen', back_populates='animals')

    __table_args__ = (
        db.CheckConstraint('days_on_feed >= 0', name='ck_animal_days_on_feed_positive'),
    )

    def __repr__(self) -> str:
        return f'<Animal {self.visual_tag} ({self.status})>'

    @property
    def lifecycle_status(self) -> AnimalStatus:
        """Status as an enum. Raises DataIntegrityError for missing or unrecognised values."""
        try:
            return AnimalStatus(self.status)
        except ValueError:
            raise DataIntegrityError(f"Animal '{self.id}' has unrecognised status '{self.status}'") from None

    @property
    def lot_id(self) -> Optional[str]:
        """Lot derived through the current pen."""
        return self.pen.lot_id if self.pen is not None else None

    @property
    def weeks_on_feed(self) -> int:
        return math.ceil((self.days_on_feed or 0) / 7)

    def to_dict(self) -> dict:
        """Convert animal to dictionary."""
        cost = self.ltd_treatment_cost
        return {
            'id': self.id,
            'visual_tag': self.visual_tag,
            'animal_eid': self.animal_eid,
            'gender': self.gender,
            'days_on_feed': self.days_on_feed,
            'weeks_on_feed': self.weeks_on_feed,
            'days_to_ship': self.days_to_ship,
            'ltd_treatment_cost': float(cost) if cost is not None else 0.0,
            'pulls': self.pulls,
            're_pulls': self.re_pulls,
            're_treat': self.re_treat,
            'pen_id': self.pen_id,
            'lot_id': self.lot_id,
            'status': self.status,
        }
