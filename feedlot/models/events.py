"""
Event records written against an animal.

Treatments and realizations are append-only. Deaths are unique per animal and
amended in place.
"""
from datetime import datetime, timezone

from sqlalchemy import Enum as SQLAlchemyEnum

from ..extensions import db
from .enums import Severity
from .location import new_id


def _utcnow():
    return datetime.now(timezone.utc)


class AnimalTreatment(db.Model):
    __tablename__ = 'animal_treatments'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    animal_id = db.Column(db.String(36), db.ForeignKey('animals.id', ondelete='CASCADE'), nullable=False, index=True)
    diagnosis_id = db.Column(db.String(36), db.ForeignKey('diagnoses.id'), nullable=False)
    treatment_id = db.Column(db.String(36), db.ForeignKey('treatments.id'), nullable=False)
    treatment_person = db.Column(db.String(100), nullable=False, default='system')
    current_weight = db.Column(db.Float, nullable=True)
    severity = db.Column(SQLAlchemyEnum(Severity), nullable=False, default=Severity.MEDIUM)
    treatment_date = db.Column(db.Date, nullable=False)
    moved_to_pen_id = db.Column(db.String(36), db.ForeignKey('pens.id', ondelete='SET NULL'), nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    animal = db.relationship('Animal', backref=db.backref('treatments', lazy='dynamic'))
    diagnosis = db.relationship('Diagnosis')
    treatment = db.relationship('Treatment')
    moved_to_pen = db.relationship('Pen')

    def __repr__(self):
        return f'<AnimalTreatment {self.id} (Animal: {self.animal_id})>'

    def to_dict(self):
        return {
            'id': self.id,
            'animal_id': self.animal_id,
            'diagnosis_id': self.diagnosis_id,
            'treatment_id': self.treatment_id,
            'treatment_person': self.treatment_person,
            'current_weight': self.current_weight,
            'severity': self.severity.value if self.severity else None,
            'treatment_date': self.treatment_date.isoformat() if self.treatment_date else None,
            'moved_to_pen_id': self.moved_to_pen_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class AnimalDeath(db.Model):
    __tablename__ = 'animal_deaths'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    animal_id = db.Column(db.String(36), db.ForeignKey('animals.id', ondelete='CASCADE'), nullable=False, unique=True)
    reason = db.Column(db.String(50), nullable=False, default='Unknown')
    necropsy = db.Column(db.Boolean, nullable=False, default=False)
    death_date = db.Column(db.Date, nullable=False)
    image_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    animal = db.relationship('Animal', backref=db.backref('death', uselist=False))

    def __repr__(self):
        return f'<AnimalDeath {self.reason} (Animal: {self.animal_id})>'

    def to_dict(self):
        return {
            'id': self.id,
            'animal_id': self.animal_id,
            'reason': self.reason,
            'necropsy': self.necropsy,
            'death_date': self.death_date.isoformat() if self.death_date else None,
            'image_url': self.image_url,
        }


class AnimalRealization(db.Model):
    __tablename__ = 'animal_realizations'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    animal_id = db.Column(db.String(36), db.ForeignKey('animals.id', ondelete='CASCADE'), nullable=False, index=True)
    # Realization reasons reuse the diagnosis list
    reason_id = db.Column(db.String(36), db.ForeignKey('diagnoses.id'), nullable=False)
    weight = db.Column(db.Float, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    realization_date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)

    animal = db.relationship('Animal', backref=db.backref('realizations', lazy='dynamic'))
    reason = db.relationship('Diagnosis')

    def __repr__(self):
        return f'<AnimalRealization {self.id} (Animal: {self.animal_id})>'

    def to_dict(self):
        return {
            'id': self.id,
            'animal_id': self.animal_id,
            'reason_id': self.reason_id,
            'weight': self.weight,
            'price': float(self.price) if self.price is not None else None,
            'realization_date': self.realization_date.isoformat() if self.realization_date else None,
        }
