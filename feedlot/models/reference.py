"""
Static reference data: diagnoses and the treatments applicable to them.
"""
from ..extensions import db
from .location import new_id

treatment_diagnoses = db.Table(
    'treatment_diagnoses',
    db.Column('treatment_id', db.String(36), db.ForeignKey('treatments.id', ondelete='CASCADE'), primary_key=True),
    db.Column('diagnosis_id', db.String(36), db.ForeignKey('diagnoses.id', ondelete='CASCADE'), primary_key=True)
)


class Diagnosis(db.Model):
    __tablename__ = 'diagnoses'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False, unique=True)

    treatments = db.relationship('Treatment', secondary=treatment_diagnoses, back_populates='diagnoses')

    def __repr__(self):
        return f'<Diagnosis {self.name}>'

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class Treatment(db.Model):
    __tablename__ = 'treatments'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False, unique=True)

    diagnoses = db.relationship('Diagnosis', secondary=treatment_diagnoses, back_populates='treatments')

    def __repr__(self):
        return f'<Treatment {self.name}>'

    @property
    def diagnosis_ids(self):
        return [d.id for d in self.diagnoses]

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'diagnosis_ids': self.diagnosis_ids}
