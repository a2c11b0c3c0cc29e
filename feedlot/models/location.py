"""
Lot and pen models.

A pen may belong to a lot or stand alone (Hospital, Buller, Home).
"""
import uuid

from ..extensions import db


def new_id():
    return str(uuid.uuid4())


class Lot(db.Model):
    __tablename__ = 'lots'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    lot_number = db.Column(db.String(50), nullable=False, index=True)

    pens = db.relationship('Pen', back_populates='lot', lazy='dynamic')

    def __repr__(self):
        return f'<Lot {self.lot_number}>'

    def to_dict(self):
        return {'id': self.id, 'lot_number': self.lot_number}


class Pen(db.Model):
    __tablename__ = 'pens'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    pen_number = db.Column(db.String(50), nullable=False)
    lot_id = db.Column(db.String(36), db.ForeignKey('lots.id', ondelete='SET NULL'), nullable=True, index=True)

    lot = db.relationship('Lot', back_populates='pens')
    animals = db.relationship('Animal', back_populates='pen', lazy='dynamic')

    def __repr__(self):
        return f'<Pen {self.pen_number} (Lot: {self.lot_id})>'

    def to_dict(self):
        return {'id': self.id, 'pen_number': self.pen_number, 'lot_id': self.lot_id}
