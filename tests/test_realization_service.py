from decimal import Decimal

import pytest

from feedlot import db
from feedlot.exceptions import InvalidTransitionError, ValidationError
from feedlot.models import Animal, AnimalRealization, AnimalTreatment
from feedlot.services.realization_service import RealizationService
from feedlot.services.treatment_service import TreatmentService


def test_realize_active_animal(db_session, init_database):
    service = RealizationService()
    result = service.record('a1', {'reason_id': 'd2', 'weight': '540', 'price': '1234.50'})

    assert result.created
    assert db.session.get(Animal, 'a1').status == 'realized'

    record = AnimalRealization.query.filter_by(animal_id='a1').one()
    assert record.reason_id == 'd2'
    assert record.weight == 540.0
    assert record.price == Decimal('1234.50')


def test_realize_twice_returns_existing_record(db_session, init_database):
    """
    GIVEN an animal realized once
    WHEN it is realized again
    THEN no new record is written and the first record is returned
    """
    service = RealizationService()
    first = service.record('a1', {'reason_id': 'd2'}).record
    again = service.record('a1', {'reason_id': 'd1', 'price': '10'})

    assert not again.created
    assert not again.transition.mutates
    assert again.record.id == first.id
    assert AnimalRealization.query.filter_by(animal_id='a1').count() == 1
    assert AnimalRealization.query.filter_by(animal_id='a1').one().reason_id == 'd2'


def test_treat_after_realize_rejected(db_session, init_database):
    """
    GIVEN a realized animal
    WHEN a treatment is submitted
    THEN InvalidTransitionError is raised and no treatment row exists
    """
    with pytest.raises(InvalidTransitionError):
        TreatmentService().record('a4', {'diagnosis_id': 'd1', 'treatment_id': 't1', 'move_to': 'pen1'})

    assert AnimalTreatment.query.count() == 0
    assert db.session.get(Animal, 'a4').re_treat == 0


def test_realize_dead_animal_rejected(db_session, init_database):
    with pytest.raises(InvalidTransitionError):
        RealizationService().record('a3', {'reason_id': 'd1'})
    assert AnimalRealization.query.count() == 0


def test_realize_unknown_reason(db_session, init_database):
    with pytest.raises(ValidationError) as exc_info:
        RealizationService().record('a1', {'reason_id': 'nope'})

    assert exc_info.value.fields == ['reason_id']
    assert db.session.get(Animal, 'a1').status == 'active'


@pytest.mark.parametrize("data,field", [
    ({}, 'reason_id'),
    ({'reason_id': 'd1', 'price': '-5'}, 'price'),
    ({'reason_id': 'd1', 'weight': 'heavy'}, 'weight'),
])
def test_realize_invalid_form(db_session, init_database, data, field):
    with pytest.raises(ValidationError) as exc_info:
        RealizationService().record('a1', data)
    assert field in exc_info.value.fields


def test_get_realization_record(db_session, init_database):
    service = RealizationService()
    assert service.get_realization_record('a1') is None
    service.record('a1', {'reason_id': 'd1'})
    assert service.get_realization_record('a1').reason_id == 'd1'
