from datetime import date

import pytest

from feedlot.exceptions import ResourceNotFoundError
from feedlot.models import AnimalDeath, AnimalStatus
from feedlot.services.repository import RecordRepository


def test_update_animal_partial(db_session, init_database):
    repo = RecordRepository()
    animal = repo.update_animal('a1', status=AnimalStatus.DEAD, pulls=4)
    repo.commit()

    assert animal.status == 'dead'
    assert animal.pulls == 4
    assert animal.re_treat == 0


def test_update_animal_rejects_unknown_fields(db_session, init_database):
    with pytest.raises(ValueError):
        RecordRepository().update_animal('a1', visual_tag='HACK')


def test_update_animal_rejects_unknown_status(db_session, init_database):
    with pytest.raises(ValueError):
        RecordRepository().update_animal('a1', status='sold')


def test_update_missing_animal(db_session, init_database):
    with pytest.raises(ResourceNotFoundError):
        RecordRepository().update_animal('ghost', pulls=1)


def test_upsert_death_record(db_session, init_database):
    repo = RecordRepository()
    first, created = repo.upsert_death_record('a3', reason='Injury', necropsy=False,
                                              death_date=date(2024, 1, 1))
    repo.commit()
    assert created

    second, created = repo.upsert_death_record('a3', reason='Unknown')
    repo.commit()
    assert not created
    assert second.id == first.id
    assert AnimalDeath.query.count() == 1


def test_animal_lot_is_derived_from_pen(db_session, init_database):
    repo = RecordRepository()
    animal = repo.get_animal('a1')
    assert animal.lot_id == 'lot1'

    repo.update_animal('a1', pen_id='pen3')
    repo.commit()
    assert repo.get_animal('a1').lot_id == 'lot2'
    assert [a.id for a in repo.list_animals_by_lot('lot2')] == ['a1', 'a4']


def test_list_treatments_for_diagnosis(db_session, init_database):
    repo = RecordRepository()
    assert [t.id for t in repo.list_treatments_for_diagnosis('d1')] == ['t1', 't2']
    assert repo.list_treatments_for_diagnosis(None) == []


def test_eid_search_ignores_animals_without_eid(db_session, init_database):
    repo = RecordRepository()
    assert 'a5' not in [a.id for a in repo.list_animals_by_eid_substring('A')]
    assert repo.list_animals_by_eid_substring('  ') == []
