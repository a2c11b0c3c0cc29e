# tests/conftest.py
"""
Shared fixtures for the Feedlot test suite.

Fixture layout:
- test_app      : scope=module   : one Flask app per test module
- test_client   : scope=module   : one HTTP client per module
- db_session    : scope=function : every table emptied before each test
- init_database : scope=function : standard feedlot (lots, pens, diagnoses, treatments, animals)
- staff_user    : scope=function : a signed-up staff account
- auth_client   : scope=function : test_client signed in as staff_user
- upload_folder : scope=function : empty UPLOAD_FOLDER for one test
- photo_upload  : scope=function : factory for uploaded photo files
"""
import base64
import io
import os
import sys

import pytest
from werkzeug.datastructures import FileStorage

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from feedlot import create_app, db
from feedlot.config import TestingConfig
from feedlot.models import (Animal, AnimalStatus, Diagnosis, Lot, Pen,
                            Treatment, User)

# Smallest valid PNG (1x1 transparent pixel)
PNG_BYTES = base64.b64decode(
    'iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII='
)

STAFF_EMAIL = 'staff@feedlot.test'
STAFF_PASSWORD = 'correct-horse'


# ---------------------------------------------------------------------------
# App & client
# ---------------------------------------------------------------------------

@pytest.fixture(scope='module')
def test_app(tmp_path_factory):
    """Creates and configures a Flask instance for each test module."""
    app = create_app(TestingConfig)
    app.config['UPLOAD_FOLDER'] = str(tmp_path_factory.mktemp('uploads'))
    with app.app_context():
        db.create_all()
        yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='module')
def test_client(test_app):
    """HTTP client for the module."""
    return test_app.test_client(use_cookies=True)


# ---------------------------------------------------------------------------
# Clean session per test
# ---------------------------------------------------------------------------

@pytest.fixture(scope='function')
def db_session(test_app):
    """
    Provides the SQLAlchemy session with every table emptied.

    The services commit, so isolation is done by deleting rows up front
    rather than by rolling back a wrapping transaction.
    """
    for table in reversed(db.metadata.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    db.session.rollback()


# ---------------------------------------------------------------------------
# Standard data set
# ---------------------------------------------------------------------------

@pytest.fixture(scope='function')
def init_database(db_session):
    """
    Creates a small feedlot:
    - 2 lots (L001, L002)
    - 3 lot pens + 1 lot-independent Hospital pen
    - 2 diagnoses, 3 treatments (Excede applies to both diagnoses)
    - 5 animals: a1/a2 active in pen1, a3 dead, a4 realized, a5 active in Hospital
    """
    lot1 = Lot(id='lot1', lot_number='L001')
    lot2 = Lot(id='lot2', lot_number='L002')
    db_session.add_all([lot1, lot2])

    pen1 = Pen(id='pen1', pen_number='P001', lot_id='lot1')
    pen2 = Pen(id='pen2', pen_number='P002', lot_id='lot1')
    pen3 = Pen(id='pen3', pen_number='P003', lot_id='lot2')
    hospital = Pen(id='hospital', pen_number='Hospital', lot_id=None)
    db_session.add_all([pen1, pen2, pen3, hospital])

    d1 = Diagnosis(id='d1', name='Bovine Respiratory Disease')
    d2 = Diagnosis(id='d2', name='Foot Rot')
    db_session.add_all([d1, d2])

    t1 = Treatment(id='t1', name='Draxxin', diagnoses=[d1])
    t2 = Treatment(id='t2', name='Excede', diagnoses=[d1, d2])
    t3 = Treatment(id='t3', name='LA-200', diagnoses=[d2])
    db_session.add_all([t1, t2, t3])

    def animal(id, tag, pen_id, status=AnimalStatus.ACTIVE, eid=None, **extra):
        values = dict(
            id=id, visual_tag=tag, animal_eid=eid, gender='Steer',
            days_on_feed=45, days_to_ship=30, ltd_treatment_cost=120.50,
            pulls=1, re_pulls=0, re_treat=0, pen_id=pen_id, status=status.value,
        )
        values.update(extra)
        return Animal(**values)

    a1 = animal('a1', 'A1001', 'pen1', eid='EID-ABC9823')
    a2 = animal('a2', 'A1002', 'pen1', eid='EID-QR98505', gender='Cow', re_treat=2)
    a3 = animal('a3', 'A1003', 'pen2', status=AnimalStatus.DEAD, eid='EID-ABC9824')
    a4 = animal('a4', 'A2001', 'pen3', status=AnimalStatus.REALIZED)
    a5 = animal('a5', 'A2002', 'hospital')
    db_session.add_all([a1, a2, a3, a4, a5])
    db_session.commit()

    return {
        'lot1': lot1, 'lot2': lot2,
        'pen1': pen1, 'pen2': pen2, 'pen3': pen3, 'hospital': hospital,
        'd1': d1, 'd2': d2,
        't1': t1, 't2': t2, 't3': t3,
        'a1': a1, 'a2': a2, 'a3': a3, 'a4': a4, 'a5': a5,
    }


# ---------------------------------------------------------------------------
# Staff accounts
# ---------------------------------------------------------------------------

@pytest.fixture(scope='function')
def staff_user(db_session):
    user = User(email=STAFF_EMAIL, display_name='Dana Ruiz')
    user.set_password(STAFF_PASSWORD)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def auth_client(test_client, staff_user):
    """test_client with a signed-in staff session; signed out afterwards."""
    response = test_client.post('/api/v1/auth/login', json={'email': STAFF_EMAIL, 'password': STAFF_PASSWORD})
    assert response.status_code == 200
    yield test_client
    test_client.post('/api/v1/auth/logout')


# ---------------------------------------------------------------------------
# Uploads
# ---------------------------------------------------------------------------

@pytest.fixture(scope='function')
def upload_folder(test_app, tmp_path, monkeypatch):
    """A fresh, empty UPLOAD_FOLDER for the test."""
    monkeypatch.setitem(test_app.config, 'UPLOAD_FOLDER', str(tmp_path))
    return tmp_path


@pytest.fixture
def photo_upload():
    """Builds a FileStorage; defaults to a real PNG image."""
    def build(filename='carcass.png', content=PNG_BYTES, content_type='image/png'):
        return FileStorage(stream=io.BytesIO(content), filename=filename, content_type=content_type)
    return build
