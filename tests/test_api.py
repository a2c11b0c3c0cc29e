from feedlot import db
from feedlot.models import Animal, AnimalDeath, AnimalTreatment

API = '/api/v1'


def test_get_animal_detail(test_client, db_session, init_database):
    response = test_client.get(f'{API}/animals/a1')
    assert response.status_code == 200

    data = response.get_json()
    assert data['visual_tag'] == 'A1001'
    assert data['lot_id'] == 'lot1'
    assert data['weeks_on_feed'] == 7
    assert data['ltd_treatment_cost_display'] == '$120.50'
    assert data['allowed_actions'] == ['Realize', 'RecordDeath', 'Treat']


def test_get_unknown_animal_returns_404(test_client, db_session, init_database):
    response = test_client.get(f'{API}/animals/ghost')
    assert response.status_code == 404
    assert response.get_json()['code'] == 'RESOURCE_NOT_FOUND'


def test_list_animals_remembers_selection(test_client, db_session, init_database):
    """
    GIVEN a lot and pen chosen on one request
    WHEN the animal list is requested again without parameters
    THEN the previous selection is reused from the session
    """
    response = test_client.get(f'{API}/animals?lot_id=lot1&pen_id=pen2')
    assert [a['id'] for a in response.get_json()] == ['a3']

    response = test_client.get(f'{API}/animals')
    assert [a['id'] for a in response.get_json()] == ['a3']

    response = test_client.get(f'{API}/animals?lot_id=lot2')
    assert [a['id'] for a in response.get_json()] == ['a4']


def test_search_switches_list_to_found_animal(test_client, db_session, init_database):
    test_client.get(f'{API}/animals?lot_id=lot2')

    response = test_client.get(f'{API}/animals/search?eid=9823')
    assert response.status_code == 200
    assert response.get_json()['id'] == 'a1'

    response = test_client.get(f'{API}/animals')
    assert [a['id'] for a in response.get_json()] == ['a1']


def test_search_errors(test_client, db_session, init_database):
    response = test_client.get(f'{API}/animals/search?eid=')
    assert response.status_code == 400
    assert response.get_json()['fields'] == ['eid']

    response = test_client.get(f'{API}/animals/search?eid=NOPE')
    assert response.status_code == 404
    assert response.get_json()['code'] == 'EID_NOT_FOUND'


def test_candidates(test_client, db_session, init_database):
    response = test_client.get(f'{API}/animals/candidates?eid=ABC')
    assert [a['id'] for a in response.get_json()] == ['a1', 'a3']


def test_post_treatment(auth_client, db_session, init_database):
    response = auth_client.post(f'{API}/animals/a1/treatments', json={
        'diagnosis_id': 'd1', 'treatment_id': 't2', 'move_to': 'hospital', 'severity': 'Low',
    })
    assert response.status_code == 201

    data = response.get_json()
    assert data['created'] is True
    assert data['animal']['re_treat'] == 1
    assert data['animal']['pen_id'] == 'hospital'
    assert data['record']['severity'] == 'Low'
    assert data['record']['treatment_person'] == 'Dana Ruiz'

    history = auth_client.get(f'{API}/animals/a1/treatments').get_json()
    assert len(history) == 1


def test_post_treatment_validation_error(auth_client, db_session, init_database):
    response = auth_client.post(f'{API}/animals/a1/treatments', json={'diagnosis_id': 'd1'})
    assert response.status_code == 400

    data = response.get_json()
    assert data['code'] == 'VALIDATION_ERROR'
    assert set(data['fields']) == {'treatment_id', 'move_to'}


def test_post_treatment_to_dead_animal_conflicts(auth_client, db_session, init_database):
    response = auth_client.post(f'{API}/animals/a3/treatments', json={
        'diagnosis_id': 'd1', 'treatment_id': 't1', 'move_to': 'hospital',
    })
    assert response.status_code == 409

    data = response.get_json()
    assert data['code'] == 'ALREADY_TERMINAL'
    assert data['current_status'] == 'dead'
    db_session.expire_all()
    assert AnimalTreatment.query.count() == 0


def test_put_death_creates_then_amends(auth_client, db_session, init_database):
    response = auth_client.put(f'{API}/animals/a1/death', json={'reason': 'Injury'})
    assert response.status_code == 201
    assert response.get_json()['animal']['status'] == 'dead'

    response = auth_client.put(f'{API}/animals/a1/death', json={'reason': 'Unknown', 'necropsy': True})
    assert response.status_code == 200
    assert response.get_json()['created'] is False

    record = auth_client.get(f'{API}/animals/a1/death').get_json()
    assert record['reason'] == 'Unknown'
    assert record['necropsy'] is True

    db_session.expire_all()
    assert AnimalDeath.query.filter_by(animal_id='a1').count() == 1
    assert db.session.get(Animal, 'a1').status == 'dead'


def test_put_death_with_photo_upload(auth_client, db_session, init_database, upload_folder, photo_upload):
    response = auth_client.put(
        f'{API}/animals/a2/death',
        data={'reason': 'Digestive Disorder', 'photo': photo_upload('pen.png')},
        content_type='multipart/form-data',
    )
    assert response.status_code == 201
    assert response.get_json()['record']['image_url'].startswith('deaths/a2-')


def test_get_missing_death_record(test_client, db_session, init_database):
    assert test_client.get(f'{API}/animals/a1/death').status_code == 404


def test_realize_then_repeat(auth_client, db_session, init_database):
    response = auth_client.post(f'{API}/animals/a1/realization', json={'reason_id': 'd1', 'price': 850})
    assert response.status_code == 201

    response = auth_client.post(f'{API}/animals/a1/realization', json={'reason_id': 'd2'})
    assert response.status_code == 200
    assert response.get_json()['record']['reason_id'] == 'd1'

    detail = auth_client.get(f'{API}/animals/a1').get_json()
    assert detail['status'] == 'realized'
    assert detail['allowed_actions'] == ['Realize']


def test_lots_and_pens(test_client, db_session, init_database):
    lots = test_client.get(f'{API}/lots').get_json()
    assert [l['lot_number'] for l in lots] == ['L001', 'L002']

    pens = test_client.get(f'{API}/lots/lot1/pens').get_json()
    assert [p['id'] for p in pens] == ['pen1', 'pen2']

    hospital = test_client.get(f'{API}/pens/hospital').get_json()
    assert hospital['lot'] is None

    pen = test_client.get(f'{API}/pens/pen3').get_json()
    assert pen['lot']['lot_number'] == 'L002'

    assert test_client.get(f'{API}/lots/nope').status_code == 404


def test_reference_endpoints(test_client, db_session, init_database):
    diagnoses = test_client.get(f'{API}/reference/diagnoses').get_json()
    assert [d['name'] for d in diagnoses] == ['Bovine Respiratory Disease', 'Foot Rot']

    treatments = test_client.get(f'{API}/reference/diagnoses/d2/treatments').get_json()
    assert [t['name'] for t in treatments] == ['Excede', 'LA-200']

    reasons = test_client.get(f'{API}/reference/death-reasons').get_json()
    assert {'value': 'Injury', 'label': 'Injury'} in reasons

    assert test_client.get(f'{API}/reference/diagnoses/nope/treatments').status_code == 404


def test_writes_require_sign_in(test_client, db_session, init_database):
    """
    GIVEN no signed-in staff member
    WHEN any event is submitted
    THEN the API answers 401 and nothing is written
    """
    responses = [
        test_client.post(f'{API}/animals/a1/treatments', json={
            'diagnosis_id': 'd1', 'treatment_id': 't1', 'move_to': 'hospital',
        }),
        test_client.put(f'{API}/animals/a1/death', json={'reason': 'Injury'}),
        test_client.post(f'{API}/animals/a1/realization', json={'reason_id': 'd1'}),
    ]
    assert [r.status_code for r in responses] == [401, 401, 401]
    assert responses[0].get_json()['code'] == 'AUTHENTICATION_REQUIRED'

    db_session.expire_all()
    assert db.session.get(Animal, 'a1').status == 'active'
    assert AnimalTreatment.query.count() == 0


def test_login_with_wrong_password(test_client, db_session, staff_user):
    response = test_client.post(f'{API}/auth/login', json={'email': staff_user.email, 'password': 'nope'})
    assert response.status_code == 401

    response = test_client.post(f'{API}/auth/login', json={'email': '', 'password': ''})
    assert response.status_code == 400
    assert response.get_json()['fields'] == ['email', 'password']


def test_login_me_logout(test_client, db_session, staff_user):
    response = test_client.post(f'{API}/auth/login', json={'email': 'STAFF@feedlot.test ', 'password': 'correct-horse'})
    assert response.status_code == 200
    assert response.get_json()['display_name'] == 'Dana Ruiz'

    assert test_client.get(f'{API}/auth/me').get_json()['email'] == 'staff@feedlot.test'

    assert test_client.post(f'{API}/auth/logout').status_code == 200
    assert test_client.get(f'{API}/auth/me').status_code == 401


def test_explicit_treatment_person_wins(auth_client, db_session, init_database):
    response = auth_client.post(f'{API}/animals/a1/treatments', json={
        'diagnosis_id': 'd1', 'treatment_id': 't1', 'move_to': 'pen1', 'treatment_person': 'Vet on call',
    })
    assert response.get_json()['record']['treatment_person'] == 'Vet on call'
