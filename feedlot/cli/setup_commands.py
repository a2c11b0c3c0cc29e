import random

import click
from faker import Faker
from flask import Blueprint, current_app

from feedlot.extensions import db
from feedlot.models import (Animal, AnimalStatus, Diagnosis, Gender, Lot,
                            Pen, Treatment, User)
from feedlot.utils.transaction import transactional

setup_bp = Blueprint('setup', __name__)
fake = Faker()

# Diagnosis name -> treatments applicable to it
REFERENCE_DATA = {
    'Bovine Respiratory Disease': ['Draxxin', 'Nuflor', 'Excede'],
    'Foot Rot': ['Excede', 'LA-200'],
    'Pinkeye': ['LA-200', 'Eye Patch'],
    'Bloat': ['Bloat Guard', 'Poloxalene Drench'],
    'Lameness': ['Banamine', 'Excede'],
}

# Pens that hold animals independently of any lot
STANDALONE_PENS = ['Hospital', 'Buller', 'Home']


# --- Shared Logic ---

def _get_or_create(model, **kwargs):
    instance = model.query.filter_by(**kwargs).first()
    if instance is None:
        instance = model(**kwargs)
        db.session.add(instance)
    return instance


@transactional
def populate_reference_data():
    """Creates the diagnoses and treatments (idempotent)."""
    created = 0
    for diagnosis_name, treatment_names in REFERENCE_DATA.items():
        diagnosis = _get_or_create(Diagnosis, name=diagnosis_name)
        for treatment_name in treatment_names:
            treatment = _get_or_create(Treatment, name=treatment_name)
            if diagnosis not in treatment.diagnoses:
                treatment.diagnoses.append(diagnosis)
                created += 1
    current_app.logger.info(f"Reference data ready ({created} new diagnosis links)")
    return created


@transactional
def populate_demo_herd(lots=3, pens_per_lot=2, animals_per_pen=5, seed=None):
    """Creates lots, pens and animals with realistic tags and EIDs."""
    rng = random.Random(seed)
    if seed is not None:
        Faker.seed(seed)

    for name in STANDALONE_PENS:
        _get_or_create(Pen, pen_number=name, lot_id=None)

    animal_count = 0
    start = Lot.query.count()
    for lot_index in range(start + 1, start + lots + 1):
        lot = Lot(lot_number=f"L{lot_index:03d}")
        db.session.add(lot)
        db.session.flush()

        for pen_index in range(1, pens_per_lot + 1):
            pen = Pen(pen_number=f"P{lot_index:02d}{pen_index:02d}", lot_id=lot.id)
            db.session.add(pen)
            db.session.flush()

            for _ in range(animals_per_pen):
                days_on_feed = rng.randint(0, 180)
                db.session.add(Animal(
                    visual_tag=f"A{lot_index}{fake.unique.numerify('###')}",
                    animal_eid=f"EID-{fake.unique.bothify('???####').upper()}",
                    gender=rng.choice([g.value for g in Gender]),
                    days_on_feed=days_on_feed,
                    days_to_ship=max(0, 200 - days_on_feed),
                    ltd_treatment_cost=round(rng.uniform(0, 250), 2),
                    pulls=rng.randint(0, 3),
                    re_pulls=rng.randint(0, 1),
                    re_treat=0,
                    pen_id=pen.id,
                    status=AnimalStatus.ACTIVE.value,
                ))
                animal_count += 1

    current_app.logger.info(f"Demo herd created: {lots} lots, {animal_count} animals")
    return animal_count


@transactional
def create_staff_user(email, name, password):
    """Creates a staff account, or resets the password of an existing one."""
    email = email.strip().lower()
    user = User.query.filter_by(email=email).first()
    created = user is None
    if created:
        user = User(email=email, display_name=name or email.split('@')[0])
        db.session.add(user)
    elif name:
        user.display_name = name
    user.set_password(password)
    current_app.logger.info(f"Staff user {email} {'created' if created else 'updated'}")
    return user, created


@setup_bp.cli.command("reference")
def reference_cmd():
    """Load diagnoses and treatments."""
    links = populate_reference_data()
    click.echo(f"Reference data loaded ({links} new diagnosis/treatment links).")


@setup_bp.cli.command("demo-herd")
@click.option('--lots', default=3, help='Number of lots')
@click.option('--pens', default=2, help='Pens per lot')
@click.option('--animals', default=5, help='Animals per pen')
@click.option('--seed', default=None, type=int, help='Random seed for reproducible data')
def demo_herd_cmd(lots, pens, animals, seed):
    """Create demo lots, pens and animals."""
    populate_reference_data()
    count = populate_demo_herd(lots=lots, pens_per_lot=pens, animals_per_pen=animals, seed=seed)
    click.echo(f"Created {count} animals in {lots} lots.")


@setup_bp.cli.command("user")
@click.option('--email', prompt='Staff Email', help='Email used to sign in')
@click.option('--name', default=None, help='Name recorded as treatment person')
@click.option('--password', prompt='Password', hide_input=True, confirmation_prompt=True, help='Password')
def user_cmd(email, name, password):
    """Create a staff account or reset its password."""
    user, created = create_staff_user(email, name, password)
    click.echo(f"{'Created' if created else 'Updated'} staff user {user.email}.")
