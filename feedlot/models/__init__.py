# feedlot/models/__init__.py
"""
Database models for the Feedlot application.
This module re-exports all models from their respective domain modules.
"""

from .animal import Animal
from .enums import (AnimalStatus, DeathReason, Gender, LifecycleAction,
                    Severity)
from .events import AnimalDeath, AnimalRealization, AnimalTreatment
from .location import Lot, Pen
from .reference import Diagnosis, Treatment, treatment_diagnoses
from .user import User

__all__ = [
    # Enums
    'AnimalStatus',
    'DeathReason',
    'Gender',
    'LifecycleAction',
    'Severity',

    # Locations
    'Lot',
    'Pen',

    # Animals
    'Animal',

    # Reference data
    'Diagnosis',
    'Treatment',
    'treatment_diagnoses',

    # Events
    'AnimalTreatment',
    'AnimalDeath',
    'AnimalRealization',

    # Staff
    'User',
]
