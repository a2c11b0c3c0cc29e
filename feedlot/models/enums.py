# feedlot/models/enums.py
"""
Enumeration classes for the Feedlot application.
"""
import enum


class AnimalStatus(enum.Enum):
    """Lifecycle status of an animal."""
    ACTIVE = 'active'
    DEAD = 'dead'
    REALIZED = 'realized'

    @property
    def is_terminal(self):
        return self is not AnimalStatus.ACTIVE

    @classmethod
    def values(cls):
        return [choice.value for choice in cls]


class Gender(enum.Enum):
    STEER = 'Steer'
    COW = 'Cow'


class Severity(enum.Enum):
    """Clinician-assigned urgency of a treatment."""
    CRITICAL = 'Critical'
    MEDIUM = 'Medium'
    LOW = 'Low'

    @property
    def level(self):
        """Return numeric level for comparison."""
        return {Severity.LOW: 0, Severity.MEDIUM: 1, Severity.CRITICAL: 2}[self]

    def __lt__(self, other):
        return self.level < other.level if self.__class__ is other.__class__ else NotImplemented
    def __le__(self, other):
        return self.level <= other.level if self.__class__ is other.__class__ else NotImplemented
    def __gt__(self, other):
        return self.level > other.level if self.__class__ is other.__class__ else NotImplemented
    def __ge__(self, other):
        return self.level >= other.level if self.__class__ is other.__class__ else NotImplemented


class DeathReason(enum.Enum):
    """Fixed causes offered on the death form."""
    RESPIRATORY_DISEASE = 'Respiratory Disease'
    DIGESTIVE_DISORDER = 'Digestive Disorder'
    INJURY = 'Injury'
    NEUROLOGICAL_ISSUE = 'Neurological Issue'
    METABOLIC_DISEASE = 'Metabolic Disease'
    UNKNOWN = 'Unknown'

    @classmethod
    def choices(cls):
        """Return (value, label) pairs for select widgets."""
        return [(choice.value, choice.value) for choice in cls]


class LifecycleAction(enum.Enum):
    """Actions staff can perform against an animal."""
    TREAT = 'Treat'
    RECORD_DEATH = 'RecordDeath'
    REALIZE = 'Realize'
