from datetime import date, datetime
from enum import Enum
from peewee import (
    Model,
    BooleanField,
    CharField,
    DateField,
    DateTimeField,
    DecimalField,
    FloatField,
    TextField,
)

from database.db import db


class BaseModel(Model):
    class Meta:
        database = db


class SoftDeleteModel(BaseModel):
    """Base with soft-delete support via is_deleted flag."""

    is_deleted = BooleanField(default=False)

    def soft_delete(self) -> None:
        """Mark instance as deleted without physical removal."""
        self.is_deleted = True
        self.save()

    @classmethod
    def active(cls):
        return cls.select().where(cls.is_deleted == False)


class ClientStatus(str, Enum):
    NEW_LEAD = "new_lead"
    CONTACTED = "contacted"
    TOUR_SCHEDULED = "tour_scheduled"
    OFFER_MADE = "offer_made"
    CLOSED = "closed"
    LOST = "lost"


class ClientClassification(str, Enum):
    BUYER = "buyer"
    RENTER = "renter"
    SELLER = "seller"
    INVESTOR = "investor"


class ConsultantStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"


class ProjectStatus(str, Enum):
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class Client(SoftDeleteModel):
    customer_id = CharField(unique=True)
    first_name = CharField()
    last_name = CharField(null=True)
    email = CharField(null=True)
    phone = CharField(null=True)
    status = CharField(default=ClientStatus.NEW_LEAD.value)
    classification = CharField(null=True)
    note = TextField(null=True)
    created_at = DateTimeField(default=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def __str__(self) -> str:
        return self.full_name


class Consultant(SoftDeleteModel):
    consultant_id = CharField(unique=True)
    first_name = CharField()
    last_name = CharField(null=True)
    email = CharField(null=True)
    phone = CharField(null=True)
    role = CharField(null=True)
    status = CharField(default=ConsultantStatus.ACTIVE.value)
    created_at = DateTimeField(default=datetime.utcnow)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def __str__(self) -> str:
        return self.full_name


class Project(SoftDeleteModel):
    project_id = CharField(unique=True)
    name = CharField()
    description = TextField(null=True)
    status = CharField(default=ProjectStatus.PLANNING.value)
    start_date = DateField(null=True)
    end_date = DateField(null=True)
    budget = DecimalField(max_digits=14, decimal_places=2, null=True)
    created_at = DateTimeField(default=datetime.utcnow)

    def __str__(self) -> str:
        return self.name


class HoursLog(BaseModel):
    # project_id и consultant_id без внешних ключей: висячие ссылки допустимы
    log_id = CharField(unique=True)
    consultant_id = CharField(index=True)
    project_id = CharField(index=True)
    date = DateField(default=date.today)
    hours = FloatField()
    description = TextField(null=True)
    approval_status = CharField(default=ApprovalStatus.PENDING.value)
    created_at = DateTimeField(default=datetime.utcnow)


class StoredCollection(BaseModel):
    """Документ JSON под фиксированным ключом (аналог localStorage)."""

    key = CharField(unique=True)
    payload = TextField()
    updated_at = DateTimeField(default=datetime.utcnow)
