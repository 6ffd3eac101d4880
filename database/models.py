import json
from uuid import uuid4

from peewee import (
    CharField,
    DateField,
    DecimalField,
    Model,
    TextField,
)

from database.db import db


def new_document_id() -> str:
    return uuid4().hex


class JSONField(TextField):
    """Stores nested sub-records (checklist, budget, markers) as JSON text."""

    def db_value(self, value):
        if value is None:
            return None
        return json.dumps(value, ensure_ascii=False)

    def python_value(self, value):
        if value is None or value == "":
            return None
        return json.loads(value)


class BaseModel(Model):
    class Meta:
        database = db


class DocumentModel(BaseModel):
    """A document of one collection, keyed by an opaque store-assigned id."""

    id = CharField(primary_key=True, max_length=32, default=new_document_id)


class Client(DocumentModel):
    client_type = CharField(default="juridica")
    company_name = CharField(index=True)
    contact_name = CharField()
    cpf = CharField(null=True)
    cnpj = CharField(null=True)
    phone = CharField()
    email = CharField()
    address = TextField()
    observations = TextField(null=True)
    status = CharField(default="active", index=True)

    class Meta:
        table_name = "clients"

    def __str__(self) -> str:
        return self.company_name


class Equipment(DocumentModel):
    brand = CharField(index=True)
    model = CharField()
    serial_number = CharField()
    acquisition_date = DateField(null=True)
    # plain ids, not foreign keys: dangling references are allowed
    owner_id = CharField(index=True)
    equipment_type = CharField()
    technical_status = CharField(default="in_use")
    technical_observations = TextField(null=True)
    status = CharField(default="active", index=True)

    availability_type = CharField(default="internal")

    sale_price = DecimalField(max_digits=12, decimal_places=2, null=True)
    sale_status = CharField(null=True)
    sale_date = DateField(null=True)
    buyer_id = CharField(null=True)

    rental_price = JSONField(null=True)
    rental_status = CharField(null=True)
    rental_client_id = CharField(null=True)
    rental_start_date = DateField(null=True)
    rental_expected_return_date = DateField(null=True)
    rental_actual_return_date = DateField(null=True)

    class Meta:
        table_name = "equipment"

    def __str__(self) -> str:
        return f"{self.brand} {self.model}"


class ServiceOrder(DocumentModel):
    readable_id = CharField(index=True)
    entry_date = DateField(index=True)
    exit_date = DateField(null=True)
    problem_description = TextField()
    status = CharField(default="Aberta", index=True)
    client_id = CharField(index=True)
    equipment_id = CharField(index=True)
    technician_notes = TextField(null=True)

    inspection_checklist = JSONField(null=True)
    visual_inspection = JSONField(null=True)
    budget = JSONField(null=True)
    execution = JSONField(null=True)
    delivery = JSONField(null=True)

    class Meta:
        table_name = "service_orders"

    def __str__(self) -> str:
        return self.readable_id
