from datetime import date
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from services.orders.workflow import selectable_status

ClientType = Literal["fisica", "juridica"]
ChecklistStatus = Literal["OK", "Defeito", "Troca"]
Severity = Literal["critical", "attention"]
BudgetStatus = Literal["Pendente", "Aprovado", "Reprovado"]


class ClientBase(BaseModel):
    client_type: ClientType | None = None
    company_name: str | None = None
    contact_name: str | None = None
    cpf: str | None = None
    cnpj: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None
    observations: str | None = None


class ClientCreate(ClientBase):
    client_type: ClientType = "juridica"
    company_name: str
    contact_name: str
    phone: str
    email: str
    address: str
    cep: str | None = None
    uf: str | None = None
    city: str | None = None


class ClientUpdate(ClientBase):
    pass


class ClientRead(ClientBase):
    id: str
    status: str


class RentalPriceSchema(BaseModel):
    daily: float = Field(0, ge=0)
    weekly: float = Field(0, ge=0)
    monthly: float = Field(0, ge=0)


class EquipmentBase(BaseModel):
    brand: str | None = None
    model: str | None = None
    serial_number: str | None = None
    equipment_type: str | None = None
    technical_status: str | None = None
    technical_observations: str | None = None
    acquisition_date: date | None = None
    availability_type: Literal["internal", "sale", "rent"] | None = None
    sale_price: float | None = Field(None, ge=0)
    sale_status: Literal["available", "sold"] | None = None
    rental_price: RentalPriceSchema | None = None
    rental_status: Literal["available", "rented"] | None = None


class EquipmentInline(EquipmentBase):
    """Equipment registered together with a new order; the owner is the order's client."""

    brand: str
    model: str
    serial_number: str
    equipment_type: str


class EquipmentCreate(EquipmentInline):
    owner_id: str


class EquipmentUpdate(EquipmentBase):
    owner_id: str | None = None
    sale_date: date | None = None
    buyer_id: str | None = None
    rental_client_id: str | None = None
    rental_start_date: date | None = None
    rental_expected_return_date: date | None = None
    rental_actual_return_date: date | None = None


class EquipmentRead(EquipmentUpdate):
    id: str
    owner_id: str
    status: str


class ChecklistItem(BaseModel):
    status: ChecklistStatus
    observation: str | None = None


class BudgetItemCreate(BaseModel):
    description: str = Field(..., min_length=1)
    quantity: float = Field(1, gt=0)
    unit_price: float = Field(0, ge=0)


class BudgetItemEdit(BudgetItemCreate):
    quantity: float = Field(1, ge=0)


class BudgetCreate(BaseModel):
    items: list[BudgetItemCreate] = []
    payment_method: str = ""
    observations: str = ""
    status: BudgetStatus = "Pendente"


class BudgetEdit(BudgetCreate):
    items: list[BudgetItemEdit] = []


class RectMarkerSchema(BaseModel):
    id: int
    shape: Literal["rect"] = "rect"
    x: float
    y: float
    width: float
    height: float
    type: Severity = "attention"
    note: str = ""


class CircleMarkerSchema(BaseModel):
    id: int
    shape: Literal["circle"] = "circle"
    cx: float
    cy: float
    r: float
    type: Severity = "attention"
    note: str = ""


MarkerSchema = Annotated[Union[RectMarkerSchema, CircleMarkerSchema], Field(discriminator="shape")]


class VisualInspectionSchema(BaseModel):
    general_observations: str = ""
    markers: list[MarkerSchema] = []


class ExecutionSchema(BaseModel):
    technician: str = ""
    procedures: str = ""
    completion_date: date | None = None


class DeliverySchema(BaseModel):
    delivery_date: date | None = None
    final_observations: str = ""


class StatusMixin(BaseModel):
    @field_validator("status", check_fields=False)
    @classmethod
    def _selectable(cls, value):
        if value is None:
            return value
        return selectable_status(value).value


class OrderCreate(StatusMixin):
    client_id: str | None = None
    equipment_id: str | None = None
    problem_description: str
    entry_date: date
    exit_date: date | None = None
    status: str = "Aberta"
    technician_notes: str = ""
    inspection_checklist: dict[str, ChecklistItem | None] | None = None
    visual_inspection: VisualInspectionSchema | None = None
    budget: BudgetCreate | None = None
    execution: ExecutionSchema | None = None
    delivery: DeliverySchema | None = None
    new_client: ClientCreate | None = None
    new_equipment: EquipmentInline | None = None


class OrderUpdate(StatusMixin):
    client_id: str | None = None
    equipment_id: str | None = None
    problem_description: str | None = None
    entry_date: date | None = None
    exit_date: date | None = None
    status: str | None = None
    technician_notes: str | None = None
    inspection_checklist: dict[str, ChecklistItem | None] | None = None
    visual_inspection: VisualInspectionSchema | None = None
    budget: BudgetEdit | None = None
    execution: ExecutionSchema | None = None
    delivery: DeliverySchema | None = None


class StatusChange(StatusMixin):
    status: str


class MarkerDraw(BaseModel):
    canvas: Literal["image", "lens"]
    start: tuple[float, float]
    end: tuple[float, float]
    type: Severity = "attention"
    note: str = ""


class GeneralObservations(BaseModel):
    text: str = ""


class BudgetItemRead(BaseModel):
    description: str
    quantity: float
    unit_price: float


class BudgetRead(BaseModel):
    items: list[BudgetItemRead] = []
    payment_method: str = ""
    observations: str = ""
    status: str = "Pendente"


class OrderRead(BaseModel):
    id: str
    readable_id: str
    entry_date: date | None
    exit_date: date | None = None
    problem_description: str
    status: str
    client_id: str
    equipment_id: str
    technician_notes: str = ""
    inspection_checklist: dict[str, ChecklistItem] = {}
    visual_inspection: VisualInspectionSchema
    budget: BudgetRead
    execution: ExecutionSchema
    delivery: DeliverySchema
    client_name: str = ""
    equipment_label: str = ""
    serial_number: str = ""
    budget_total: float = 0


class SummaryRead(BaseModel):
    summary: str


class StateRead(BaseModel):
    id: int
    sigla: str
    nome: str


class CityRead(BaseModel):
    id: int
    nome: str
