from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
import datetime as dt
from datetime import datetime, date

from HomeCareAPI.constants import HEATING_TYPES, LOG_CATEGORIES, PRIORITIES, PROPERTY_TYPES, SEASONS, TASK_STATUSES


def _one_of(value, allowed, label):
    if value is not None and value not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return value


# Pydantic schemas for auth
class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str

class LoginRequest(BaseModel):
    email: str
    password: str

class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    class Config:
        from_attributes = True

class AuthResponse(BaseModel):
    id: int
    name: str
    email: str
    token: str
    token_type: str = "bearer"


# Pydantic schema for properties
class PropertyBase(BaseModel):
    name: str
    address: str
    type: str
    year_built: int
    area: float = Field(gt=0)
    heating_type: str
    floors: int = Field(ge=1)
    purchase_date: Optional[date] = None
    description: Optional[str] = None

    @field_validator("type")
    @classmethod
    def _check_type(cls, value):
        return _one_of(value, PROPERTY_TYPES, "type")

    @field_validator("heating_type")
    @classmethod
    def _check_heating_type(cls, value):
        return _one_of(value, HEATING_TYPES, "heating_type")

class PropertyCreate(PropertyBase):
    pass

class PropertyUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    type: Optional[str] = None
    year_built: Optional[int] = None
    area: Optional[float] = Field(default=None, gt=0)
    heating_type: Optional[str] = None
    floors: Optional[int] = Field(default=None, ge=1)
    purchase_date: Optional[date] = None
    description: Optional[str] = None

    @field_validator("type")
    @classmethod
    def _check_type(cls, value):
        return _one_of(value, PROPERTY_TYPES, "type")

    @field_validator("heating_type")
    @classmethod
    def _check_heating_type(cls, value):
        return _one_of(value, HEATING_TYPES, "heating_type")

class PropertyResponse(PropertyBase):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime
    role: Optional[str] = None
    is_owner: Optional[bool] = None

    class Config:
        from_attributes = True


# Pydantic schemas for property sharing
class ShareRequest(BaseModel):
    email: str
    role: str

class RoleUpdate(BaseModel):
    role: str

class AccessEntry(BaseModel):
    id: int
    user_id: Optional[int] = None
    name: str
    email: Optional[str] = None
    role: str
    invite_email: Optional[str] = None
    invite_accepted: bool
    invited_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    message: Optional[str] = None

class AccessListResponse(BaseModel):
    property_id: int
    access: List[AccessEntry]

class RoleUpdateResponse(BaseModel):
    message: str
    role: str


# Pydantic schemas for planned tasks
class PlannedTaskBase(BaseModel):
    title: str
    due_date: date
    priority: str = "Medium"
    estimated_cost: Optional[str] = ""

    @field_validator("priority")
    @classmethod
    def _check_priority(cls, value):
        return _one_of(value, PRIORITIES, "priority")

class PlannedTaskCreate(PlannedTaskBase):
    property_id: int

class PlannedTaskUpdate(BaseModel):
    title: Optional[str] = None
    due_date: Optional[date] = None
    priority: Optional[str] = None
    estimated_cost: Optional[str] = None
    status: Optional[str] = None

    @field_validator("priority")
    @classmethod
    def _check_priority(cls, value):
        return _one_of(value, PRIORITIES, "priority")

    @field_validator("status")
    @classmethod
    def _check_status(cls, value):
        return _one_of(value, TASK_STATUSES, "status")

class PlannedTaskResponse(PlannedTaskBase):
    id: int
    property_id: int
    user_id: int
    recurring_task_id: Optional[int] = None
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Pydantic schemas for recurring tasks
class RecurringTaskCreate(BaseModel):
    property_id: int
    title: str
    description: Optional[str] = None
    frequency: str
    priority: Optional[str] = None
    estimated_cost: Optional[str] = None
    category: Optional[str] = None

class RecurringTaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    frequency: Optional[str] = None
    priority: Optional[str] = None
    estimated_cost: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None

class RecurringTaskResponse(BaseModel):
    id: int
    property_id: int
    user_id: int
    title: str
    description: Optional[str] = None
    frequency: str
    priority: str
    estimated_cost: Optional[str] = None
    category: str
    next_due_date: date
    last_generated_date: Optional[date] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class RecurringTaskCreateResponse(BaseModel):
    recurring_task: RecurringTaskResponse
    planned_task: PlannedTaskResponse

class GenerateResponse(BaseModel):
    message: str
    tasks: List[PlannedTaskResponse]
    failed: List[int] = Field(default_factory=list)


# Pydantic schemas for maintenance logs
class MaintenanceLogBase(BaseModel):
    title: str
    date: dt.date
    cost: float = Field(ge=0)
    provider: Optional[str] = "Unknown"
    category: str
    notes: Optional[str] = ""

    @field_validator("category")
    @classmethod
    def _check_category(cls, value):
        return _one_of(value, LOG_CATEGORIES, "category")

class MaintenanceLogCreate(MaintenanceLogBase):
    property_id: int

class MaintenanceLogUpdate(BaseModel):
    title: Optional[str] = None
    date: Optional[dt.date] = None
    cost: Optional[float] = Field(default=None, ge=0)
    provider: Optional[str] = None
    category: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _check_category(cls, value):
        return _one_of(value, LOG_CATEGORIES, "category")

class MaintenanceLogResponse(MaintenanceLogBase):
    id: int
    property_id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Pydantic schemas for documents
class DocumentCreate(BaseModel):
    property_id: int
    name: str
    type: str
    data: str
    date: dt.date
    size: int = Field(ge=0)
    log_id: Optional[int] = None

class DocumentResponse(BaseModel):
    id: int
    property_id: int
    user_id: int
    log_id: Optional[int] = None
    name: str
    type: str
    data: str
    date: dt.date
    size: int
    created_at: datetime

    class Config:
        from_attributes = True


# Pydantic schemas for appliances
class ApplianceCreate(BaseModel):
    property_id: int
    type: str
    model_number: Optional[str] = None
    year_installed: int
    month_installed: int = Field(ge=1, le=12)
    manual_id: Optional[int] = None

class ApplianceUpdate(BaseModel):
    type: Optional[str] = None
    model_number: Optional[str] = None
    year_installed: Optional[int] = None
    month_installed: Optional[int] = Field(default=None, ge=1, le=12)
    manual_id: Optional[int] = None

class ApplianceResponse(BaseModel):
    id: int
    property_id: int
    type: str
    model_number: Optional[str] = None
    year_installed: int
    month_installed: int
    manual_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Pydantic schemas for warranties
class WarrantyCreate(BaseModel):
    appliance_id: int
    provider: str
    expiration_date: date
    coverage_details: Optional[str] = None
    document_id: Optional[int] = None

class WarrantyUpdate(BaseModel):
    provider: Optional[str] = None
    expiration_date: Optional[date] = None
    coverage_details: Optional[str] = None
    document_id: Optional[int] = None

class WarrantyResponse(BaseModel):
    id: int
    appliance_id: int
    provider: str
    expiration_date: date
    coverage_details: Optional[str] = None
    document_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Pydantic schemas for seasonal checklists
class ChecklistItem(BaseModel):
    id: str
    title: str
    completed: bool = False
    due_date: Optional[date] = None

class ChecklistUpdate(BaseModel):
    items: List[ChecklistItem]

class ChecklistResponse(BaseModel):
    id: int
    property_id: int
    season: str
    items: List[ChecklistItem]
    completion_percentage: int
    last_updated: datetime

    @field_validator("season")
    @classmethod
    def _check_season(cls, value):
        return _one_of(value, SEASONS, "season")
