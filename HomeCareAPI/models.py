from sqlalchemy import Column, Integer, String, Boolean, Float, Date, DateTime, ForeignKey, Text, JSON, Enum, func, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.ext.declarative import declarative_base

from HomeCareAPI.constants import Role


Base = declarative_base()


# Users
class User(Base):
    """
    Represents a registered user.

    Attributes:
        id (int): Primary key.
        name (str): Display name.
        email (str): Email address (unique, stored lower-case).
        encrypted_password (str): bcrypt hash of the password.
        created_at (datetime): Creation timestamp.
        updated_at (datetime): Update timestamp.
        properties (list[Property]): Properties owned by the user.
        access_grants (list[PropertyAccess]): Grants bound to the user.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    encrypted_password = Column(String, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    properties = relationship("Property", back_populates="owner")
    access_grants = relationship("PropertyAccess", back_populates="user")


# Properties
class Property(Base):
    """
    Represents a property (home) being maintained.

    Exactly one user owns a property; other users reach it through
    `PropertyAccess` grants.

    Attributes:
        id (int): Primary key.
        user_id (int): Foreign key to the owning User.
        name (str): Property name.
        address (str): Street address.
        type (str): Property type (e.g. "Condo").
        year_built (int): Year of construction.
        area (float): Living area in square metres.
        heating_type (str): Heating system (e.g. "Heat Pump").
        floors (int): Number of floors.
        purchase_date (date): Purchase date.
        description (str): Free-form description.
        created_at (datetime): Creation timestamp.
        updated_at (datetime): Update timestamp.
    """
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    type = Column(String, nullable=False)
    year_built = Column(Integer, nullable=False)
    area = Column(Float, nullable=False)
    heating_type = Column(String, nullable=False)
    floors = Column(Integer, nullable=False)
    purchase_date = Column(Date)
    description = Column(Text)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    owner = relationship("User", back_populates="properties")
    access = relationship("PropertyAccess", back_populates="property", cascade="all, delete-orphan")
    logs = relationship("MaintenanceLog", back_populates="property", cascade="all, delete-orphan")
    planned_tasks = relationship("PlannedTask", back_populates="property", cascade="all, delete-orphan")
    recurring_tasks = relationship("RecurringTask", back_populates="property", cascade="all, delete-orphan")
    documents = relationship("AppDocument", back_populates="property", cascade="all, delete-orphan")
    appliances = relationship("Appliance", back_populates="property", cascade="all, delete-orphan")
    checklists = relationship("SeasonalChecklist", back_populates="property", cascade="all, delete-orphan")


# Property access grants
class PropertyAccess(Base):
    """
    Binds one identity to one role on one property.

    A grant is either bound to a user (`user_id` set) or pending, in which case
    only `invite_email` is set and `invite_accepted` is False. Pending grants
    confer no access.

    Attributes:
        id (int): Primary key.
        property_id (int): Foreign key to the Property.
        user_id (int): Foreign key to the User; null while the invite is pending.
        role (Role): owner, admin, edit or view.
        invite_email (str): Email the invite was sent to.
        invite_accepted (bool): Whether the grant is bound and active.
        invited_at (datetime): When the grant was created.
        accepted_at (datetime): When the grant became active.
    """
    __tablename__ = "property_access"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    role = Column(
        Enum(Role, name="access_role", native_enum=False, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
    )
    invite_email = Column(String, index=True)
    invite_accepted = Column(Boolean, default=False, nullable=False)
    invited_at = Column(DateTime, default=func.now(), nullable=False)
    accepted_at = Column(DateTime)

    property = relationship("Property", back_populates="access")
    user = relationship("User", back_populates="access_grants")


# Maintenance logs
class MaintenanceLog(Base):
    """
    A maintenance event that has already happened.

    Attributes:
        id (int): Primary key.
        property_id (int): Foreign key to the Property.
        user_id (int): User who recorded the log.
        title (str): Short description of the work.
        date (date): When the work was done.
        cost (float): Cost of the work.
        provider (str): Contractor name.
        category (str): Work category (e.g. "Plumbing").
        notes (str): Free-form notes.
    """
    __tablename__ = "maintenance_logs"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    cost = Column(Float, nullable=False, default=0.0)
    provider = Column(String, nullable=False, default="Unknown")
    category = Column(String, nullable=False)
    notes = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    property = relationship("Property", back_populates="logs")
    documents = relationship("AppDocument", back_populates="log")


# Planned tasks
class PlannedTask(Base):
    """
    A single concrete planned maintenance item.

    Tasks materialized by the recurring task scheduler carry the id of their
    definition; at most one exists per definition and due date.

    Attributes:
        id (int): Primary key.
        property_id (int): Foreign key to the Property.
        user_id (int): User the task was created for.
        recurring_task_id (int): Foreign key to the RecurringTask, if generated.
        title (str): Task title.
        due_date (date): When the task is due.
        priority (str): High, Medium or Low.
        estimated_cost (str): Free-form cost estimate.
        status (str): pending or completed.
    """
    __tablename__ = "planned_tasks"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    recurring_task_id = Column(Integer, ForeignKey("recurring_tasks.id", ondelete="SET NULL"), index=True)
    title = Column(String, nullable=False)
    due_date = Column(Date, nullable=False)
    priority = Column(String, nullable=False, default="Medium")
    estimated_cost = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    property = relationship("Property", back_populates="planned_tasks")
    recurring_task = relationship("RecurringTask", back_populates="instances")

    __table_args__ = (
        UniqueConstraint("recurring_task_id", "due_date", name="uq_planned_tasks_recurring_due"),
    )


# Recurring task definitions
class RecurringTask(Base):
    """
    Template describing how often a maintenance task recurs.

    `next_due_date` is always the due date of the most recently materialized
    PlannedTask for this definition.

    Attributes:
        id (int): Primary key.
        property_id (int): Foreign key to the Property.
        user_id (int): User who created the definition.
        title (str): Task title.
        description (str): Free-form description.
        frequency (str): weekly, biweekly, monthly, quarterly, biannual or annual.
        priority (str): High, Medium or Low.
        estimated_cost (str): Free-form cost estimate.
        category (str): Work category.
        next_due_date (date): Due date of the latest generated task.
        last_generated_date (date): Day the scheduler last generated a task.
        is_active (bool): Inactive definitions are skipped by the scheduler.
    """
    __tablename__ = "recurring_tasks"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text)
    frequency = Column(String, nullable=False)
    priority = Column(String, nullable=False, default="Medium")
    estimated_cost = Column(String)
    category = Column(String, nullable=False, default="General")
    next_due_date = Column(Date, nullable=False)
    last_generated_date = Column(Date)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    property = relationship("Property", back_populates="recurring_tasks")
    instances = relationship("PlannedTask", back_populates="recurring_task")


# Documents
class AppDocument(Base):
    """
    A document (manual, receipt, photo) stored against a property.

    Attributes:
        id (int): Primary key.
        property_id (int): Foreign key to the Property.
        user_id (int): Uploader.
        log_id (int): Optional link to a MaintenanceLog.
        name (str): File name.
        type (str): MIME type.
        data (str): Base64 encoded content.
        date (date): Document date.
        size (int): Size in bytes.
    """
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    log_id = Column(Integer, ForeignKey("maintenance_logs.id", ondelete="SET NULL"))
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    data = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    size = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    property = relationship("Property", back_populates="documents")
    log = relationship("MaintenanceLog", back_populates="documents")


# Appliances
class Appliance(Base):
    """
    An appliance or building system installed in a property.

    Attributes:
        id (int): Primary key.
        property_id (int): Foreign key to the Property.
        type (str): e.g. "Water Heater".
        model_number (str): Manufacturer model number.
        year_installed (int): Installation year.
        month_installed (int): Installation month (1-12).
        manual_id (int): Optional Document holding the manual.
        warranty (Warranty): The appliance's warranty, if any.
    """
    __tablename__ = "appliances"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    type = Column(String, nullable=False)
    model_number = Column(String)
    year_installed = Column(Integer, nullable=False)
    month_installed = Column(Integer, nullable=False)
    manual_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    property = relationship("Property", back_populates="appliances")
    warranty = relationship("Warranty", back_populates="appliance", uselist=False, cascade="all, delete-orphan")


# Warranties
class Warranty(Base):
    """
    Warranty coverage for an appliance; at most one per appliance.

    Attributes:
        id (int): Primary key.
        appliance_id (int): Foreign key to the Appliance (unique).
        provider (str): Warranty provider.
        expiration_date (date): When coverage ends.
        coverage_details (str): Free-form coverage notes.
        document_id (int): Optional Document holding the warranty terms.
    """
    __tablename__ = "warranties"

    id = Column(Integer, primary_key=True, index=True)
    appliance_id = Column(Integer, ForeignKey("appliances.id"), nullable=False)
    provider = Column(String, nullable=False)
    expiration_date = Column(Date, nullable=False)
    coverage_details = Column(Text)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"))
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    appliance = relationship("Appliance", back_populates="warranty")

    __table_args__ = (
        UniqueConstraint("appliance_id", name="uq_warranties_appliance_id"),
    )


# Seasonal checklists
class SeasonalChecklist(Base):
    """
    A per-season checklist for a property; one per (property, season).

    Attributes:
        id (int): Primary key.
        property_id (int): Foreign key to the Property.
        season (str): Spring, Summer, Fall or Winter.
        items (list[dict]): Items as `{"id", "title", "completed", "due_date"}`.
        updated_at (datetime): Last change.
    """
    __tablename__ = "seasonal_checklists"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
    season = Column(String, nullable=False)
    items = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    property = relationship("Property", back_populates="checklists")

    __table_args__ = (
        UniqueConstraint("property_id", "season", name="uq_seasonal_checklists_property_season"),
    )
