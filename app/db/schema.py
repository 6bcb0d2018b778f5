from typing import Optional, List, Dict, Any
from datetime import datetime, date
import uuid
from sqlmodel import SQLModel, Field, Relationship, JSON
from enum import Enum


class UserRole(str, Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    TECHNICIAN = "technician"
    VIEWER = "viewer"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"      # Signed up, waiting for admin approval
    INACTIVE = "inactive"


class QRStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"


class InspectionType(str, Enum):
    ROUTINE = "routine"
    SPECIAL = "special"
    EMERGENCY = "emergency"
    MAINTENANCE = "maintenance"


class InspectionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MaintenanceType(str, Enum):
    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    EMERGENCY = "emergency"
    REPLACEMENT = "replacement"


class MaintenanceStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AuditAction(str, Enum):
    """Well-known activity tags. The column itself stays a free string."""
    QR_SCAN = "QR_SCAN"
    TMS_UPDATE = "TMS_UPDATE"


class TimestampMixin(SQLModel):
    """
    Standard audit timestamps for database records.
    Every entity inheriting from this mixin tracks when it was originally
    created and when it was last modified.
    """
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="The exact UTC timestamp when this record was first persisted. Example: '2024-03-11 14:30:00'"
    )
    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column_kwargs={"onupdate": datetime.utcnow},
        description="The exact UTC timestamp when this record was last modified. Updates automatically."
    )


class User(TimestampMixin, SQLModel, table=True):
    """
    A staff member's profile and login identity.
    The role decides what the user may do; the account status gates
    whether they may do anything at all (new sign-ups wait as 'pending'
    until an admin approves them).
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the user."
    )
    email: str = Field(
        unique=True,
        index=True,
        description="The login email address. Example: 'r.sharma@ir.gov.in'"
    )
    hashed_password: str = Field(
        description="The salted bcrypt hash of the password. Never store plain text."
    )
    name: str = Field(
        description="Full display name. Example: 'Rakesh Sharma'"
    )
    employee_id: str = Field(
        unique=True,
        index=True,
        description="Railway employee number. Example: 'NR-DLI-10422'"
    )
    role: UserRole = Field(
        default=UserRole.VIEWER,
        description="Authorization role. Example: 'technician'"
    )
    department: Optional[str] = Field(
        default=None,
        description="Department the user belongs to. Example: 'Engineering'"
    )
    zone: Optional[str] = Field(
        default=None,
        description="Railway zone of posting. Example: 'Northern'"
    )
    division: Optional[str] = Field(
        default=None,
        description="Railway division of posting. Example: 'Delhi'"
    )
    status: AccountStatus = Field(
        default=AccountStatus.PENDING,
        description="Account lifecycle status. Only 'active' accounts can call the API."
    )


class TrackFitting(TimestampMixin, SQLModel, table=True):
    """
    A catalog entry for a type of track fitting (clip, liner, pad, bolt).
    Entries are keyed by part number and are only ever upserted, either by
    the procurement sync or by manual entry.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the catalog entry."
    )
    part_number: str = Field(
        unique=True,
        index=True,
        description="Procurement part number. Example: 'TF-ERC-MK3'"
    )
    name: str = Field(
        index=True,
        description="Display name. Example: 'Elastic Rail Clip Mk-III'"
    )
    category: Optional[str] = Field(
        default=None,
        index=True,
        description="Fitting category. Example: 'clip'"
    )
    manufacturer: Optional[str] = Field(default=None)
    material: Optional[str] = Field(default=None)
    weight_kg: Optional[float] = Field(default=None, ge=0)
    dimensions: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_type=JSON,
        description="Free-form dimensions. Example: {'length_mm': 110}"
    )
    specifications: Dict[str, Any] = Field(
        default_factory=dict,
        sa_type=JSON,
        description="Free-form technical specification blob."
    )
    safety_standards: List[str] = Field(
        default_factory=list,
        sa_type=JSON,
        description="Applicable standards. Example: ['RDSO/T-3701']"
    )

    qr_codes: List["QRCode"] = Relationship(back_populates="fitting")


class QRCode(TimestampMixin, SQLModel, table=True):
    """
    One physically tagged, installed fitting.
    The generated code is globally unique and never changes; status and
    location change over time. Records are never deleted so that history
    stays attributable.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the QR record."
    )
    qr_code: str = Field(
        unique=True,
        index=True,
        description="The generated human-typeable code. Example: 'IR1710166200123042'"
    )
    fitting_id: uuid.UUID = Field(
        foreign_key="trackfitting.id",
        index=True,
        description="The catalog entry this unit is an instance of."
    )
    batch_number: Optional[str] = Field(default=None)
    manufacturing_date: Optional[date] = Field(default=None)
    installation_date: Optional[date] = Field(default=None)

    # Location
    zone: str = Field(index=True, description="Example: 'Northern'")
    division: str = Field(index=True, description="Example: 'Delhi'")
    section: str = Field(index=True, description="Example: 'Delhi-Ambala'")
    km_post: str = Field(description="Kilometre post. Example: '125.500'")
    track_number: Optional[str] = Field(default=None)
    location_details: Dict[str, Any] = Field(
        default_factory=dict,
        sa_type=JSON,
        description="Free-text description, coordinates and landmarks."
    )

    status: QRStatus = Field(
        default=QRStatus.ACTIVE,
        index=True,
        description="Lifecycle status. Example: 'active'"
    )
    qr_image_url: Optional[str] = Field(
        default=None,
        description="Public URL of the rendered QR image."
    )
    created_by: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="user.id",
        description="The user who registered the fitting."
    )

    fitting: TrackFitting = Relationship(back_populates="qr_codes")
    creator: Optional[User] = Relationship()
    inspections: List["Inspection"] = Relationship(back_populates="qr_code")
    maintenance_records: List["MaintenanceRecord"] = Relationship(
        back_populates="qr_code")


class Inspection(TimestampMixin, SQLModel, table=True):
    """An append-only inspection result for one QR record."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    qr_code_id: uuid.UUID = Field(foreign_key="qrcode.id", index=True)
    inspector_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="user.id", index=True)
    inspection_date: datetime = Field(
        default_factory=datetime.utcnow, index=True)
    inspection_type: InspectionType
    condition_rating: int = Field(
        ge=1, le=5,
        description="1 (critical) to 5 (excellent)."
    )
    observations: Optional[str] = Field(default=None)
    defects_found: List[str] = Field(default_factory=list, sa_type=JSON)
    recommendations: Optional[str] = Field(default=None)
    next_inspection_due: Optional[date] = Field(default=None)
    status: InspectionStatus = Field(default=InspectionStatus.COMPLETED)

    qr_code: QRCode = Relationship(back_populates="inspections")
    inspector: Optional[User] = Relationship()


class MaintenanceRecord(TimestampMixin, SQLModel, table=True):
    """An append-only maintenance action performed on one QR record."""
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    qr_code_id: uuid.UUID = Field(foreign_key="qrcode.id", index=True)
    technician_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="user.id", index=True)
    maintenance_date: datetime = Field(
        default_factory=datetime.utcnow, index=True)
    maintenance_type: MaintenanceType
    work_description: str
    parts_used: List[Dict[str, Any]] = Field(
        default_factory=list,
        sa_type=JSON,
        description="Example: [{'name': 'ERC Mk-III', 'quantity': 4}]"
    )
    labor_hours: Optional[float] = Field(default=None, ge=0)
    cost: Optional[float] = Field(default=None, ge=0)
    status: MaintenanceStatus = Field(default=MaintenanceStatus.COMPLETED)

    qr_code: QRCode = Relationship(back_populates="maintenance_records")
    technician: Optional[User] = Relationship()


class AuditLog(SQLModel, table=True):
    """
    Append-only activity log.
    Written as a side effect of scans and external updates; system-originated
    entries carry no user reference.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    qr_code_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="qrcode.id", index=True)
    user_id: Optional[uuid.UUID] = Field(
        default=None, foreign_key="user.id", index=True)
    action: str = Field(
        index=True,
        description="Free-form action tag. Example: 'QR_SCAN'"
    )
    details: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)

    qr_code: Optional[QRCode] = Relationship()
    user: Optional[User] = Relationship()
