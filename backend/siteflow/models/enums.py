import enum


class ProjectStatus(str, enum.Enum):
    tender = "tender"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


class AllocationType(str, enum.Enum):
    percent = "percent"
    value = "value"


class CostType(str, enum.Enum):
    plant = "plant"
    labour = "labour"
    material = "material"
    subcontractor = "subcontractor"
    other = "other"


class VariationStatus(str, enum.Enum):
    draft = "draft"
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"


class ClaimStatus(str, enum.Enum):
    draft = "draft"
    submitted = "submitted"
    certified = "certified"
    paid = "paid"
