from siteflow.models.actuals import (
    ActualLabourHours,
    ActualMaterial,
    ActualPlantHours,
    ActualQuantity,
    CostEntry,
    DailyLog,
)
from siteflow.models.commercial import ProgressClaim, Variation
from siteflow.models.enums import AllocationType, ClaimStatus, CostType, ProjectStatus, VariationStatus
from siteflow.models.programme import ProgrammeTask, ProgrammeWbsMapping
from siteflow.models.project import Project
from siteflow.models.resources import LabourType, MaterialType, PlantType, SubcontractorType
from siteflow.models.settings import CompanySettings
from siteflow.models.wbs import (
    WbsItem,
    WbsLabourAssignment,
    WbsMaterialAssignment,
    WbsPlantAssignment,
    WbsSubcontractorAssignment,
)

__all__ = [
    "ActualLabourHours",
    "ActualMaterial",
    "ActualPlantHours",
    "ActualQuantity",
    "CostEntry",
    "DailyLog",
    "ProgressClaim",
    "Variation",
    "AllocationType",
    "ClaimStatus",
    "CostType",
    "ProjectStatus",
    "VariationStatus",
    "ProgrammeTask",
    "ProgrammeWbsMapping",
    "Project",
    "LabourType",
    "MaterialType",
    "PlantType",
    "SubcontractorType",
    "CompanySettings",
    "WbsItem",
    "WbsLabourAssignment",
    "WbsMaterialAssignment",
    "WbsPlantAssignment",
    "WbsSubcontractorAssignment",
]
