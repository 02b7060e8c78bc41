from decimal import Decimal

from pydantic import BaseModel


class MappingSummaryOut(BaseModel):
    total_tasks: int
    mapped_tasks: int
    unmapped_tasks: int
    total_wbs: int
    mapped_wbs: int
    unmapped_wbs: int
    total_mappings: int
    incomplete_allocations: int
    coverage_percent: int
    is_complete: bool


class UnmappedRecordOut(BaseModel):
    id: int
    code: str
    name: str


class IncompleteAllocationOut(UnmappedRecordOut):
    total_percent: Decimal


class MappingValidationOut(BaseModel):
    summary: MappingSummaryOut
    unmapped_tasks: list[UnmappedRecordOut]
    unmapped_wbs: list[UnmappedRecordOut]
    incomplete_allocations: list[IncompleteAllocationOut]
