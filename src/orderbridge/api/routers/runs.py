"""Read-only views over processing runs."""

from __future__ import annotations

from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Query

from orderbridge.api.deps import UnitOfWorkFactoryDep  # noqa: TC001
from orderbridge.api.schemas import ProcessingErrorOut, ProcessingRunDetailOut, ProcessingRunOut
from orderbridge.domain.visibility import (
    DEFAULT_ERROR_LIMIT,
    DEFAULT_RUN_LIMIT,
    get_run_details,
    list_recent_runs,
)

router = APIRouter(prefix="/api/import-runs", tags=["runs"])


@router.get("", response_model=list[ProcessingRunOut])
def list_runs(
    unit_of_work_factory: UnitOfWorkFactoryDep,
    limit: int = Query(default=DEFAULT_RUN_LIMIT, ge=1, le=100),
) -> list[ProcessingRunOut]:
    """Most recent runs first."""

    runs = list_recent_runs(unit_of_work_factory=unit_of_work_factory, limit=limit)
    return [ProcessingRunOut.model_validate(run) for run in runs]


@router.get("/{run_id}", response_model=ProcessingRunDetailOut)
def get_run(run_id: UUID, unit_of_work_factory: UnitOfWorkFactoryDep) -> ProcessingRunDetailOut:
    details = get_run_details(
        run_id, unit_of_work_factory=unit_of_work_factory, error_limit=DEFAULT_ERROR_LIMIT
    )
    if details is None:
        raise HTTPException(status_code=404, detail=f"Processing run {run_id} not found")

    summary = ProcessingRunOut.model_validate(details.run)
    return ProcessingRunDetailOut(
        **summary.model_dump(),
        errors=[ProcessingErrorOut.model_validate(error) for error in details.errors],
    )
