"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request

from orderbridge.domain.ports.unit_of_work import ReconciliationUnitOfWork  # noqa: TC001

UnitOfWorkFactory = Callable[[], ReconciliationUnitOfWork]


def get_unit_of_work_factory(request: Request) -> UnitOfWorkFactory:
    return request.app.state.unit_of_work_factory


UnitOfWorkFactoryDep = Annotated[UnitOfWorkFactory, Depends(get_unit_of_work_factory)]
