# eventhub/api/v1/endpoints/cron.py
"""
Sweep endpoints for an external scheduler.

Authenticated with ``Authorization: Bearer <CRON_SECRET>``. GET is accepted
because hosted cron services commonly only issue GETs.
"""
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from eventhub.api import deps
from eventhub.schemas.cron import SweepJob, SweepResult, TriggerSource
from eventhub.services.lifecycle.sweeper import run_sweep

router = APIRouter(
    prefix="/cron",
    tags=["Cron"],
    dependencies=[Depends(deps.verify_cron_secret)],
)


def _respond(result: SweepResult):
    if result.success:
        return result
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=result.model_dump(mode="json"),
    )


@router.api_route("/expire-events", methods=["GET", "POST"], response_model=SweepResult)
def expire_events(db: Session = Depends(deps.get_db)):
    return _respond(run_sweep(db, SweepJob.expire, triggered_by=TriggerSource.http_cron))


@router.api_route("/complete-events", methods=["GET", "POST"], response_model=SweepResult)
def complete_events(db: Session = Depends(deps.get_db)):
    return _respond(run_sweep(db, SweepJob.complete, triggered_by=TriggerSource.http_cron))
