"""
Analysis API Router
Start, poll and cancel analysis runs
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from commentlens.api.schemas import AnalysisRunResponse
from commentlens.app.dependencies import (
    get_current_user_id,
    get_orchestrator,
    get_persistence_service,
)
from commentlens.services import AnalysisOrchestrator, AnalysisRun, PersistenceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/analysis", tags=["Analysis"])


def get_analysis_orchestrator() -> AnalysisOrchestrator:
    try:
        return get_orchestrator()
    except ValueError as e:
        logger.error(f"❌ Analysis unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))


def _owned_run(
    orchestrator: AnalysisOrchestrator, run_id: str, uid: str
) -> AnalysisRun:
    run = orchestrator.registry.get(run_id)
    if run is None or run.user_id != uid:
        raise HTTPException(404, detail=f"Analysis run not found: {run_id}")
    return run


@router.post("", response_model=AnalysisRunResponse, status_code=202)
async def start_analysis(
    url: str = Query("", description="YouTube video URL"),
    wait: bool = Query(False, description="Wait for the run to finish"),
    uid: str = Depends(get_current_user_id),
    persistence: PersistenceService = Depends(get_persistence_service),
    orchestrator: AnalysisOrchestrator = Depends(get_analysis_orchestrator),
):
    """
    Start an analysis run for ``url``

    - **url**: YouTube video URL in any common form
    - **wait**: return only once the run has finished
    """
    profile = await persistence.get_profile(uid)

    if wait:
        run = await orchestrator.run(url, profile, run=orchestrator.create_run(url, uid))
    else:
        run = orchestrator.start(url, profile, uid)

    logger.info(f"📨 Analysis {run.run_id} requested by {uid}: {run.status.value}")
    return AnalysisRunResponse(**run.to_dict())


@router.get("/{run_id}", response_model=AnalysisRunResponse)
async def get_analysis(
    run_id: str = Path(..., description="Run ID"),
    uid: str = Depends(get_current_user_id),
    orchestrator: AnalysisOrchestrator = Depends(get_analysis_orchestrator),
):
    run = _owned_run(orchestrator, run_id, uid)
    return AnalysisRunResponse(**run.to_dict())


@router.post("/{run_id}/cancel", response_model=AnalysisRunResponse)
async def cancel_analysis(
    run_id: str = Path(..., description="Run ID"),
    uid: str = Depends(get_current_user_id),
    orchestrator: AnalysisOrchestrator = Depends(get_analysis_orchestrator),
):
    """Cancel a running analysis; a spent credit is not refunded"""
    run = _owned_run(orchestrator, run_id, uid)
    if not orchestrator.cancel(run):
        raise HTTPException(409, detail=f"Analysis already {run.status.value}")
    return AnalysisRunResponse(**run.to_dict())
