"""
API router for crop-cycle task endpoints.
"""
from typing import Annotated

from fastapi import APIRouter, Path

from plantanim.api.dependencies import AdvisoryServiceDep
from plantanim.api.v1.models.requests import TaskStatusUpdate, TasksRequest
from plantanim.api.v1.models.responses import AckResponse, CropsResponse, TasksResponse
from plantanim.domain.crop_registry import list_crop_configs


router = APIRouter(tags=["tasks"])


@router.get(
    "/crops",
    response_model=CropsResponse,
    summary="List supported crops",
)
async def list_crops() -> CropsResponse:
    return CropsResponse(crops=list_crop_configs())


@router.post(
    "/tasks",
    response_model=TasksResponse,
    summary="Generate daily tasks",
    description="""
    Project each planting's crop calendar into dated tasks.

    Tasks cover the window from the current day in the cycle up to the
    look-ahead horizon (capped at the crop's cycle length). Past dates are
    never returned, finished cycles produce nothing, and saved statuses
    (Completed, Skipped) are merged in.
    """,
)
async def generate_tasks(
    body: TasksRequest,
    advisory_service: AdvisoryServiceDep,
) -> TasksResponse:
    if body.save and body.plantings is not None:
        await advisory_service.save_plantings(body.plantings)

    tasks = await advisory_service.get_tasks(
        plantings=body.plantings,
        now=body.now,
        look_ahead_days=body.look_ahead_days,
    )
    return TasksResponse(task_count=len(tasks), tasks=tasks)


@router.put(
    "/tasks/{task_id}/status",
    response_model=AckResponse,
    summary="Update a task's status",
)
async def update_task_status(
    task_id: Annotated[str, Path(description="Generated task id")],
    body: TaskStatusUpdate,
    advisory_service: AdvisoryServiceDep,
) -> AckResponse:
    saved = await advisory_service.update_task_status(task_id, body.status)
    return AckResponse(id=task_id, saved=saved)
