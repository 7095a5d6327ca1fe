from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from framework.repository.unit_of_work import UnitOfWork, get_uow
from framework.response import ResponseModel
from apps.identity.context import RequestContext, get_request_context
from ..service import CommentService

router = APIRouter()


class CommentBody(BaseModel):
    # Length is checked after trimming, in the service
    content: str = ""


def get_comment_service(
    uow: UnitOfWork = Depends(get_uow),
    ctx: RequestContext = Depends(get_request_context),
) -> CommentService:
    return CommentService(uow, ctx)


@router.get("/task/{task_id}")
async def list_comments(task_id: int, service: CommentService = Depends(get_comment_service)):
    comments = await service.list_for_task(task_id)
    return ResponseModel.success(data=[c.to_dict() for c in comments], count=len(comments))


@router.get("/task/{task_id}/count")
async def count_comments(task_id: int, service: CommentService = Depends(get_comment_service)):
    return ResponseModel.success(data={"count": await service.count_for_task(task_id)})


@router.post("/task/{task_id}", status_code=status.HTTP_201_CREATED)
async def add_comment(task_id: int, body: CommentBody, service: CommentService = Depends(get_comment_service)):
    comment = await service.add_comment(task_id, body.content)
    return ResponseModel.success(message="Comment added successfully", data=comment.to_dict())


@router.put("/{comment_id}")
async def edit_comment(comment_id: int, body: CommentBody, service: CommentService = Depends(get_comment_service)):
    comment = await service.edit_comment(comment_id, body.content)
    return ResponseModel.success(message="Comment updated successfully", data=comment.to_dict())


@router.delete("/{comment_id}")
async def delete_comment(comment_id: int, service: CommentService = Depends(get_comment_service)):
    comment = await service.delete_comment(comment_id)
    return ResponseModel.success(message="Comment deleted successfully", data=comment.to_dict())
