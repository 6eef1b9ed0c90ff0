# controller/track_controller.py
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, Response, UploadFile, status
from controller.controller_dependencies import (
    authenticate,
    enforce_max_upload_size,
    get_track_service,
    rate_limiter,
)
from model.api import (
    MessageResponse,
    TrackCountResponse,
    TrackListResponse,
    TrackResponse,
)
from model.user import User
from service.track_service import TrackService
from util.constants import GPX_MEDIA_TYPE, InternalURIs

track_router = APIRouter(tags=["tracks"], dependencies=[Depends(rate_limiter)])


def _attachment(file_name: str) -> str:
    quoted = quote(file_name)
    if quoted != file_name:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{file_name}"'


@track_router.post(
    InternalURIs.TRACKS,
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def upload_track(
    user: User = Depends(authenticate),
    file: Optional[UploadFile] = Depends(enforce_max_upload_size),
    service: TrackService = Depends(get_track_service),
) -> MessageResponse:
    await service.upload(user.namespace_id, file)
    return MessageResponse(message="File uploaded successfully")


@track_router.get(InternalURIs.TRACKS, response_model=TrackListResponse)
async def list_tracks(
    user: User = Depends(authenticate),
    service: TrackService = Depends(get_track_service),
) -> TrackListResponse:
    return TrackListResponse(tracks=await service.list(user.namespace_id))


# Registered before TRACK_BY_INDEX so "count" never reaches the int converter.
@track_router.get(InternalURIs.TRACK_COUNT, response_model=TrackCountResponse)
async def count_tracks(
    user: User = Depends(authenticate),
    service: TrackService = Depends(get_track_service),
) -> TrackCountResponse:
    return TrackCountResponse(count=await service.count(user.namespace_id))


@track_router.get(InternalURIs.TRACK_BY_ID, response_model=TrackResponse)
async def get_track_by_id(
    track_id: int,
    user: User = Depends(authenticate),
    service: TrackService = Depends(get_track_service),
) -> TrackResponse:
    return await service.get_by_id(user.namespace_id, track_id)


@track_router.get(InternalURIs.TRACK_BY_INDEX, response_model=TrackResponse)
async def get_track_by_index(
    index: int,
    user: User = Depends(authenticate),
    service: TrackService = Depends(get_track_service),
) -> TrackResponse:
    return await service.get_by_index(user.namespace_id, index)


@track_router.get(InternalURIs.TRACK_DOWNLOAD)
async def download_track(
    file_name: str,
    user: User = Depends(authenticate),
    service: TrackService = Depends(get_track_service),
) -> Response:
    stored = await service.download(user.namespace_id, file_name)
    return Response(
        content=stored.content,
        media_type=GPX_MEDIA_TYPE,
        headers={"Content-Disposition": _attachment(stored.name)},
    )


@track_router.delete(InternalURIs.TRACK_DELETE, response_model=MessageResponse)
async def delete_track(
    file_name: str,
    user: User = Depends(authenticate),
    service: TrackService = Depends(get_track_service),
) -> MessageResponse:
    await service.delete(user.namespace_id, file_name)
    return MessageResponse(message="File deleted successfully")
