"""mc_coin REST endpoints.

POST   /meme-coins                    — create, 201 + Location header
GET    /meme-coins/{coin_id}          — detail (served from cache when warm)
PUT    /meme-coins/{coin_id}          — replace description
DELETE /meme-coins/{coin_id}          — delete, 204
POST   /meme-coins/{coin_id}/poke     — popularity_score += 1
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.mc_coin.application.schemas import CreateCoinRequest, UpdateCoinRequest
from src.mc_coin.application.service import CoinApplicationService
from src.mc_common.database import get_db_session
from src.mc_common.response import ApiResponse, success_response

router = APIRouter(prefix="/meme-coins", tags=["meme-coins"])

_service = CoinApplicationService()

CoinId = Annotated[int, Path(gt=0, description="Coin ID")]


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create meme coin",
)
async def create_coin(
    request: Request,
    response: Response,
    body: CreateCoinRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    coin = await _service.create_coin(db, body.name, body.description)
    response.headers["Location"] = f"{request.url.path.rstrip('/')}/{coin.id}"
    resp = success_response(coin.model_dump(), message="Coin created")
    resp.request_id = _get_request_id(request)
    return resp


@router.get("/{coin_id}", response_model=ApiResponse, summary="Get meme coin")
async def get_coin(
    coin_id: CoinId,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    coin = await _service.get_coin(db, coin_id)
    resp = success_response(coin.model_dump())
    resp.request_id = _get_request_id(request)
    return resp


@router.put("/{coin_id}", response_model=ApiResponse, summary="Update meme coin")
async def update_coin(
    coin_id: CoinId,
    request: Request,
    body: UpdateCoinRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.update_coin(db, coin_id, body.description)
    resp = success_response(message="OK")
    resp.request_id = _get_request_id(request)
    return resp


@router.delete(
    "/{coin_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete meme coin",
)
async def delete_coin(
    coin_id: CoinId,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> Response:
    await _service.delete_coin(db, coin_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{coin_id}/poke", response_model=ApiResponse, summary="Poke meme coin")
async def poke_coin(
    coin_id: CoinId,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    await _service.poke_coin(db, coin_id)
    resp = success_response(message="OK")
    resp.request_id = _get_request_id(request)
    return resp
