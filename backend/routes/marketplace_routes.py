import logging
import math

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_user
from backend.auth.jwt_handler import TokenClaims
from backend.database import get_db
from backend.models.marketplace_item import MarketplaceItem
from backend.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=['marketplace'])

# Largest value that fits the Numeric(10, 2) price column.
MAX_PRICE = 99_999_999.99


class CreateMarketplaceItemRequest(BaseModel):
    # Unknown fields such as a client supplied seller_id are dropped.
    title: str | None = None
    description: str | None = None
    price: float | None = None
    image_url: str | None = None

    @field_validator('title', 'description', 'image_url')
    @classmethod
    def strip_text(cls, value: str | None) -> str | None:
        if value is None:
            return None

        normalized = value.strip()
        return normalized or None


class MarketplaceItemResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    price: float
    image_url: str | None = None
    seller: str
    seller_id: int


class MessageResponse(BaseModel):
    message: str


@router.post('', response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    data: CreateMarketplaceItemRequest,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not data.title or not data.price:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Title and price are required',
        )

    if not math.isfinite(data.price):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Price must be a finite number',
        )

    if data.price < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Price cannot be negative',
        )

    if round(data.price, 2) > MAX_PRICE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Price cannot exceed {MAX_PRICE:,.2f}',
        )

    try:
        item = MarketplaceItem(
            seller_id=current_user.user_id,
            title=data.title,
            description=data.description,
            price=data.price,
            image_url=data.image_url,
        )
        db.add(item)
        db.commit()
        db.refresh(item)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Adding marketplace item failed for user %s', current_user.user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Server error while adding item',
        ) from exc

    logger.info('User %s listed item %s', current_user.user_id, item.id)
    return {'message': 'Item added successfully'}


@router.get('', response_model=list[MarketplaceItemResponse])
def list_items(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    del current_user

    try:
        rows = db.query(MarketplaceItem, User.name).join(
            User, MarketplaceItem.seller_id == User.id,
        ).order_by(MarketplaceItem.id.asc()).all()
    except SQLAlchemyError as exc:
        logger.exception('Fetching marketplace items failed')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Server error while fetching items',
        ) from exc

    return [
        MarketplaceItemResponse(
            id=item.id,
            title=item.title,
            description=item.description,
            price=item.price,
            image_url=item.image_url,
            seller=seller_name,
            seller_id=item.seller_id,
        )
        for item, seller_name in rows
    ]


@router.delete('/{item_id}', response_model=MessageResponse)
def delete_item(
    item_id: int,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        # Ownership is part of the DELETE itself so a concurrent request cannot slip in between.
        result = db.execute(
            delete(MarketplaceItem)
            .where(
                MarketplaceItem.id == item_id,
                MarketplaceItem.seller_id == current_user.user_id,
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            db.rollback()
            item = db.query(MarketplaceItem.id).filter(MarketplaceItem.id == item_id).first()
            if item is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail='Item not found',
                )

            logger.info('User %s tried to delete item %s owned by someone else', current_user.user_id, item_id)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='Unauthorized',
            )

        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Deleting marketplace item %s failed', item_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Server error while deleting item',
        ) from exc

    logger.info('User %s deleted item %s', current_user.user_id, item_id)
    return {'message': 'Item deleted successfully'}
