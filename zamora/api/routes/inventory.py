"""Manager stock routes: item list, low-stock report, stock movements and snapshots."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from zamora.api.deps import get_caller, get_db, get_property_or_404
from zamora.auth.policy import Action, Caller, authorize
from zamora.models.inventory import InventoryItem
from zamora.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    LowStockItemResponse,
    LowStockResponse,
    SnapshotCreate,
    SnapshotCreatedResponse,
    SnapshotListResponse,
    SnapshotSummary,
    StockItemDetailResponse,
    StockListResponse,
    StockMovementResponse,
    StockSummary,
    StockTransactionCreate,
    StockTransactionListResponse,
    StockTransactionResponse,
)
from zamora.services import inventory as inventory_service

router = APIRouter(prefix="/api/mobile/manager/stock", tags=["inventory"])


def _item_response(item: InventoryItem) -> InventoryItemResponse:
    response = InventoryItemResponse.model_validate(item)
    response.is_low_stock = inventory_service.is_low_stock(item)
    return response


# Fixed paths are registered before /{item_id} so they are not captured by it.


@router.get("/low-stock", response_model=LowStockResponse)
async def low_stock_report(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> LowStockResponse:
    """Items at or below their minimum, most urgent first."""
    authorize(caller, Action.STOCK_READ, property_id)

    items = await inventory_service.list_items(db, property_id)
    entries = inventory_service.triage_low_stock(items)
    return LowStockResponse(
        count=len(entries),
        items=[
            LowStockItemResponse(
                id=entry.item.id,
                name=entry.item.name,
                category=entry.item.category,
                unit=entry.item.unit,
                quantity=entry.quantity,
                min_quantity=entry.min_quantity,
                shortage=entry.shortage,
                urgency=entry.urgency,
                supplier_name=entry.item.supplier_name,
            )
            for entry in entries
        ],
        alert_message=inventory_service.alert_message(len(entries)),
    )


@router.post("/transactions", response_model=StockMovementResponse, status_code=status.HTTP_201_CREATED)
async def record_stock_movement(
    body: StockTransactionCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> StockMovementResponse:
    """Stock in, out, waste or a counted adjustment."""
    item = await inventory_service.get_item(db, body.item_id)
    authorize(caller, Action.STOCK_MOVE, item.property_id)
    item = await inventory_service.get_item(db, item.id, for_update=True)

    transaction = await inventory_service.record_movement(
        db,
        item,
        movement_type=body.type,
        quantity=body.quantity,
        reason=body.reason,
        cost_at_time=body.cost_at_time,
        performed_by=caller.id,
    )
    return StockMovementResponse(
        item=_item_response(item),
        transaction=StockTransactionResponse.model_validate(transaction),
    )


@router.get("/transactions", response_model=StockTransactionListResponse)
async def list_stock_movements(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    item_id: uuid.UUID | None = Query(None, alias="itemId"),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> StockTransactionListResponse:
    authorize(caller, Action.STOCK_READ, property_id)
    transactions = await inventory_service.recent_transactions(
        db, item_id=item_id, property_id=property_id, limit=limit
    )
    return StockTransactionListResponse(
        transactions=[StockTransactionResponse.model_validate(t) for t in transactions],
        count=len(transactions),
    )


@router.post("/snapshot", response_model=SnapshotCreatedResponse, status_code=status.HTTP_201_CREATED)
async def take_stock_snapshot(
    body: SnapshotCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> SnapshotCreatedResponse:
    """Freeze current stock; repeating it the same day replaces that day's snapshot."""
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.STOCK_MANAGE, body.property_id)

    snapshot = await inventory_service.take_snapshot(
        db, body.property_id, body.snapshot_type, notes=body.notes, created_by=caller.id
    )
    return SnapshotCreatedResponse(
        snapshot_id=snapshot.id,
        message=f"{body.snapshot_type.capitalize()} snapshot created successfully",
        snapshot_date=snapshot.snapshot_date,
    )


@router.get("/snapshot", response_model=SnapshotListResponse)
async def list_stock_snapshots(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    snapshot_type: str | None = Query(None, alias="type", pattern="^(daily|weekly|monthly)$"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    limit: int = Query(inventory_service.SNAPSHOT_LIST_LIMIT, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> SnapshotListResponse:
    authorize(caller, Action.STOCK_READ, property_id)
    snapshots = await inventory_service.list_snapshots(
        db,
        property_id,
        snapshot_type=snapshot_type,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
    )
    return SnapshotListResponse(
        snapshots=[
            SnapshotSummary(
                id=s.id,
                snapshot_type=s.snapshot_type,
                snapshot_date=s.snapshot_date,
                total_value=s.total_value,
                item_count=len(s.items or []),
                notes=s.notes,
                created_at=s.created_at,
            )
            for s in snapshots
        ]
    )


@router.get("", response_model=StockListResponse)
async def list_stock(
    property_id: uuid.UUID = Query(..., alias="propertyId"),
    category: str | None = Query(None),
    search: str | None = Query(None),
    low_stock_only: bool = Query(False, alias="lowStockOnly"),
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> StockListResponse:
    authorize(caller, Action.STOCK_READ, property_id)

    items = await inventory_service.list_items(db, property_id, category=category, search=search)
    if low_stock_only:
        items = [item for item in items if inventory_service.is_low_stock(item)]

    return StockListResponse(
        items=[_item_response(item) for item in items],
        summary=StockSummary(
            total_items=len(items),
            low_stock_count=sum(1 for item in items if inventory_service.is_low_stock(item)),
            total_inventory_value=inventory_service.inventory_value(items),
        ),
    )


@router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_item(
    body: InventoryItemCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> InventoryItemResponse:
    await get_property_or_404(db, body.property_id)
    authorize(caller, Action.STOCK_MANAGE, body.property_id)

    item = InventoryItem(**body.model_dump())
    db.add(item)
    await db.flush()
    return _item_response(item)


@router.get("/{item_id}", response_model=StockItemDetailResponse)
async def get_stock_item(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> StockItemDetailResponse:
    """Item with its 20 most recent movements."""
    item = await inventory_service.get_item(db, item_id)
    authorize(caller, Action.STOCK_READ, item.property_id)
    transactions = await inventory_service.recent_transactions(db, item_id=item.id)
    return StockItemDetailResponse(
        item=_item_response(item),
        transactions=[StockTransactionResponse.model_validate(t) for t in transactions],
    )


@router.put("/{item_id}", response_model=InventoryItemResponse)
async def update_stock_item(
    item_id: uuid.UUID,
    body: InventoryItemUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_caller),
) -> InventoryItemResponse:
    item = await inventory_service.get_item(db, item_id)
    authorize(caller, Action.STOCK_MANAGE, item.property_id)

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(item, field, value)
    await db.flush()
    return _item_response(item)
