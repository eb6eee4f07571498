"""WebSocket channel carrying ledger and receipt events.

Clients connect to ``/ws``, get a ``session:connected`` greeting once they
are registered, and then receive JSON envelopes
``{"event": <name>, "data": <payload>}`` for every broadcast made while they
are connected. Inbound frames are read only to detect disconnects.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from chatline.services.delivery import EVENT_SESSION_CONNECTED, DeliveryBus

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def live_updates(websocket: WebSocket) -> None:
    """Register the connection on the delivery bus until it closes."""
    bus: DeliveryBus | None = getattr(websocket.app.state, "delivery_bus", None)
    if bus is None:
        logger.warning("Rejected live session: delivery bus is not running")
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    await websocket.accept()
    handle = bus.subscribe(websocket)
    try:
        await websocket.send_json({"event": EVENT_SESSION_CONNECTED, "data": {"sessions": len(bus)}})
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Client disconnected")
    finally:
        bus.unsubscribe(handle)
