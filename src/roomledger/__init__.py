"""RoomLedger bill settlement engine."""
