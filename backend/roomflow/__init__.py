"""RoomFlow invoicing backend."""
