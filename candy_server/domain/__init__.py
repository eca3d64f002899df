"""Domain layer (pure logic).

- Keep game rules and calculations here: levels, board, moves, progression, rarity.
- Avoid I/O: no DB sessions, no HTTP/FastAPI, no Redis.
- Deterministic functions only (time, seed and caller identity passed in as arguments).
"""
