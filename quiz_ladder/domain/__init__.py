"""Domain layer (pure logic).

- Keep game rules and calculations here: ladder, selection, aids, state machine.
- Avoid I/O: no DB sessions, no scheduler, no settings lookups.
- Time and randomness are passed in as arguments (`now`, `rng`).
"""
