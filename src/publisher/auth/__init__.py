"""Authentication and authorization.

Learn: three layers, leaves first:
1. Token service (jwt.py) — issues/verifies signed session tokens
2. Auth guard (dependencies.py) — bearer token → CurrentIdentity, plus role gates
3. Access policy (policy.py) — per-row ownership rules for works and translations

Passwords are hashed with bcrypt (password.py).
"""
