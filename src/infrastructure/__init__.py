"""Infrastructure layer - Adapters for the domain protocols (ports).

Structure:
- persistence/: In-memory tables and repositories (accounts, sessions,
  one-time action tokens)
- security/: bcrypt hashing, PyJWT token issuer, pyotp TOTP, opaque token
  generation
- events/: In-memory event bus and its audit, logging and email handlers
- audit/, email/, enrichers/, logging/: Side-effect adapters

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
