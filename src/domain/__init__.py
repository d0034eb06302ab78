"""Domain layer - Pure authentication business logic.

Structure:
- entities/: Account, Session (refresh-token record), ActionToken
- value_objects/: TokenClaims, IdentityProfile, RequestContext
- enums/: Status, token type, provider and audit enums
- protocols/: Ports implemented by infrastructure adapters
- events/: Things that happened (login failed, account locked, ...)
- errors/: Error factory and storage failure type

The domain layer defines WHAT the engine does, not HOW it is stored.
"""
