"""Application layer - Use cases and orchestration.

Structure:
- commands/: Command dataclasses and handlers (write operations)
- services/: Session ledger, MFA challenge, identity linker, storage guard
- dtos/: Handler results
- errors/: Mapping of internal errors to what callers may see

The application layer orchestrates domain logic but contains no storage or
crypto details; those arrive through domain protocols.
"""
