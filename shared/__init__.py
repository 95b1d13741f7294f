"""
Shared Kernel

Base classes and utilities shared by the booking engine's apps:
domain building blocks, value objects, the unit of work and the
message bus used to publish domain events after commit.
"""
