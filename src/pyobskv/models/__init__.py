"""Data models handed to store observers."""

from pyobskv.models.mutation import ABSENT, Absent, Mutation, MutationKind

__all__ = [
    "ABSENT",
    "Absent",
    "Mutation",
    "MutationKind",
]
