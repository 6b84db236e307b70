"""
Remote Schemas Module

Wire formats exchanged with the remote notes API. JSON field names are
camelCase (createdAt, updatedAt); Python attributes stay snake_case.
"""
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# Properties sent when creating a note remotely
class NotePayload(CamelModel):
    title: str
    body: str = ""
    tags: List[str] = []


# Properties sent when updating; updated_at is the optimistic-concurrency token
class NoteUpdatePayload(NotePayload):
    updated_at: str


# Canonical note as returned by the remote
class RemoteNote(CamelModel):
    id: str
    title: str
    body: str = ""
    tags: List[str] = []
    created_at: str
    updated_at: str
