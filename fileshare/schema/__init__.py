"""Executable GraphQL schema."""
from ariadne import make_executable_schema, upload_scalar

from fileshare.schema.type_defs import type_defs
from fileshare.schema.resolvers import query, mutation, subscription

schema = make_executable_schema(type_defs, query, mutation, subscription, upload_scalar)

__all__ = ["schema", "type_defs"]
