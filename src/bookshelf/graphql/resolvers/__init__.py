"""Resolver package for the GraphQL schema.

Resolvers map field invocations onto the request loaders or the domain store
and convert domain records into GraphQL types.
"""

# Intentionally empty; functions are defined in sibling modules.
