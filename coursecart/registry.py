"""
registry.py - Ordered collection of the resources going into one cartridge

One registry belongs to one assembly run. Insertion order is the order of
the manifest resource list and of the navigation items, so it is preserved.
"""

import logging
from typing import Dict, Iterator, List, Optional

from coursecart.errors import duplicate_href_error, duplicate_identifier_error
from coursecart.models import Resource

log = logging.getLogger(__name__)

RESOURCE_TYPE_WIKI_PAGE = "wiki_page"


class ResourceRegistry:
    """Keyed by identifier; rejects duplicate identifiers and archive paths."""

    def __init__(self):
        self._resources: Dict[str, Resource] = {}
        self._hrefs: Dict[str, str] = {}

    def add(self, resource: Resource) -> Resource:
        existing = self._resources.get(resource.identifier)
        if existing is not None:
            raise duplicate_identifier_error(resource.identifier, existing.title, resource.title)

        owner = self._hrefs.get(resource.href)
        if owner is not None:
            raise duplicate_href_error(resource.href, owner, resource.identifier)

        self._resources[resource.identifier] = resource
        self._hrefs[resource.href] = resource.identifier
        log.debug("Registered %s %s -> %s", resource.type, resource.identifier, resource.href)
        return resource

    def get(self, identifier: str) -> Optional[Resource]:
        return self._resources.get(identifier)

    def all(self) -> List[Resource]:
        return list(self._resources.values())

    def by_type(self, resource_type: str) -> List[Resource]:
        return [r for r in self._resources.values() if r.type == resource_type]

    def exists(self, identifier: str) -> bool:
        return identifier in self._resources

    def href_taken(self, href: str) -> bool:
        return href in self._hrefs

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.all())

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._resources
