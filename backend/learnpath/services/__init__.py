from .access_policy import AccessPolicy, Decision, access_policy
from .containment import ContainmentManager, containment_manager
from .identity import Identity, MembershipResolver, membership_resolver
from .locks import ResourceLocks, resource_locks
from .pathway_items import PathwayItemService, pathway_item_service

__all__ = [
    "AccessPolicy",
    "Decision",
    "access_policy",
    "ContainmentManager",
    "containment_manager",
    "Identity",
    "MembershipResolver",
    "membership_resolver",
    "ResourceLocks",
    "resource_locks",
    "PathwayItemService",
    "pathway_item_service",
]
