"""Use-case actions composed from Klaviyo client calls."""

from .delete_profile import DeleteProfileAction
from .identify_customer import IdentifyCustomerAction
from .list_membership import ListMembershipAction
from .sync_catalog import SyncCatalogAction
from .track_event import TrackEventAction

__all__ = [
    "DeleteProfileAction",
    "IdentifyCustomerAction",
    "ListMembershipAction",
    "SyncCatalogAction",
    "TrackEventAction",
]
