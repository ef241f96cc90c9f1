"""Core call screening policy.

This module is platform-agnostic. It only relies on ports for storage, the
personal directory and call control, so any telephony integration can drive
it by building a CallEvent.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from callscreen.core import permissions
from callscreen.core.errors import CapabilityDenied, MalformedInput, StoreUnavailable, TerminationFailed
from callscreen.core.models import CallEvent, Contact, ContactType, Decision, DirectoryEntry, ScreeningResult
from callscreen.core.numbers import PRIVATE_NUMBER_CALLER, is_private, normalize
from callscreen.core.permissions import PermissionCache
from callscreen.core.ports import CallControlPort, DirectoryPort, RuleStorePort
from callscreen.core.provider import StoreProvider
from callscreen.core.settings_store import ENABLE_WHITELIST, SettingsStore

LOGGER = logging.getLogger(__name__)


class CallScreener:
    """Decides whether an incoming call is allowed or terminated."""

    def __init__(
        self,
        store_provider: StoreProvider[RuleStorePort],
        settings: SettingsStore,
        permission_cache: PermissionCache,
        directory: DirectoryPort,
        call_control: CallControlPort,
    ) -> None:
        self._store_provider = store_provider
        self._settings = settings
        self._permissions = permission_cache
        self._directory = directory
        self._call_control = call_control

    def screen(self, event: CallEvent) -> ScreeningResult:
        """Screen one call event. Always returns a decision."""

        try:
            return self._screen(event)
        except Exception:
            LOGGER.exception("Unexpected error while screening a call, allowing it")
            return ScreeningResult(Decision.ALLOW, "internal-error")

    def _screen(self, event: CallEvent) -> ScreeningResult:
        if not (
            self._permissions.is_granted(permissions.READ_PHONE_STATE)
            and self._permissions.is_granted(permissions.CALL_PHONE)
        ):
            LOGGER.debug("Call state permissions are missing, skipping screening")
            return ScreeningResult(Decision.ALLOW, "missing-call-permissions")

        if not event.is_ringing:
            return ScreeningResult(Decision.ALLOW, "not-ringing")

        # Private callers are only blocked in whitelist mode.
        if is_private(event.raw_number):
            if self._settings.get_boolean(ENABLE_WHITELIST):
                return self._terminate(None, PRIVATE_NUMBER_CALLER, "private-number")
            return ScreeningResult(Decision.ALLOW, "private-number", caller=PRIVATE_NUMBER_CALLER)

        try:
            number = self._normalize(event.raw_number or "")
        except MalformedInput:
            LOGGER.warning("Received call number is empty after normalization")
            return ScreeningResult(Decision.ALLOW, "empty-number")

        try:
            contacts = self._find_contacts(number)
        except StoreUnavailable:
            LOGGER.exception("Rule lookup failed for an incoming call, allowing it")
            return ScreeningResult(Decision.ALLOW, "store-unavailable", number=number)

        # Every entry is checked; one contact may appear once per matching number.
        white_listed = _find_contact_by_type(contacts, ContactType.WHITE_LIST)
        if white_listed is not None:
            return ScreeningResult(Decision.ALLOW, "white-list", number=number, caller=white_listed.name)

        caller = contacts[0].name if contacts else None

        if not self._settings.get_boolean(ENABLE_WHITELIST):
            return ScreeningResult(Decision.ALLOW, "whitelist-disabled", number=number, caller=caller)

        entry = self._lookup_directory(number)
        if entry is not None:
            return ScreeningResult(Decision.ALLOW, "in-directory", number=number, caller=entry.name)

        return self._terminate(number, caller or number, "not-whitelisted")

    @staticmethod
    def _normalize(raw_number: str) -> str:
        number = normalize(raw_number)
        if not number:
            raise MalformedInput(f"Number {raw_number!r} is empty after normalization")
        return number

    def _find_contacts(self, number: str) -> List[Contact]:
        store = self._store_provider.get()
        if store is None:
            raise StoreUnavailable("Rule store is not initialized")
        return store.find_contacts_by_number(number, include_numbers=False)

    def _lookup_directory(self, number: str) -> Optional[DirectoryEntry]:
        if not self._permissions.is_granted(permissions.READ_CONTACTS):
            LOGGER.debug("Directory lookup skipped, %s is not granted", permissions.READ_CONTACTS)
            return None
        try:
            return self._directory.lookup(number)
        except Exception:
            LOGGER.exception("Directory lookup failed, treating number as unknown")
            return None

    def _terminate(self, number: Optional[str], caller: str, reason: str) -> ScreeningResult:
        try:
            self._end_call()
        except (CapabilityDenied, TerminationFailed) as exc:
            LOGGER.warning("Could not terminate call from %s: %s", caller, exc)
        except Exception:
            LOGGER.exception("Call control failed while terminating call from %s", caller)
        else:
            LOGGER.info("Terminated call from %s (%s)", caller, reason)

        self._record_journal(caller, number, reason)
        return ScreeningResult(Decision.TERMINATE, reason, number=number, caller=caller)

    def _end_call(self) -> None:
        if not self._permissions.is_granted(permissions.CALL_PHONE):
            raise CapabilityDenied(permissions.CALL_PHONE)
        if not self._call_control.terminate_current_call():
            raise TerminationFailed("Call control reported failure")

    def _record_journal(self, caller: str, number: Optional[str], reason: str) -> None:
        store = self._store_provider.get()
        if store is None:
            return
        try:
            store.add_journal_record(caller, number, reason)
        except StoreUnavailable:
            LOGGER.exception("Failed to record terminated call from %s", caller)


def _find_contact_by_type(contacts: List[Contact], contact_type: ContactType) -> Optional[Contact]:
    for contact in contacts:
        if contact.type == contact_type:
            return contact
    return None
