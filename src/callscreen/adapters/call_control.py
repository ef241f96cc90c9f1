"""Call control adapters.

Ending a real call is platform specific; this adapter records termination
requests so the screening policy can be exercised without a telephony stack.
"""

from __future__ import annotations

import logging

LOGGER = logging.getLogger(__name__)


class DryRunCallControl:
    """CallControlPort that only logs and counts termination requests."""

    def __init__(self, succeed: bool = True) -> None:
        self._succeed = succeed
        self.terminations = 0

    def terminate_current_call(self) -> bool:
        self.terminations += 1
        LOGGER.info("Dry run: would terminate the current call")
        return self._succeed
