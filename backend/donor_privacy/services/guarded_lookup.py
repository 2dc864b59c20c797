"""Guarded Lookup — maps unexpected repository exceptions to LookupFailure.

Invariants:
    - DonorPrivacyError subclasses propagate unchanged
    - Any other exception becomes LookupFailure, chained to the original
    - Nothing is swallowed: a failed lookup never reads as "no privilege"
"""

import logging
from typing import Awaitable, TypeVar

from donor_privacy.core.errors import DonorPrivacyError, LookupFailure

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def guarded_lookup(entity: str, key: object, lookup: Awaitable[T]) -> T:
    try:
        return await lookup
    except DonorPrivacyError:
        raise
    except Exception as e:
        logger.error(
            f"{entity} lookup failed for {key}: {e}",
            extra={"error_code": "LOOKUP_FAILURE"},
        )
        raise LookupFailure(entity, str(key)) from e
