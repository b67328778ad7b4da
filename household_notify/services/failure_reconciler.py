"""Prune endpoints the push transport reports as permanently invalid."""

import asyncio
import logging

from household_notify.domain.endpoint import DeliveryOutcome, Endpoint
from household_notify.interface.protocols import EndpointStore


logger = logging.getLogger(__name__)


class FailureReconciler:
    """Delete every endpoint record holding a token that can never succeed again.

    Only the permanent-invalidity codes trigger deletion; transient and unknown
    failures are left for the next send to retry naturally. Tokens are looked up
    across all users because the same token may be stored under more than one
    owner.
    """

    def __init__(self, endpoint_store: EndpointStore) -> None:
        self._endpoint_store = endpoint_store

    @staticmethod
    def invalid_tokens(tokens: list[str], outcomes: list[DeliveryOutcome]) -> list[str]:
        """Return the distinct tokens whose outcome is permanently invalid, in token order."""
        if len(tokens) != len(outcomes):
            raise ValueError(f"Got {len(outcomes)} outcomes for {len(tokens)} tokens")

        invalid: dict[str, None] = {}
        for token, outcome in zip(tokens, outcomes, strict=True):
            if outcome.is_permanently_invalid:
                invalid.setdefault(token, None)
        return list(invalid)

    async def reconcile(self, tokens: list[str], outcomes: list[DeliveryOutcome]) -> list[Endpoint]:
        """Delete endpoints for permanently invalid tokens.

        Args:
            tokens: Tokens that were dispatched to
            outcomes: Delivery outcomes aligned with tokens

        Returns:
            Endpoint records that were deleted
        """
        invalid = self.invalid_tokens(tokens, outcomes)
        if not invalid:
            return []

        logger.info("Cleaning invalid tokens: %d", len(invalid), extra={"invalid_count": len(invalid)})

        results = await asyncio.gather(*(self._purge_token(token) for token in invalid))
        deleted = [endpoint for endpoints in results for endpoint in endpoints]

        logger.info(
            "Reconciliation complete",
            extra={"invalid_count": len(invalid), "deleted_count": len(deleted)},
        )
        return deleted

    async def _purge_token(self, token: str) -> list[Endpoint]:
        try:
            matches = await self._endpoint_store.find_endpoints_by_token(token)
        except Exception as e:
            logger.error("Failed to look up endpoints for invalid token", extra={"error": str(e)})
            return []

        outcomes = await asyncio.gather(
            *(self._endpoint_store.delete_endpoint(endpoint) for endpoint in matches),
            return_exceptions=True,
        )

        deleted = []
        for endpoint, outcome in zip(matches, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.error(
                    "Failed to delete invalid endpoint",
                    extra={"endpoint_id": endpoint.id, "user_id": endpoint.user_id, "error": str(outcome)},
                )
                continue
            deleted.append(endpoint)
        return deleted
