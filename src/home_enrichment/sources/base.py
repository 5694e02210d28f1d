"""Base source adapter interface."""

import asyncio
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

import httpx
from pydantic import BaseModel

from home_enrichment.logging import get_logger
from home_enrichment.models import SourceLabel

logger = get_logger(__name__)

QueryT = TypeVar("QueryT", bound=BaseModel)
ResultT = TypeVar("ResultT", bound=BaseModel)

DEFAULT_TIMEOUT = 5.0


class BaseSource(ABC, Generic[QueryT, ResultT]):
    """Abstract base class for external data providers.

    Subclasses implement :meth:`_fetch` and may raise freely; :meth:`fetch` is
    the only place provider failures are caught and turned into ``None``.
    """

    #: Provider name used in log events
    name: str = "source"

    def __init__(self, client: httpx.AsyncClient, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    @property
    @abstractmethod
    def label(self) -> SourceLabel:
        """Return the provenance label recorded when this source contributes."""
        ...

    @abstractmethod
    async def _fetch(self, query: QueryT) -> ResultT | None:
        """Query the provider; ``None`` means it had nothing for this query."""
        ...

    async def fetch(self, query: QueryT) -> ResultT | None:
        """Query the provider within the per-call timeout.

        Returns:
            The mapped result, or None on no data, non-success status,
            malformed body, network failure or timeout.
        """
        try:
            async with asyncio.timeout(self._timeout):
                result = await self._fetch(query)
        except TimeoutError:
            logger.warning("source_timeout", source=self.name, timeout=self._timeout)
            return None
        except httpx.HTTPStatusError as e:
            logger.warning(
                "source_http_error",
                source=self.name,
                status=e.response.status_code,
            )
            return None
        except httpx.HTTPError as e:
            logger.warning("source_request_failed", source=self.name, error=str(e))
            return None
        except ValueError as e:
            # Covers undecodable JSON and response-model validation errors
            logger.warning("source_malformed_response", source=self.name, error=str(e))
            return None
        except Exception as e:
            logger.warning(
                "source_unexpected_error",
                source=self.name,
                error=str(e),
                exc_info=True,
            )
            return None

        if result is None:
            logger.debug("source_no_data", source=self.name)
        return result
