from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import httpx


class AbstractProfileFetcher(ABC):
	"""Interface for clients that summarize a public coding profile."""

	platform: str

	def __init__(
		self,
		*,
		base_url: str,
		timeout_seconds: float = 15.0,
		transport: httpx.AsyncBaseTransport | None = None,
	) -> None:
		self.base_url = base_url.rstrip("/")
		self.timeout_seconds = timeout_seconds
		self._transport = transport

	def _client(self, headers: dict[str, str] | None = None) -> httpx.AsyncClient:
		return httpx.AsyncClient(
			base_url=self.base_url,
			timeout=self.timeout_seconds,
			headers=headers,
			transport=self._transport,
		)

	@abstractmethod
	async def fetch(self, username: str) -> dict[str, Any]:
		"""Fetch and summarize ``username``'s profile.

		Args:
			username: Handle on the upstream platform.

		Returns:
			dict[str, Any]: JSON-serializable profile summary.

		Raises:
			ProfileNotFoundError: If the platform has no such user.
			UpstreamAppError: If the platform is unreachable or answers garbage.
		"""
		...
