from __future__ import annotations

import logging

from dependency_injector import containers, providers

from ..config.settings import AppConfig
from ..core.usecases.create_document import CreateDocumentUseCase
from ..infra.http_client import HttpClient
from ..infra.rate_limiter import FixedWindowRateLimiter

logger = logging.getLogger(__name__)


def rate_limiter_resource(request_limit, interval_seconds):
	logger.info(f"Initializing rate limiter: {request_limit} request(s) per {interval_seconds}s")
	with FixedWindowRateLimiter(max_requests=int(request_limit), window_seconds=interval_seconds) as limiter:
		yield limiter
	logger.debug("Rate limiter closed")


def http_client_resource(rate_limiter, timeout_seconds):
	"""Create the HTTP client as a resource with proper cleanup.

	Every request issued through it first acquires a permit from the rate limiter.
	"""
	client = HttpClient(
		base_headers={"Accept": "application/json"},
		timeout_seconds=timeout_seconds,
		rate_limiter=rate_limiter,
	)
	try:
		yield client
	finally:
		logger.debug("Closing HTTP client")
		client.close()


class Container(containers.DeclarativeContainer):
	config = providers.Configuration(pydantic_settings=[AppConfig()])

	# Shared by every thread using this container
	rate_limiter = providers.Resource(
		rate_limiter_resource,
		request_limit=config.request_limit,
		interval_seconds=config.interval_seconds,
	)

	http_client = providers.Resource(
		http_client_resource,
		rate_limiter=rate_limiter,
		timeout_seconds=config.timeout_seconds,
	)

	create_document_uc = providers.Factory(
		CreateDocumentUseCase,
		http_client=http_client,
		api_url=config.api_url,
	)
