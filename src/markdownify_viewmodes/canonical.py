"""Canonical ``Link`` header for Markdown responses.

Markdown renditions of a node point back to the node's preferred URL with
``Link: <url>; rel="canonical"`` so that consumers can deduplicate them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from .logger import get_logger

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from .protocols import AliasRepository, LanguageManager

MARKDOWN_MEDIA_TYPE = "text/markdown"

logger = get_logger()


def _node_id(node: Any) -> int | str | None:
    """Get a node ID from a route attribute that is either an ID or a node object."""
    if isinstance(node, bool):
        return None
    if isinstance(node, int):
        return node
    if isinstance(node, str):
        return node if node.isdigit() else None
    return getattr(node, "id", None)


def canonical_link_header(
    base_url: str,
    node_id: int | str,
    langcode: str,
    alias_repository: AliasRepository,
) -> str:
    """Build the Link header value pointing at a node's preferred URL.

    Args:
        base_url: Scheme and host, e.g. "https://example.com"
        node_id: The node ID
        langcode: Language to look the alias up in
        alias_repository: Where path aliases are looked up

    Returns:
        The header value, e.g. '<https://example.com/my-article>; rel="canonical"'
    """
    system_path = f"/node/{node_id}"
    alias = alias_repository.lookup_by_system_path(system_path, langcode)
    path = alias.alias if alias is not None else system_path
    canonical_url = f"{base_url.rstrip('/')}{path}"
    logger.debug("Canonical link for %s (%s): %s", system_path, langcode, canonical_url)
    return f'<{canonical_url}>; rel="canonical"'


class CanonicalLinkResponder:
    """Adds the canonical link header to Markdown node responses."""

    def __init__(
        self, alias_repository: AliasRepository, language_manager: LanguageManager
    ) -> None:
        self.alias_repository = alias_repository
        self.language_manager = language_manager

    def on_response(self, request: Request, response: Response) -> None:
        """Set the canonical Link header on a response, if it applies.

        Does nothing unless the response is Markdown and the request was
        routed to a node.
        """
        content_type = response.headers.get("content-type", "")
        if MARKDOWN_MEDIA_TYPE not in content_type:
            return

        node = request.path_params.get("node")
        if node is None:
            node = getattr(request.state, "node", None)
        if node is None:
            return

        node_id = _node_id(node)
        if node_id is None:
            return

        langcode = self.language_manager.get_current_language(request).id
        base_url = f"{request.url.scheme}://{request.url.netloc}"
        response.headers["Link"] = canonical_link_header(
            base_url, node_id, langcode, self.alias_repository
        )


class CanonicalLinkMiddleware(BaseHTTPMiddleware):
    """Starlette/FastAPI middleware running CanonicalLinkResponder on every response."""

    def __init__(
        self,
        app: ASGIApp,
        alias_repository: AliasRepository,
        language_manager: LanguageManager,
    ) -> None:
        super().__init__(app)
        self.responder = CanonicalLinkResponder(alias_repository, language_manager)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        self.responder.on_response(request, response)
        return response


def add_canonical_link_middleware(
    app: Any,
    alias_repository: AliasRepository,
    language_manager: LanguageManager,
) -> None:
    """Install the canonical link middleware on a FastAPI or Starlette app."""
    app.add_middleware(
        CanonicalLinkMiddleware,
        alias_repository=alias_repository,
        language_manager=language_manager,
    )
