from __future__ import annotations

"""
GitHub GraphQL Transport.

Thin requests-based client for the GitHub GraphQL API, plus the query and
mutation documents used to search, create and comment on discussions.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from scriptnotify.domain.constants import GRAPHQL_URL
from scriptnotify.infra.network.common import DEFAULT_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GRAPHQL DOCUMENTS
# -----------------------------------------------------------------------------

SEARCH_DISCUSSIONS_QUERY = """
query SearchDiscussions($searchQuery: String!, $first: Int!) {
  search(query: $searchQuery, type: DISCUSSION, first: $first) {
    nodes {
      ... on Discussion {
        id
        title
        number
      }
    }
  }
}
"""

CREATE_DISCUSSION_MUTATION = """
mutation CreateDiscussion($input: CreateDiscussionInput!) {
  createDiscussion(input: $input) {
    discussion {
      id
      number
      url
    }
  }
}
"""

ADD_DISCUSSION_COMMENT_MUTATION = """
mutation AddDiscussionComment($input: AddDiscussionCommentInput!) {
  addDiscussionComment(input: $input) {
    comment {
      id
      url
    }
  }
}
"""


class GraphQLError(Exception):
    """
    Raised when the GraphQL endpoint answers with an error document.

    Attributes:
        errors: Structured error objects returned by the API, if any.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors: List[Dict[str, Any]] = errors or []


class GitHubGraphQLClient:
    """
    Executes authenticated GraphQL operations against GitHub.

    A single requests.Session is reused across calls of one process run.
    """

    def __init__(
            self,
            token: str,
            endpoint: str = GRAPHQL_URL,
            timeout: int = DEFAULT_TIMEOUT,
            session: Optional[requests.Session] = None,
    ) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"bearer {token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })

    def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a GraphQL document and return its 'data' section.

        Args:
            query: GraphQL query or mutation text.
            variables: Operation variables.

        Returns:
            Dict[str, Any]: The decoded 'data' object.

        Raises:
            requests.exceptions.RequestException: Transport or HTTP failure.
            GraphQLError: The response carried errors or no data.
        """
        payload = {"query": query, "variables": variables or {}}
        response = self._session.post(self._endpoint, json=payload, timeout=self._timeout)
        response.raise_for_status()

        try:
            body = response.json()
        except ValueError as e:
            raise GraphQLError(f"Malformed GraphQL response: {e}") from e

        if not isinstance(body, dict):
            raise GraphQLError("Malformed GraphQL response: root is not an object.")

        errors = body.get("errors")
        if errors:
            errors_list = errors if isinstance(errors, list) else [errors]
            first = errors_list[0]
            message = first.get("message") if isinstance(first, dict) else str(first)
            raise GraphQLError(f"GraphQL request failed: {message}", errors=errors_list)

        data = body.get("data")
        if not isinstance(data, dict):
            raise GraphQLError("GraphQL response carried no data.")
        return data

    def close(self) -> None:
        self._session.close()
