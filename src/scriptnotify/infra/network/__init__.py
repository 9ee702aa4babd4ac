from __future__ import annotations

"""
Network Communication Infrastructure.

Groups the external HTTP collaborators: the GitHub GraphQL transport used
for author channels and the upstream repository index downloader.
"""

from scriptnotify.infra.network.graphql_client import (
    ADD_DISCUSSION_COMMENT_MUTATION,
    CREATE_DISCUSSION_MUTATION,
    SEARCH_DISCUSSIONS_QUERY,
    GitHubGraphQLClient,
    GraphQLError,
)
from scriptnotify.infra.network.repo_fetcher import RepoFetchError, fetch_repo_index

__all__ = [
    "GitHubGraphQLClient",
    "GraphQLError",
    "SEARCH_DISCUSSIONS_QUERY",
    "CREATE_DISCUSSION_MUTATION",
    "ADD_DISCUSSION_COMMENT_MUTATION",
    "fetch_repo_index",
    "RepoFetchError",
]
