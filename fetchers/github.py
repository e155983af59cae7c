"""GitHub GraphQL client that aggregates a user's open pull requests.

One aggregation walks every configured search query in order, pages through
each query's results with the GraphQL cursor, drops nodes whose URL was
already accepted, normalizes the rest into PullRequest records, and returns
them most recently updated first.

The walk is all or nothing: any failed page aborts the whole call and
nothing accepted so far is returned.
"""

import logging
from typing import Any, Iterator, Optional

import requests

from models.config_models import DEFAULT_SEARCH_QUERY
from models.data_models import PullRequest

logger = logging.getLogger(__name__)

GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"
USER_AGENT = "github-pr-dashboard"
PAGE_SIZE = 50

DEFAULT_QUERIES = (DEFAULT_SEARCH_QUERY,)

SEARCH_QUERY = """
query($query: String!, $cursor: String) {
  search(query: $query, type: ISSUE, first: %d, after: $cursor) {
    pageInfo { hasNextPage endCursor }
    nodes {
      ... on PullRequest {
        title
        url
        number
        isDraft
        headRefName
        createdAt
        updatedAt
        author { login avatarUrl }
        repository { nameWithOwner }
        reviewDecision
        commits(last: 1) {
          nodes {
            commit {
              statusCheckRollup { state }
            }
          }
        }
      }
    }
  }
}""" % PAGE_SIZE


class AggregationError(Exception):
    """Base class for failures while aggregating pull requests."""


class TransportError(AggregationError):
    """A search page came back with a non-success HTTP status."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"GitHub API error: {status}")


class QueryError(AggregationError):
    """GitHub accepted the request but reported an error in the payload."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


def _latest_status_state(node: dict[str, Any]) -> str:
    """Lower-cased check rollup state of the newest commit, or "none"."""
    commits = (node.get("commits") or {}).get("nodes") or []
    if not commits:
        return "none"
    commit = (commits[0] or {}).get("commit") or {}
    rollup = commit.get("statusCheckRollup") or {}
    state = rollup.get("state")
    return state.lower() if state else "none"


def normalize_pr_node(node: dict[str, Any]) -> PullRequest:
    """Map a raw GraphQL PullRequest search node to a PullRequest record.

    All defaulting for fields GitHub may omit lives here:
    - no author (deleted account) -> "unknown" with an empty avatar
    - no head branch name -> "unknown"
    - no status rollup on the last commit -> "none", otherwise lower-cased
    - no review decision -> ""

    Args:
        node: One element of data.search.nodes

    Returns:
        Frozen PullRequest model
    """
    author = node.get("author") or {}
    repository = node.get("repository") or {}

    return PullRequest(
        title=node.get("title") or "",
        url=node["url"],
        number=node["number"],
        repo_name=repository.get("nameWithOwner") or "unknown",
        author=author.get("login") or "unknown",
        author_avatar=author.get("avatarUrl") or "",
        created_at=node["createdAt"],
        updated_at=node["updatedAt"],
        status_state=_latest_status_state(node),
        review_decision=node.get("reviewDecision") or "",
        is_draft=bool(node.get("isDraft")),
        branch=node.get("headRefName") or "unknown",
    )


class GitHubPRAggregator:
    """Fetch and merge open PRs for the token's owner across search queries."""

    def __init__(
        self,
        token: str,
        queries: Optional[list[str]] = None,
        timeout: float = 15.0
    ):
        """Initialize GraphQL client.

        Args:
            token: OAuth access token of the signed-in user
            queries: Search query strings, walked in order (default: open PRs involving @me)
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.queries = list(queries) if queries else list(DEFAULT_QUERIES)
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _fetch_search_page(self, query: str, cursor: Optional[str]) -> dict[str, Any]:
        """Request one page of search results.

        Returns:
            The data.search object: {"pageInfo": {...}, "nodes": [...]}

        Raises:
            TransportError: On any non-2xx HTTP status
            QueryError: If the payload carries GraphQL errors
        """
        response = requests.post(
            GITHUB_GRAPHQL_URL,
            headers=self.headers,
            json={
                "query": SEARCH_QUERY,
                "variables": {"query": query, "cursor": cursor},
            },
            timeout=self.timeout,
        )

        if not response.ok:
            logger.error(f"GraphQL search failed with status {response.status_code}")
            raise TransportError(response.status_code)

        payload = response.json()
        errors = payload.get("errors")
        if errors:
            first = errors[0]
            if isinstance(first, dict):
                message = first.get("message") or "Unknown GraphQL error"
            else:
                message = str(first)
            logger.error(f"GraphQL search returned {len(errors)} error(s): {message}")
            raise QueryError(message)

        return payload["data"]["search"]

    def _iter_query_nodes(self, query: str) -> Iterator[dict[str, Any]]:
        """Yield raw nodes from every page of one search query."""
        cursor = None
        page = 0
        has_next = True

        while has_next:
            page += 1
            search = self._fetch_search_page(query, cursor)
            nodes = search.get("nodes") or []

            logger.debug(f"Query '{query}' page {page}: {len(nodes)} nodes")
            yield from nodes

            page_info = search.get("pageInfo") or {}
            has_next = bool(page_info.get("hasNextPage"))
            cursor = page_info.get("endCursor")

            if has_next and not cursor:
                # Requesting again without a cursor would restart at page 1
                raise QueryError(f"GitHub reported more results for '{query}' without a cursor")

    def fetch_open_prs(self) -> list[PullRequest]:
        """Walk all queries and return deduplicated PRs, newest update first.

        Queries are walked sequentially in declared order. A node is
        accepted only the first time its URL is seen, across pages and
        across queries. Search hits that are not pull requests come back
        as empty objects and are skipped.

        Returns:
            List of PullRequest sorted by updated_at descending

        Raises:
            AggregationError: If any page fails; no partial result is returned
        """
        seen: set[str] = set()
        prs: list[PullRequest] = []

        for query in self.queries:
            logger.info(f"Searching open PRs: {query}")

            for node in self._iter_query_nodes(query):
                url = (node or {}).get("url")
                if not url or url in seen:
                    continue
                seen.add(url)
                prs.append(normalize_pr_node(node))

        prs.sort(key=lambda pr: pr.updated_at, reverse=True)

        logger.info(f"Aggregated {len(prs)} open PRs from {len(self.queries)} queries")
        return prs


def fetch_open_prs(
    access_token: str,
    queries: Optional[list[str]] = None,
    timeout: float = 15.0
) -> list[PullRequest]:
    """Aggregate open PRs for an access token.

    This is the only entry point the web layer calls. Every failure is
    reported as an AggregationError: network errors and malformed payloads
    become QueryError so no raw requests/KeyError escapes to the caller.

    Args:
        access_token: OAuth token from the user's session
        queries: Optional search queries (default: open PRs involving @me)
        timeout: Per-request timeout in seconds

    Returns:
        List of PullRequest sorted by updated_at descending

    Raises:
        TransportError: A page returned a non-success status
        QueryError: GitHub reported an error, or the walk failed unexpectedly
    """
    aggregator = GitHubPRAggregator(access_token, queries=queries, timeout=timeout)

    try:
        return aggregator.fetch_open_prs()
    except AggregationError:
        raise
    except requests.RequestException as e:
        logger.error(f"Network error while fetching PRs: {e}")
        raise QueryError(f"Could not reach GitHub: {e}") from e
    except Exception as e:
        logger.exception("Unexpected error while fetching PRs")
        raise QueryError(f"Unexpected response from GitHub ({type(e).__name__})") from e
