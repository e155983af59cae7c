"""
PR Dashboard - personal view of open GitHub pull requests.

Provides a FastAPI backend that signs the user in with GitHub OAuth and
serves their open PRs, merged across search queries, to the frontend.
"""
