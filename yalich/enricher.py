"""GitHub license fallback for dependencies whose registry had no license."""

from typing import Protocol

from yalich.github import RepoRecord, homepage_to_repo
from yalich.logging_config import logger
from yalich.models import Dependency

# GitHub's name for a license it could not classify
UNCLASSIFIED_LICENSE = "Other"


class SourceHost(Protocol):
    """Anything that can look up repository metadata (GitHubClient, or a test fake)."""

    def repo(self, owner: str, repo: str) -> RepoRecord: ...


class GitHubEnricher:
    """
    Backfill missing licenses from GitHub.

    Only dependencies with no license and a GitHub homepage cause a
    request. Errors from the client propagate and abort the run.

    Example:
        enricher = GitHubEnricher(GitHubClient(session))
        dependency = enricher.enrich(dependency)
    """

    def __init__(self, github: SourceHost) -> None:
        self._github = github

    def enrich(self, dependency: Dependency) -> Dependency:
        """
        Fill `dependency.license` from GitHub when it is still missing.

        Args:
            dependency: Resolved dependency (modified in place)

        Returns:
            The same dependency

        Raises:
            SourceHostError: If the GitHub request fails
        """
        if dependency.license is not None:
            return dependency

        if not dependency.homepage:
            return dependency

        repo_ref = homepage_to_repo(dependency.homepage)
        if repo_ref is None:
            logger.debug(f"Homepage of {dependency.name} is not a GitHub repository: {dependency.homepage}")
            return dependency

        owner, repo = repo_ref
        logger.debug(f"Falling back to GitHub for {owner}/{repo}")
        record = self._github.repo(owner, repo)

        if record.license and record.license != UNCLASSIFIED_LICENSE:
            dependency.license = record.license
            logger.debug(f"License of {dependency.name} taken from GitHub: {record.license}")

        return dependency
