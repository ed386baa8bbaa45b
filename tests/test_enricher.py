"""Tests for the GitHub license fallback."""

import pytest

from yalich.enricher import GitHubEnricher
from yalich.exceptions import SourceHostError
from yalich.github import RepoRecord
from yalich.models import Dependency


class FakeGitHub:
    """Call-counting stand-in for GitHubClient."""

    def __init__(self, license=None, error=None):
        self.license = license
        self.error = error
        self.calls = []

    def repo(self, owner, repo):
        self.calls.append((owner, repo))
        if self.error:
            raise self.error
        return RepoRecord(
            full_name=f"{owner}/{repo}",
            html_url=f"https://github.com/{owner}/{repo}",
            license=self.license,
        )


def _dependency(license=None, homepage="https://github.com/acme/widget"):
    return Dependency(
        category="python",
        name="widget",
        url="https://pypi.org/project/widget/",
        license=license,
        homepage=homepage,
    )


class TestGitHubEnricher:
    def test_existing_license_short_circuits(self):
        github = FakeGitHub(license="Apache License 2.0")

        dependency = GitHubEnricher(github).enrich(_dependency(license="MIT"))

        assert dependency.license == "MIT"
        assert github.calls == []

    def test_missing_homepage(self):
        github = FakeGitHub(license="MIT License")

        dependency = GitHubEnricher(github).enrich(_dependency(homepage=None))

        assert dependency.license is None
        assert github.calls == []

    def test_non_github_homepage(self):
        github = FakeGitHub(license="MIT License")

        dependency = GitHubEnricher(github).enrich(_dependency(homepage="https://example.com"))

        assert dependency.license is None
        assert github.calls == []

    def test_fallback_adopts_repo_license(self):
        github = FakeGitHub(license="MIT License")

        dependency = GitHubEnricher(github).enrich(_dependency())

        assert github.calls == [("acme", "widget")]
        assert dependency.license == "MIT License"

    @pytest.mark.parametrize(
        "homepage",
        ["https://github.com/acme/widget/", "https://github.com/acme/widget#readme"],
    )
    def test_homepage_variants_query_same_repo(self, homepage):
        github = FakeGitHub(license="MIT License")

        GitHubEnricher(github).enrich(_dependency(homepage=homepage))

        assert github.calls == [("acme", "widget")]

    def test_other_license_is_ignored(self):
        github = FakeGitHub(license="Other")

        dependency = GitHubEnricher(github).enrich(_dependency())

        assert github.calls == [("acme", "widget")]
        assert dependency.license is None

    def test_repo_without_license(self):
        dependency = GitHubEnricher(FakeGitHub(license=None)).enrich(_dependency())
        assert dependency.license is None

    def test_errors_propagate(self):
        github = FakeGitHub(error=SourceHostError("Request for GitHub repository 'acme/widget' failed: HTTP 500"))

        with pytest.raises(SourceHostError, match="acme/widget"):
            GitHubEnricher(github).enrich(_dependency())
