"""Pipeline driver: manifests -> names -> resolved dependencies -> enriched dependencies.

The run is sequential and fail-fast: the first error aborts it. Output is
grouped by ecosystem in the fixed order python, rust, node, with names
sorted within each ecosystem.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import requests

from yalich.config import Config
from yalich.enricher import GitHubEnricher
from yalich.github import GitHubClient
from yalich.logging_config import logger
from yalich.manifests import load_dependency_names
from yalich.models import CATEGORIES, Dependency
from yalich.resolvers import Resolver, create_resolvers


@dataclass
class PipelineStats:
    """Counts gathered during a run, for the summary table."""

    dependencies: Dict[str, int] = field(default_factory=lambda: {category: 0 for category in CATEGORIES})
    overridden_licenses: int = 0
    github_licenses: int = 0
    missing_licenses: int = 0

    @property
    def total(self) -> int:
        return sum(self.dependencies.values())


class Pipeline:
    """
    Resolve and enrich every dependency declared in the configured manifests.

    Example:
        with create_session(config.user_agent) as session:
            dependencies = create_pipeline(config, session).run()
    """

    def __init__(
        self,
        config: Config,
        resolvers: Dict[str, Resolver],
        enricher: GitHubEnricher,
        sample: bool = False,
    ) -> None:
        """
        Initialize the Pipeline.

        Args:
            config: Loaded configuration
            resolvers: category -> Resolver
            enricher: GitHub fallback for missing licenses
            sample: Only process the first dependency of each ecosystem
        """
        self._config = config
        self._resolvers = resolvers
        self._enricher = enricher
        self._sample = sample
        self.stats = PipelineStats()

    def collect_names(self) -> Dict[str, List[str]]:
        """Load every manifest and return the sorted dependency names per ecosystem."""
        names: Dict[str, List[str]] = {}
        for category in CATEGORIES:
            language = self._config.language(category)
            names[category] = load_dependency_names(category, language.manifests, language.exclude)
            if self._sample:
                names[category] = names[category][:1]
            logger.info(f"Found {len(names[category])} {category} dependencies")
        return names

    def resolve_all(self, names: Dict[str, List[str]]) -> List[Dependency]:
        """Resolve names ecosystem by ecosystem, in the given order."""
        dependencies: List[Dependency] = []
        for category in CATEGORIES:
            resolver = self._resolvers[category]
            for name in names.get(category, []):
                logger.debug(f"Resolving {category} dependency {name}")
                dependencies.append(resolver.resolve(name))
                self.stats.dependencies[category] += 1
            self.stats.overridden_licenses += resolver.overridden_licenses
        return dependencies

    def enrich_all(self, dependencies: List[Dependency]) -> List[Dependency]:
        """Run every resolved dependency through the GitHub fallback."""
        enriched = []
        for dependency in dependencies:
            had_license = dependency.license is not None
            dependency = self._enricher.enrich(dependency)
            if not had_license and dependency.license is not None:
                self.stats.github_licenses += 1
            if dependency.license is None:
                self.stats.missing_licenses += 1
                logger.warning(f"No license found for {dependency.purl}")
            enriched.append(dependency)
        return enriched

    def run(self) -> List[Dependency]:
        """
        Execute the whole pipeline.

        Returns:
            Enriched dependencies in output order

        Raises:
            YalichError: On the first manifest, registry, GitHub or data error
        """
        names = self.collect_names()
        logger.info("Resolving dependencies")
        dependencies = self.resolve_all(names)
        logger.info("Enriching dependencies without license from GitHub")
        return self.enrich_all(dependencies)


def create_pipeline(
    config: Config,
    session: requests.Session,
    sample: bool = False,
    github: Optional[GitHubClient] = None,
) -> Pipeline:
    """
    Wire resolvers and the enricher around one shared session.

    Args:
        config: Loaded configuration
        session: Session carrying the configured User-Agent
        sample: Only process the first dependency of each ecosystem
        github: GitHub client to use instead of the default one

    Returns:
        Ready-to-run Pipeline
    """
    resolvers = create_resolvers(session, config.overrides)
    enricher = GitHubEnricher(github or GitHubClient(session, token=config.github_token))
    return Pipeline(config, resolvers, enricher, sample=sample)
