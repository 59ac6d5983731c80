"""Schema management for SQL-backed checkout deployments.

The memory provider used in development and tests needs no schema; these
helpers only act on ``sqlite`` and ``postgresql`` providers.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _register_models(domain: Domain, provider_name: str) -> None:
    # Touching ``_dao`` builds and registers the SQLAlchemy model for each
    # aggregate and entity stored in this provider.
    registries = (domain.registry.aggregates, domain.registry.entities)
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider_name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain):
    """Create tables for every SQL provider of the domain."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _SQL_PROVIDERS:
                _register_models(domain, provider.name)
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.create_all(engine)


def drop_db(domain: Domain):
    """Drop tables for every SQL provider of the domain."""
    with domain.domain_context():
        for _, provider in domain.providers.items():
            if provider.conn_info["provider"] in _SQL_PROVIDERS:
                engine = create_engine(provider.conn_info["database_uri"])
                provider._metadata.drop_all(engine)
