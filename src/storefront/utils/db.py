"""Schema management for relational providers.

The memory provider needs no schema; ``sqlite`` and ``postgresql`` providers
get their tables created from the models Protean derives for every
aggregate and entity.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

from storefront.domain import logger

_RELATIONAL_PROVIDERS = ("sqlite", "postgresql")


def _relational_providers(domain: Domain):
    for name, provider in domain.providers.items():
        if provider.conn_info["provider"] in _RELATIONAL_PROVIDERS:
            yield name, provider


def _register_models(domain: Domain, provider) -> None:
    # Accessing the DAO forces the model to be built and bound to the
    # provider's SQLAlchemy metadata.
    for registry in (domain.registry.aggregates, domain.registry.entities):
        for _, record in registry.items():
            if record.cls.meta_.provider == provider.name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> list[str]:
    """Create tables on every relational provider. Returns the provider names touched."""
    touched = []
    with domain.domain_context():
        for name, provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            _register_models(domain, provider)
            provider._metadata.create_all(engine)
            logger.info("schema_created", provider=name)
            touched.append(name)
    return touched


def drop_db(domain: Domain) -> list[str]:
    """Drop tables on every relational provider. Returns the provider names touched."""
    touched = []
    with domain.domain_context():
        for name, provider in _relational_providers(domain):
            engine = create_engine(provider.conn_info["database_uri"])
            provider._metadata.drop_all(engine)
            logger.info("schema_dropped", provider=name)
            touched.append(name)
    return touched
