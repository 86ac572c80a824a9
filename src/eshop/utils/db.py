from protean.domain import Domain


def setup_db(domain: Domain):
    """Setup database schema"""
    with domain.domain_context():
        # Creates tables for every aggregate and entity the configured providers own
        domain.setup_database()


def drop_db(domain: Domain):
    """Drop database schema"""
    with domain.domain_context():
        domain.drop_database()


def truncate_db(domain: Domain):
    """Delete all rows, keeping the schema"""
    with domain.domain_context():
        domain.truncate_database()
