"""SQLAlchemy persistence for exchanges, accounting entries, identified properties and tax accounts."""
