"""REST API over the archiving engine."""
