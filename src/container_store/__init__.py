"""Container store: REST API over an audited MongoDB data-access layer."""
