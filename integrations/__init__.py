"""Optional third-party integrations (CRM, workflow webhook, conversion events)."""
