"""Import profile configuration (YAML + JSON schema)."""
