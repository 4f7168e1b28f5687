"""Domain layer - survey records, codec, validation and the index protocol."""
