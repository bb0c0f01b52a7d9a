"""FileChat core infrastructure: database, repositories, storage, generation."""
