"""FileChat feature modules."""
