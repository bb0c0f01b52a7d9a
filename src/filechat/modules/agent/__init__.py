"""FileChat Agent Module - Prompting, generation and response interpretation."""
