"""FileChat Voice Module - Server-side settings for browser speech."""
