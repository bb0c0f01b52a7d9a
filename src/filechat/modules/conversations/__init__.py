"""FileChat Conversations Module - Conversation CRUD and history blobs."""
