"""Users service: user records, validation and storage."""
