"""Token claim resolution and issuance."""
