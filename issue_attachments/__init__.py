"""Download GitHub issue comment attachments into a sandboxed directory."""
