"""External collaborators: SMS delivery and QR rendering."""
