"""In-process message memory."""
