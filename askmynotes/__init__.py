"""Ask My Notes: grounded study assistant over uploaded notes."""
