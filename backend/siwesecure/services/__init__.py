"""Domain services for presence, logbook, reviews and inspections."""
